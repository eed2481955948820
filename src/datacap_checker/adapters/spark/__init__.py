# spark/__init__.py

from .api import fetch_success_rates

__all__ = ["fetch_success_rates"]
