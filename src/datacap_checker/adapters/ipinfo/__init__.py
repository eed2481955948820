# ipinfo/__init__.py

from .api import locate_ip
from .config import IpInfoConfig

__all__ = ["IpInfoConfig", "locate_ip"]
