# application/__init__.py

from .models import ApplicationInfo
from .resolver import ApplicationInfoResolver, select_primary_record

__all__ = [
    "ApplicationInfo",
    "ApplicationInfoResolver",
    "select_primary_record",
]
