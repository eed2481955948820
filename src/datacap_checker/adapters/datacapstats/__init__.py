# datacapstats/__init__.py

from .api import fetch_verified_clients
from .config import DatacapStatsConfig

__all__ = ["DatacapStatsConfig", "fetch_verified_clients"]
