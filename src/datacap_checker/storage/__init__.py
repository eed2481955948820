# storage/__init__.py

from ._utils import connect, get_data_store_path
from .cache import Cache, MemoryCache
from .distributions import (
    load_cid_sharing_rows,
    load_first_clients,
    load_provider_distribution_rows,
    load_replica_distribution_rows,
)
from .reports import (
    load_allocator_generated_reports,
    load_generated_reports,
    load_latest_allocator_generated_report,
    load_latest_generated_report,
    save_allocator_generated_report,
    save_generated_report,
)

__all__ = [
    # _utils
    "connect",
    "get_data_store_path",
    # cache
    "Cache",
    "MemoryCache",
    # distributions
    "load_cid_sharing_rows",
    "load_first_clients",
    "load_provider_distribution_rows",
    "load_replica_distribution_rows",
    # reports
    "load_allocator_generated_reports",
    "load_generated_reports",
    "load_latest_allocator_generated_report",
    "load_latest_generated_report",
    "save_allocator_generated_report",
    "save_generated_report",
]
