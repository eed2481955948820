# storage/_utils.py

import os
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

GENERATED_REPORTS_TABLE = "generated_reports"
ALLOCATOR_GENERATED_REPORTS_TABLE = "allocator_generated_reports"

PROVIDER_DISTRIBUTION_TABLE = "provider_distribution"
REPLICA_DISTRIBUTION_TABLE = "replica_distribution"
CID_SHARING_TABLE = "cid_sharing"
PROVIDERS_TABLE = "providers"

_DB_FILENAME = "data_store.db"
_DEFAULT_DATA_STORE_DIR = Path.home() / ".datacap_checker"


def get_data_store_path() -> Path:
    """
    Resolve the directory holding the SQLite data store.

    Reads ``DATA_STORE_DIR`` on every call so the location can be changed at
    runtime, falling back to ``~/.datacap_checker``.

    Returns:
        Path: Data store directory (not necessarily existing yet).
    """
    configured = os.getenv("DATA_STORE_DIR")
    return Path(configured) if configured else _DEFAULT_DATA_STORE_DIR


def ttl_seconds() -> int:
    """
    Read the in-process cache time-to-live from ``CACHE_TTL_MINUTES``.

    Defaults to 24 hours. Zero disables expiry.

    Returns:
        int: TTL in seconds.

    Raises:
        ValueError: If the configured value is negative.
    """
    minutes = int(os.getenv("CACHE_TTL_MINUTES", "1440"))
    if minutes < 0:
        raise ValueError("CACHE_TTL_MINUTES must be >= 0")
    return minutes * 60


def max_cache_entries() -> int:
    """
    Read the per-cache entry bound from ``CACHE_MAX_ENTRIES`` (default 4096).

    Returns:
        int: Maximum number of entries kept by each in-process cache.

    Raises:
        ValueError: If the configured value is not positive.
    """
    entries = int(os.getenv("CACHE_MAX_ENTRIES", "4096"))
    if entries <= 0:
        raise ValueError("CACHE_MAX_ENTRIES must be > 0")
    return entries


@contextmanager
def connect() -> Iterator[sqlite3.Connection]:
    """
    Open a connection to the data store, creating the directory if needed.

    The connection runs in autocommit mode; multi-statement writes manage
    their own transactions.

    Yields:
        sqlite3.Connection: An open connection, closed on exit.
    """
    path = get_data_store_path()
    path.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(path / _DB_FILENAME, isolation_level=None)
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
    finally:
        conn.close()


def placeholders(count: int) -> str:
    """
    Build a comma-separated list of ``?`` parameters for an IN clause.

    Returns:
        str: For example ``"?,?,?"`` for a count of 3.
    """
    return ",".join("?" for _ in range(count))
