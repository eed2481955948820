# storage/distributions.py

import logging
import sqlite3
from collections.abc import Sequence

from ._utils import (
    CID_SHARING_TABLE,
    PROVIDER_DISTRIBUTION_TABLE,
    PROVIDERS_TABLE,
    REPLICA_DISTRIBUTION_TABLE,
    connect,
    placeholders,
)

logger = logging.getLogger(__name__)


def load_provider_distribution_rows(
    client_ids: Sequence[str],
) -> list[tuple[str, str, str]]:
    """
    Load per-provider deal totals for a group of client ids.

    Sizes are stored as decimal strings so arbitrarily large byte counts
    survive unchanged; the caller converts them. A provider may appear once
    per client in the group.

    Args:
        client_ids (Sequence[str]): Id addresses of the client group.

    Returns:
        list[tuple[str, str, str]]: (provider, total_deal_size,
            unique_data_size) rows ordered by total deal size descending.
    """
    if not client_ids:
        return []

    with connect() as conn:
        _init_tables(conn)
        return conn.execute(
            f"""
            SELECT provider, total_deal_size, unique_data_size
            FROM {PROVIDER_DISTRIBUTION_TABLE}
            WHERE client IN ({placeholders(len(client_ids))})
            ORDER BY CAST(total_deal_size AS REAL) DESC
            """,
            tuple(client_ids),
        ).fetchall()


def load_replica_distribution_rows(
    client_ids: Sequence[str],
) -> list[tuple[int, str, str]]:
    """
    Load deal totals keyed by replica count for a group of client ids.

    Args:
        client_ids (Sequence[str]): Id addresses of the client group.

    Returns:
        list[tuple[int, str, str]]: (num_of_replicas, total_deal_size,
            unique_data_size) rows ordered by replica count.
    """
    if not client_ids:
        return []

    with connect() as conn:
        _init_tables(conn)
        return conn.execute(
            f"""
            SELECT num_of_replicas, total_deal_size, unique_data_size
            FROM {REPLICA_DISTRIBUTION_TABLE}
            WHERE client IN ({placeholders(len(client_ids))})
            ORDER BY num_of_replicas ASC
            """,
            tuple(client_ids),
        ).fetchall()


def load_cid_sharing_rows(
    client_ids: Sequence[str],
) -> list[tuple[str, str, int]]:
    """
    Load the other clients that share unique content with the group.

    Args:
        client_ids (Sequence[str]): Id addresses of the client group.

    Returns:
        list[tuple[str, str, int]]: (other_client, total_deal_size,
            unique_cid_count) rows in storage order.
    """
    if not client_ids:
        return []

    with connect() as conn:
        _init_tables(conn)
        return conn.execute(
            f"""
            SELECT other_client, total_deal_size, unique_cid_count
            FROM {CID_SHARING_TABLE}
            WHERE client IN ({placeholders(len(client_ids))})
            """,
            tuple(client_ids),
        ).fetchall()


def load_first_clients(providers: Sequence[str]) -> dict[str, str]:
    """
    Load the historically first client of each provider.

    Args:
        providers (Sequence[str]): Provider ids.

    Returns:
        dict[str, str]: Mapping of provider to its first client id; providers
            without a record are absent.
    """
    if not providers:
        return {}

    logger.debug("Loading first clients for %d providers", len(providers))

    with connect() as conn:
        _init_tables(conn)
        rows = conn.execute(
            f"""
            SELECT provider, first_client
            FROM {PROVIDERS_TABLE}
            WHERE provider IN ({placeholders(len(providers))})
            """,
            tuple(providers),
        ).fetchall()

    return dict(rows)


def _init_tables(conn: sqlite3.Connection) -> None:
    """
    Ensures the upstream distribution tables exist.

    These tables are populated by an external aggregation job; creating them
    here lets a fresh data store be queried (returning no rows) and seeded.

    Args:
        conn (sqlite3.Connection): The SQLite database connection to use.

    Returns:
        None
    """
    conn.execute(
        f"""
        CREATE TABLE IF NOT EXISTS {PROVIDER_DISTRIBUTION_TABLE} (
            client           TEXT NOT NULL,
            provider         TEXT NOT NULL,
            total_deal_size  TEXT NOT NULL,
            unique_data_size TEXT NOT NULL,
            PRIMARY KEY (client, provider)
        ) WITHOUT ROWID;
        """,
    )
    conn.execute(
        f"""
        CREATE TABLE IF NOT EXISTS {REPLICA_DISTRIBUTION_TABLE} (
            client           TEXT NOT NULL,
            num_of_replicas  INTEGER NOT NULL,
            total_deal_size  TEXT NOT NULL,
            unique_data_size TEXT NOT NULL,
            PRIMARY KEY (client, num_of_replicas)
        ) WITHOUT ROWID;
        """,
    )
    conn.execute(
        f"""
        CREATE TABLE IF NOT EXISTS {CID_SHARING_TABLE} (
            client           TEXT NOT NULL,
            other_client     TEXT NOT NULL,
            total_deal_size  TEXT NOT NULL,
            unique_cid_count INTEGER NOT NULL,
            PRIMARY KEY (client, other_client)
        ) WITHOUT ROWID;
        """,
    )
    conn.execute(
        f"""
        CREATE TABLE IF NOT EXISTS {PROVIDERS_TABLE} (
            provider     TEXT PRIMARY KEY,
            first_client TEXT NOT NULL
        ) WITHOUT ROWID;
        """,
    )
