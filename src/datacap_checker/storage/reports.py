# storage/reports.py

import logging
import sqlite3

from datacap_checker.schemas import (
    AllocatorGeneratedReportRecord,
    GeneratedReportRecord,
)

from ._utils import (
    ALLOCATOR_GENERATED_REPORTS_TABLE,
    GENERATED_REPORTS_TABLE,
    connect,
)

logger = logging.getLogger(__name__)


def save_generated_report(client_address_id: str, file_path: str) -> int:
    """
    Append a generated report pointer for a client.

    Rows are never updated or deleted; ``created_at`` is assigned by the
    database.

    Args:
        client_address_id (str): The client address the report was built for.
        file_path (str): URL or path of the uploaded full report.

    Returns:
        int: The id of the inserted row.
    """
    with connect() as conn:
        _init_tables(conn)
        cursor = conn.execute(
            f"INSERT INTO {GENERATED_REPORTS_TABLE} "
            "(client_address_id, file_path) VALUES (?, ?)",
            (client_address_id, file_path),
        )
        logger.info("Recorded generated report for %s", client_address_id)
        return cursor.lastrowid


def load_latest_generated_report(
    client_address_id: str,
) -> GeneratedReportRecord | None:
    """
    Load the most recent report pointer for a client.

    Args:
        client_address_id (str): The client address.

    Returns:
        GeneratedReportRecord | None: The newest record, or None if the client
            has no reports.
    """
    with connect() as conn:
        _init_tables(conn)
        row = conn.execute(
            f"""
            SELECT id, client_address_id, file_path, created_at
            FROM {GENERATED_REPORTS_TABLE}
            WHERE client_address_id = ?
            ORDER BY created_at DESC, id DESC
            LIMIT 1
            """,
            (client_address_id,),
        ).fetchone()

    return _build_generated_report(row) if row else None


def load_generated_reports(client_address_id: str) -> list[GeneratedReportRecord]:
    """
    Load every report pointer for a client, newest first.

    Args:
        client_address_id (str): The client address.

    Returns:
        list[GeneratedReportRecord]: Records ordered by created_at descending.
    """
    with connect() as conn:
        _init_tables(conn)
        rows = conn.execute(
            f"""
            SELECT id, client_address_id, file_path, created_at
            FROM {GENERATED_REPORTS_TABLE}
            WHERE client_address_id = ?
            ORDER BY created_at DESC, id DESC
            """,
            (client_address_id,),
        ).fetchall()

    return [_build_generated_report(row) for row in rows]


def save_allocator_generated_report(
    address: str,
    address_id: str,
    name: str,
    url: str,
) -> int:
    """
    Append a report pointer keyed by an allocator-scoped identity.

    Args:
        address (str): Robust address of the allocator or client.
        address_id (str): Its id address.
        name (str): Display name recorded with the report.
        url (str): URL of the uploaded report.

    Returns:
        int: The id of the inserted row.
    """
    with connect() as conn:
        _init_tables(conn)
        cursor = conn.execute(
            f"INSERT INTO {ALLOCATOR_GENERATED_REPORTS_TABLE} "
            "(address, address_id, name, url) VALUES (?, ?, ?, ?)",
            (address, address_id, name, url),
        )
        return cursor.lastrowid


def load_latest_allocator_generated_report(
    address: str,
) -> AllocatorGeneratedReportRecord | None:
    """
    Load the newest allocator-scoped report pointer matching an address or
    id address.

    Returns:
        AllocatorGeneratedReportRecord | None: The newest record, or None.
    """
    records = load_allocator_generated_reports(address, limit=1)
    return records[0] if records else None


def load_allocator_generated_reports(
    address: str,
    *,
    limit: int | None = None,
) -> list[AllocatorGeneratedReportRecord]:
    """
    Load allocator-scoped report pointers matching either the robust address
    or the id address, newest first.

    Returns:
        list[AllocatorGeneratedReportRecord]: Matching records.
    """
    query = f"""
        SELECT id, address, address_id, name, url, created_at
        FROM {ALLOCATOR_GENERATED_REPORTS_TABLE}
        WHERE address = ? OR address_id = ?
        ORDER BY created_at DESC, id DESC
    """
    params: list[object] = [address, address]

    if limit is not None:
        query += " LIMIT ?"
        params.append(limit)

    with connect() as conn:
        _init_tables(conn)
        rows = conn.execute(query, params).fetchall()

    return [
        AllocatorGeneratedReportRecord(
            id=row_id,
            address=row_address,
            address_id=address_id,
            name=name,
            url=url,
            created_at=created_at,
        )
        for row_id, row_address, address_id, name, url, created_at in rows
    ]


def _build_generated_report(row: tuple) -> GeneratedReportRecord:
    """
    Build a GeneratedReportRecord from a selected row.
    """
    row_id, client_address_id, file_path, created_at = row
    return GeneratedReportRecord(
        id=row_id,
        client_address_id=client_address_id,
        file_path=file_path,
        created_at=created_at,
    )


def _init_tables(conn: sqlite3.Connection) -> None:
    """
    Initialises both report pointer tables and their indexes.

    Args:
        conn (sqlite3.Connection): The SQLite database connection to use.

    Returns:
        None
    """
    conn.execute(
        f"""
        CREATE TABLE IF NOT EXISTS {GENERATED_REPORTS_TABLE} (
            id                INTEGER PRIMARY KEY AUTOINCREMENT,
            client_address_id TEXT NOT NULL,
            file_path         TEXT NOT NULL,
            created_at        TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
        );
        """,
    )
    conn.execute(
        f"CREATE INDEX IF NOT EXISTS {GENERATED_REPORTS_TABLE}_client_address_id_index "
        f"ON {GENERATED_REPORTS_TABLE} (client_address_id);",
    )
    conn.execute(
        f"""
        CREATE TABLE IF NOT EXISTS {ALLOCATOR_GENERATED_REPORTS_TABLE} (
            id         INTEGER PRIMARY KEY AUTOINCREMENT,
            address    TEXT NOT NULL,
            address_id TEXT NOT NULL,
            name       TEXT NOT NULL,
            url        TEXT NOT NULL,
            created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
        );
        """,
    )
    conn.execute(
        f"CREATE INDEX IF NOT EXISTS {ALLOCATOR_GENERATED_REPORTS_TABLE}_address_index "
        f"ON {ALLOCATOR_GENERATED_REPORTS_TABLE} (address);",
    )
    conn.execute(
        f"CREATE INDEX IF NOT EXISTS {ALLOCATOR_GENERATED_REPORTS_TABLE}_address_id_index "
        f"ON {ALLOCATOR_GENERATED_REPORTS_TABLE} (address_id);",
    )
