# storage/test_distributions.py

import pytest

from datacap_checker.storage import (
    connect,
    load_cid_sharing_rows,
    load_first_clients,
    load_provider_distribution_rows,
    load_replica_distribution_rows,
)
from datacap_checker.storage.distributions import _init_tables

pytestmark = pytest.mark.unit


def _seed(sql: str, rows: list[tuple]) -> None:
    with connect() as conn:
        _init_tables(conn)
        conn.executemany(sql, rows)


def test_provider_rows_filtered_by_client_group() -> None:
    """
    ARRANGE: provider rows for two clients in the group and one outside
    ACT:     load_provider_distribution_rows for the group
    ASSERT:  only group rows, ordered by total deal size descending
    """
    _seed(
        "INSERT INTO provider_distribution VALUES (?, ?, ?, ?)",
        [
            ("f01", "f0100", "100", "80"),
            ("f02", "f0200", "300", "300"),
            ("f03", "f0300", "999", "999"),
        ],
    )

    actual = load_provider_distribution_rows(["f01", "f02"])

    assert actual == [("f0200", "300", "300"), ("f0100", "100", "80")]


def test_provider_rows_keep_large_sizes_exact() -> None:
    """
    ARRANGE: deal size beyond 64-bit range stored as text
    ACT:     load_provider_distribution_rows
    ASSERT:  size string is unchanged
    """
    size = "123456789012345678901234567890"
    _seed("INSERT INTO provider_distribution VALUES (?, ?, ?, ?)", [("f01", "f0100", size, size)])

    actual = load_provider_distribution_rows(["f01"])

    assert actual[0][1] == size


def test_replica_rows_ordered_by_replica_count() -> None:
    """
    ARRANGE: replica rows inserted out of order
    ACT:     load_replica_distribution_rows
    ASSERT:  rows ascend by num_of_replicas
    """
    _seed(
        "INSERT INTO replica_distribution VALUES (?, ?, ?, ?)",
        [("f01", 5, "10", "2"), ("f01", 1, "10", "10"), ("f01", 3, "10", "4")],
    )

    actual = [row[0] for row in load_replica_distribution_rows(["f01"])]

    assert actual == [1, 3, 5]


def test_cid_sharing_rows_loaded() -> None:
    """
    ARRANGE: one sharing row for the client
    ACT:     load_cid_sharing_rows
    ASSERT:  returns (other_client, total, count)
    """
    _seed("INSERT INTO cid_sharing VALUES (?, ?, ?, ?)", [("f01", "f1other", "2048", 7)])

    actual = load_cid_sharing_rows(["f01"])

    assert actual == [("f1other", "2048", 7)]


def test_first_clients_mapping() -> None:
    """
    ARRANGE: providers table with two providers
    ACT:     load_first_clients for one known and one unknown provider
    ASSERT:  mapping contains only the known provider
    """
    _seed("INSERT INTO providers VALUES (?, ?)", [("f0100", "f01"), ("f0200", "f09")])

    actual = load_first_clients(["f0100", "f0300"])

    assert actual == {"f0100": "f01"}


def test_loaders_return_empty_for_empty_group() -> None:
    """
    ARRANGE: no client ids
    ACT:     every loader
    ASSERT:  all return empty results
    """
    actual = (
        load_provider_distribution_rows([]),
        load_replica_distribution_rows([]),
        load_cid_sharing_rows([]),
        load_first_clients([]),
    )

    assert actual == ([], [], [], {})
