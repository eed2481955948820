# storage/test_storage_utils.py

from pathlib import Path

import pytest

from datacap_checker.storage._utils import (
    connect,
    get_data_store_path,
    max_cache_entries,
    placeholders,
    ttl_seconds,
)

pytestmark = pytest.mark.unit


def test_data_store_path_reads_environment(monkeypatch, tmp_path) -> None:
    """
    ARRANGE: DATA_STORE_DIR set to a custom directory
    ACT:     get_data_store_path
    ASSERT:  returns that directory
    """
    monkeypatch.setenv("DATA_STORE_DIR", str(tmp_path / "custom"))

    actual = get_data_store_path()

    assert actual == tmp_path / "custom"


def test_data_store_path_defaults_to_home(monkeypatch) -> None:
    """
    ARRANGE: DATA_STORE_DIR unset
    ACT:     get_data_store_path
    ASSERT:  path is ~/.datacap_checker
    """
    monkeypatch.delenv("DATA_STORE_DIR", raising=False)

    actual = get_data_store_path()

    assert actual == Path.home() / ".datacap_checker"


def test_ttl_seconds_defaults_to_one_day() -> None:
    """
    ARRANGE: CACHE_TTL_MINUTES unset
    ACT:     ttl_seconds
    ASSERT:  returns 86400
    """
    assert ttl_seconds() == 86400


def test_ttl_seconds_rejects_negative(monkeypatch) -> None:
    """
    ARRANGE: CACHE_TTL_MINUTES set to -5
    ACT:     ttl_seconds
    ASSERT:  raises ValueError
    """
    monkeypatch.setenv("CACHE_TTL_MINUTES", "-5")

    with pytest.raises(ValueError):
        ttl_seconds()


def test_max_cache_entries_rejects_zero(monkeypatch) -> None:
    """
    ARRANGE: CACHE_MAX_ENTRIES set to 0
    ACT:     max_cache_entries
    ASSERT:  raises ValueError
    """
    monkeypatch.setenv("CACHE_MAX_ENTRIES", "0")

    with pytest.raises(ValueError):
        max_cache_entries()


def test_connect_creates_database_directory() -> None:
    """
    ARRANGE: data store directory that does not exist yet
    ACT:     open and close a connection
    ASSERT:  directory now exists
    """
    with connect() as conn:
        conn.execute("SELECT 1")

    assert get_data_store_path().is_dir()


def test_placeholders_builds_parameter_list() -> None:
    """
    ARRANGE: count of 3
    ACT:     placeholders
    ASSERT:  returns "?,?,?"
    """
    assert placeholders(3) == "?,?,?"
