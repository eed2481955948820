# tests/conftest.py

import pytest


@pytest.fixture(autouse=True)
def _isolated_data_store(tmp_path, monkeypatch) -> None:
    """
    Point the SQLite data store at a fresh directory for every test and
    clear credentials so no test talks to a real upstream.
    """
    monkeypatch.setenv("DATA_STORE_DIR", str(tmp_path / "data_store"))
    monkeypatch.delenv("CACHE_TTL_MINUTES", raising=False)
    monkeypatch.delenv("CACHE_MAX_ENTRIES", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("IPINFO_TOKEN", raising=False)
