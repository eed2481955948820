# spark/test_spark_api.py

import datetime

import httpx
import pytest

from datacap_checker.adapters.spark import fetch_success_rates

pytestmark = pytest.mark.unit


def _client_factory(handler):
    return lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler))


async def test_fetch_success_rates_sends_date_window() -> None:
    """
    ARRANGE: handler recording query parameters
    ACT:     fetch_success_rates for a week
    ASSERT:  from/to are ISO dates
    """
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(dict(request.url.params))
        return httpx.Response(200, json=[])

    await fetch_success_rates(
        datetime.date(2024, 5, 1),
        datetime.date(2024, 5, 8),
        client_factory=_client_factory(handler),
    )

    assert seen[0] == {"from": "2024-05-01", "to": "2024-05-08"}


async def test_fetch_success_rates_drops_invalid_rows() -> None:
    """
    ARRANGE: summary with a valid row, an out-of-range rate and a null rate
    ACT:     fetch_success_rates
    ASSERT:  only the valid row survives
    """
    rows = [
        {"miner_id": "f01", "success_rate": 0.8},
        {"miner_id": "f02", "success_rate": 1.5},
        {"miner_id": "f03", "success_rate": None},
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=rows)

    actual = await fetch_success_rates(
        datetime.date(2024, 5, 1),
        datetime.date(2024, 5, 8),
        client_factory=_client_factory(handler),
    )

    assert [row.miner_id for row in actual] == ["f01"]
