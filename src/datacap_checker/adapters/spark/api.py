# spark/api.py

import datetime
import logging
from collections.abc import Callable

import httpx
from pydantic import ValidationError

from datacap_checker.schemas import SuccessRateFeedData

from .._utils import make_client, retry_async
from .config import SparkConfig

logger = logging.getLogger(__name__)

_config = SparkConfig()


async def fetch_success_rates(
    date_from: datetime.date,
    date_to: datetime.date,
    *,
    client_factory: Callable[[], httpx.AsyncClient] | None = None,
) -> list[SuccessRateFeedData]:
    """
    Fetch network-wide retrieval success rates per miner for a date range.

    Rows with a missing or out-of-range success rate are dropped.

    Returns:
        list[SuccessRateFeedData]: One row per miner with statistics.

    Raises:
        RetryExhaustedError: If the statistics API could not be reached.
    """
    logger.info(
        "Fetching retrieval success rates from %s to %s.",
        date_from.isoformat(),
        date_to.isoformat(),
    )

    factory = client_factory or make_client

    async def _request(client: httpx.AsyncClient) -> list[dict]:
        response = await client.get(
            _config.success_rate_url,
            params={"from": date_from.isoformat(), "to": date_to.isoformat()},
        )
        response.raise_for_status()
        return response.json()

    async with factory() as client:
        rows = await retry_async(
            lambda: _request(client),
            attempts=_config.max_attempts,
            description="retrieval success rate summary",
            retry_on=(httpx.HTTPError,),
        )

    return _parse_rows(rows)


def _parse_rows(rows: list[dict]) -> list[SuccessRateFeedData]:
    """
    Validate raw summary rows, skipping malformed entries.

    Returns:
        list[SuccessRateFeedData]: Valid rows.
    """
    parsed: list[SuccessRateFeedData] = []
    for row in rows:
        try:
            parsed.append(SuccessRateFeedData.model_validate(row))
        except ValidationError:
            logger.debug("Skipping malformed success rate row: %s", row)
    return parsed
