# datacapstats/api.py

import logging
from collections.abc import Callable

import httpx
from pydantic import ValidationError

from datacap_checker.schemas import VerifiedClientFeedData

from .._utils import make_client, retry_async
from .config import DatacapStatsConfig

logger = logging.getLogger(__name__)

_config = DatacapStatsConfig()


async def fetch_verified_clients(
    address: str,
    *,
    client_factory: Callable[[], httpx.AsyncClient] | None = None,
) -> list[VerifiedClientFeedData]:
    """
    Fetch every verified-client record registered for an address.

    Retries transport and HTTP status errors up to the configured budget.
    Rows that fail validation are skipped.

    Returns:
        list[VerifiedClientFeedData]: Matching records, possibly empty.

    Raises:
        RetryExhaustedError: If the registry could not be reached.
    """
    logger.info("Fetching verified client records for %s.", address)

    factory = client_factory or make_client

    async with factory() as client:
        payload = await retry_async(
            lambda: _fetch_page(client, address),
            attempts=_config.max_attempts,
            description=f"verified client lookup for {address}",
            retry_on=(httpx.HTTPError,),
        )

    return _parse_rows(payload.get("data") or [])


async def _fetch_page(client: httpx.AsyncClient, address: str) -> dict:
    """
    Request the first page of registry rows filtered by address.

    Returns:
        dict: Decoded JSON payload.
    """
    response = await client.get(
        _config.verified_clients_url,
        params={"limit": _config.page_size, "page": 1, "filter": address},
    )
    response.raise_for_status()
    return response.json()


def _parse_rows(rows: list[dict]) -> list[VerifiedClientFeedData]:
    """
    Validate raw registry rows, dropping malformed entries.

    Returns:
        list[VerifiedClientFeedData]: Successfully validated rows.
    """
    parsed: list[VerifiedClientFeedData] = []
    for row in rows:
        try:
            parsed.append(VerifiedClientFeedData.model_validate(row))
        except ValidationError as error:
            logger.warning("Skipping malformed verified client row: %s", error)
    return parsed
