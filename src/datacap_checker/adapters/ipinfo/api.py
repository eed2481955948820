# ipinfo/api.py

import logging

import httpx

from datacap_checker.schemas import IpInfoFeedData

from .._utils import retry_async
from .config import IpInfoConfig

logger = logging.getLogger(__name__)


async def locate_ip(
    ip: str,
    client: httpx.AsyncClient,
    *,
    config: IpInfoConfig | None = None,
) -> IpInfoFeedData:
    """
    Look up the geographic location of an IP address.

    Bogon (private or reserved) addresses come back with ``bogon`` set and no
    location fields.

    Returns:
        IpInfoFeedData: Normalised location record.

    Raises:
        RetryExhaustedError: If ipinfo could not be reached.
    """
    active = config or IpInfoConfig()
    logger.info("Getting location for IP %s.", ip)

    async def _request() -> dict:
        response = await client.get(
            f"{active.base_url}/{ip}",
            params={"token": active.token} if active.token else None,
        )
        response.raise_for_status()
        return response.json()

    payload = await retry_async(
        _request,
        attempts=active.max_attempts,
        description=f"ipinfo lookup for {ip}",
        retry_on=(httpx.HTTPError,),
    )

    return IpInfoFeedData.model_validate(payload)
