# glif/api.py

import logging
from collections.abc import Callable, Sequence

import httpx

from datacap_checker.schemas import MinerInfoFeedData

from .._utils import make_client, retry_async
from .config import GlifConfig

logger = logging.getLogger(__name__)

_config = GlifConfig()


class GlifResponseError(ValueError):
    """
    Raised when a JSON-RPC response carries no ``result``.
    """


async def lookup_id(
    address: str,
    *,
    client_factory: Callable[[], httpx.AsyncClient] | None = None,
) -> str:
    """
    Resolve a robust address (f1/f2/f3...) to its network id address (f0...).

    Returns:
        str: The id address.

    Raises:
        RetryExhaustedError: If the node could not resolve the address.
    """
    factory = client_factory or make_client

    async with factory() as client:
        return await _call_with_retry(client, "Filecoin.StateLookupID", address)


async def lookup_ids(
    addresses: Sequence[str],
    *,
    client_factory: Callable[[], httpx.AsyncClient] | None = None,
) -> list[str]:
    """
    Resolve several addresses to id addresses, preserving order.

    Addresses are resolved one after the other on a shared client; a single
    failure fails the whole group.

    Returns:
        list[str]: Id addresses in input order.

    Raises:
        RetryExhaustedError: If any address could not be resolved.
    """
    factory = client_factory or make_client

    async with factory() as client:
        return [
            await _call_with_retry(client, "Filecoin.StateLookupID", address)
            for address in addresses
        ]


async def fetch_miner_info(
    provider: str,
    *,
    client_factory: Callable[[], httpx.AsyncClient] | None = None,
) -> MinerInfoFeedData:
    """
    Fetch the on-chain info record of a storage provider.

    Returns:
        MinerInfoFeedData: Peer id and advertised multiaddrs.

    Raises:
        RetryExhaustedError: If the node could not be queried.
    """
    logger.info("Getting miner info for %s.", provider)

    factory = client_factory or make_client

    async with factory() as client:
        result = await _call_with_retry(client, "Filecoin.StateMinerInfo", provider)

    return MinerInfoFeedData.model_validate(result)


async def _call_with_retry(
    client: httpx.AsyncClient,
    method: str,
    argument: str,
) -> object:
    """
    Invoke a single-argument state method at the chain head with retries.

    Returns:
        object: The decoded ``result`` member.
    """
    return await retry_async(
        lambda: _call(client, method, argument),
        attempts=_config.max_attempts,
        description=f"{method}({argument})",
        retry_on=(httpx.HTTPError, GlifResponseError),
    )


async def _call(
    client: httpx.AsyncClient,
    method: str,
    argument: str,
) -> object:
    """
    Perform one JSON-RPC request.

    Returns:
        object: The decoded ``result`` member.

    Raises:
        GlifResponseError: If the response has no result.
    """
    response = await client.post(
        _config.rpc_url,
        json={
            "jsonrpc": "2.0",
            "id": 1,
            "method": method,
            "params": [argument, None],
        },
    )
    response.raise_for_status()

    result = response.json().get("result")
    if result is None:
        raise GlifResponseError(f"Invalid glif response for {method}({argument})")

    return result
