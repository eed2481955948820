# distribution/location.py

import logging
from collections.abc import Awaitable, Callable

import httpx

from datacap_checker.adapters._utils import RetryExhaustedError, make_client
from datacap_checker.adapters.glif import fetch_miner_info, resolve_node_ips
from datacap_checker.adapters.ipinfo import locate_ip
from datacap_checker.schemas import IpInfoFeedData, MinerInfoFeedData

from .models import Location

logger = logging.getLogger(__name__)

MinerInfoLookup = Callable[[str], Awaitable[MinerInfoFeedData]]
IpResolver = Callable[[str], Awaitable[list[str]]]
GeoLookup = Callable[[str], Awaitable[IpInfoFeedData]]


class LocationResolver:
    """
    Resolve a storage provider to a location by chaining
    provider → multiaddrs → IPs → geolocation.

    The first non-bogon IP with a location wins. Any failure along the chain
    resolves to None instead of raising.
    """

    __slots__ = ("_geo_lookup", "_ip_resolver", "_miner_info")

    def __init__(
        self,
        *,
        miner_info: MinerInfoLookup | None = None,
        ip_resolver: IpResolver | None = None,
        geo_lookup: GeoLookup | None = None,
    ) -> None:
        self._miner_info = miner_info or fetch_miner_info
        self._ip_resolver = ip_resolver or resolve_node_ips
        self._geo_lookup = geo_lookup or _locate_with_fresh_client

    async def resolve(self, provider: str) -> Location | None:
        """
        Resolve the location of a provider.

        Returns:
            Location | None: The first resolvable location, or None.
        """
        try:
            ips = await self._provider_ips(provider)
            return await self._first_location(ips)
        except (RetryExhaustedError, OSError, ValueError) as error:
            logger.warning("Location lookup failed for %s: %s", provider, error)
            return None

    async def _provider_ips(self, provider: str) -> list[str]:
        """
        Collect the IPs advertised by a provider, in multiaddr order.

        An undecodable multiaddr abandons the whole provider.

        Returns:
            list[str]: IP addresses, empty when nothing is advertised.
        """
        miner = await self._miner_info(provider)

        ips: list[str] = []
        for multiaddr in miner.multiaddrs:
            logger.debug("Getting IP from multiaddr %s", multiaddr)
            try:
                ips.extend(await self._ip_resolver(multiaddr))
            except ValueError as error:
                logger.warning("Failed to get IP from multiaddr %s: %s", multiaddr, error)
                return []
        return ips

    async def _first_location(self, ips: list[str]) -> Location | None:
        """
        Geolocate IPs in order until one is not a bogon.

        Returns:
            Location | None: The first location found, or None.
        """
        for ip in ips:
            data = await self._geo_lookup(ip)
            if data.bogon:
                continue
            logger.info("Got location for IP %s: %s", ip, data.country)
            return Location(
                city=data.city,
                region=data.region,
                country=data.country,
                latitude=data.latitude,
                longitude=data.longitude,
                org_name=data.org_name,
            )
        return None


async def _locate_with_fresh_client(ip: str) -> IpInfoFeedData:
    async with make_client() as client:
        return await locate_ip(ip, client)
