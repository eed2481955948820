# distribution/test_location.py

import pytest

from datacap_checker.adapters._utils import RetryExhaustedError
from datacap_checker.domain.distribution import LocationResolver
from datacap_checker.schemas import IpInfoFeedData, MinerInfoFeedData

pytestmark = pytest.mark.unit


def _miner_info(*multiaddrs: str):
    async def lookup(provider: str) -> MinerInfoFeedData:
        return MinerInfoFeedData.model_validate({"Multiaddrs": list(multiaddrs)})

    return lookup


def _ip_resolver(mapping: dict[str, list[str]]):
    async def resolve(multiaddr: str) -> list[str]:
        if multiaddr not in mapping:
            raise ValueError("undecodable")
        return mapping[multiaddr]

    return resolve


def _geo(mapping: dict[str, dict], requested: list[str] | None = None):
    async def locate(ip: str) -> IpInfoFeedData:
        if requested is not None:
            requested.append(ip)
        return IpInfoFeedData.model_validate(mapping[ip])

    return locate


async def test_first_non_bogon_ip_wins() -> None:
    """
    ARRANGE: provider advertising a private IP then a public one
    ACT:     resolve
    ASSERT:  location comes from the public IP
    """
    resolver = LocationResolver(
        miner_info=_miner_info("m1", "m2"),
        ip_resolver=_ip_resolver({"m1": ["10.0.0.1"], "m2": ["1.2.3.4"]}),
        geo_lookup=_geo(
            {
                "10.0.0.1": {"ip": "10.0.0.1", "bogon": True},
                "1.2.3.4": {"city": "Austin", "region": "Texas", "country": "US"},
            },
        ),
    )

    actual = await resolver.resolve("f0100")

    assert actual.rendered == "Austin, Texas, US"


async def test_stops_after_first_location() -> None:
    """
    ARRANGE: provider with two public IPs
    ACT:     resolve
    ASSERT:  only the first IP is geolocated
    """
    requested = []
    resolver = LocationResolver(
        miner_info=_miner_info("m1"),
        ip_resolver=_ip_resolver({"m1": ["1.1.1.1", "2.2.2.2"]}),
        geo_lookup=_geo({"1.1.1.1": {"country": "AU"}, "2.2.2.2": {"country": "DE"}}, requested),
    )

    await resolver.resolve("f0100")

    assert requested == ["1.1.1.1"]


async def test_no_multiaddrs_resolves_to_none() -> None:
    """
    ARRANGE: provider without multiaddrs
    ACT:     resolve
    ASSERT:  returns None
    """
    resolver = LocationResolver(
        miner_info=_miner_info(),
        ip_resolver=_ip_resolver({}),
        geo_lookup=_geo({}),
    )

    actual = await resolver.resolve("f0100")

    assert actual is None


async def test_undecodable_multiaddr_short_circuits() -> None:
    """
    ARRANGE: first multiaddr decodable, second not
    ACT:     resolve
    ASSERT:  returns None without geolocating anything
    """
    requested = []
    resolver = LocationResolver(
        miner_info=_miner_info("m1", "broken"),
        ip_resolver=_ip_resolver({"m1": ["1.1.1.1"]}),
        geo_lookup=_geo({"1.1.1.1": {"country": "AU"}}, requested),
    )

    actual = await resolver.resolve("f0100")

    assert (actual, requested) == (None, [])


async def test_upstream_failure_resolves_to_none() -> None:
    """
    ARRANGE: miner info lookup exhausting its retries
    ACT:     resolve
    ASSERT:  returns None instead of raising
    """

    async def failing(provider: str) -> MinerInfoFeedData:
        raise RetryExhaustedError("miner info", 3)

    resolver = LocationResolver(
        miner_info=failing,
        ip_resolver=_ip_resolver({}),
        geo_lookup=_geo({}),
    )

    actual = await resolver.resolve("f0100")

    assert actual is None


async def test_location_carries_coordinates_and_org() -> None:
    """
    ARRANGE: ipinfo record with loc and org
    ACT:     resolve
    ASSERT:  coordinates and org name are copied
    """
    resolver = LocationResolver(
        miner_info=_miner_info("m1"),
        ip_resolver=_ip_resolver({"m1": ["1.1.1.1"]}),
        geo_lookup=_geo(
            {"1.1.1.1": {"country": "SG", "loc": "1.28,103.85", "org": "AS1 Host Co"}},
        ),
    )

    actual = await resolver.resolve("f0100")

    assert (actual.latitude, actual.longitude, actual.org_name) == (1.28, 103.85, "Host Co")
