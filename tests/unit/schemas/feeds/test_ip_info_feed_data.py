# feeds/test_ip_info_feed_data.py

import pytest

from datacap_checker.schemas import IpInfoFeedData, MinerInfoFeedData

pytestmark = pytest.mark.unit


def test_loc_split_into_coordinates() -> None:
    """
    ARRANGE: payload with loc "48.8534,2.3488"
    ACT:     model_validate
    ASSERT:  latitude and longitude are floats
    """
    actual = IpInfoFeedData.model_validate({"loc": "48.8534,2.3488"})

    assert (actual.latitude, actual.longitude) == (48.8534, 2.3488)


def test_malformed_loc_yields_no_coordinates() -> None:
    """
    ARRANGE: payload with a loc lacking a comma
    ACT:     model_validate
    ASSERT:  coordinates are None
    """
    actual = IpInfoFeedData.model_validate({"loc": "unknown"})

    assert (actual.latitude, actual.longitude) == (None, None)


def test_org_drops_as_number() -> None:
    """
    ARRANGE: org "AS16276 OVH SAS"
    ACT:     model_validate
    ASSERT:  org_name is "OVH SAS"
    """
    actual = IpInfoFeedData.model_validate({"org": "AS16276 OVH SAS"})

    assert actual.org_name == "OVH SAS"


def test_missing_org_is_unknown() -> None:
    """
    ARRANGE: payload without org
    ACT:     model_validate
    ASSERT:  org_name is "Unknown"
    """
    actual = IpInfoFeedData.model_validate({"ip": "1.1.1.1"})

    assert actual.org_name == "Unknown"


def test_null_multiaddrs_become_empty_list() -> None:
    """
    ARRANGE: miner info with Multiaddrs null
    ACT:     model_validate
    ASSERT:  multiaddrs is an empty list
    """
    actual = MinerInfoFeedData.model_validate({"PeerId": "x", "Multiaddrs": None})

    assert actual.multiaddrs == []
