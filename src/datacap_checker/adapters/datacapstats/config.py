# datacapstats/config.py

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DatacapStatsConfig:
    """
    Immutable configuration for the DataCap registry API.

    Returns:
        DatacapStatsConfig: Immutable configuration object with registry
            endpoints.
    """

    # verified clients search endpoint
    verified_clients_url: str = "https://api.datacapstats.io/api/getVerifiedClients"

    # public client listing, referenced in user facing messages
    clients_page_url: str = "https://datacapstats.io/clients"

    # rows requested per lookup
    page_size: int = 10

    # attempts before a lookup is reported as failed
    max_attempts: int = 6
