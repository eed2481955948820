# ipinfo/config.py

import os
from dataclasses import dataclass, field


def _token_from_env() -> str:
    return os.getenv("IPINFO_TOKEN", "")


@dataclass(frozen=True, slots=True)
class IpInfoConfig:
    """
    Immutable configuration for ipinfo.io geolocation lookups.

    The access token is read from ``IPINFO_TOKEN`` when the config is created.
    """

    base_url: str = "https://ipinfo.io"

    token: str = field(default_factory=_token_from_env, repr=False)

    max_attempts: int = 3
