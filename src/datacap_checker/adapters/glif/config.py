# glif/config.py

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class GlifConfig:
    """
    Immutable configuration for the Glif hosted Lotus JSON-RPC node.

    Returns:
        GlifConfig: Immutable configuration object with the RPC endpoint.
    """

    rpc_url: str = "https://api.node.glif.io/rpc/v0"

    # attempts per RPC call
    max_attempts: int = 3
