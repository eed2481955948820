# glif/__init__.py

from .api import GlifResponseError, fetch_miner_info, lookup_id, lookup_ids
from .multiaddr import decode_node_address, resolve_node_ips

__all__ = [
    "GlifResponseError",
    "decode_node_address",
    "fetch_miner_info",
    "lookup_id",
    "lookup_ids",
    "resolve_node_ips",
]
