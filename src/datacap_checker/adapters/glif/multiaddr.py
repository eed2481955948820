# glif/multiaddr.py

import asyncio
import base64
import logging
import socket

from multiaddr import Multiaddr
from multiaddr.protocols import P_DNS4, P_DNS6, P_IP4, P_IP6

logger = logging.getLogger(__name__)

_NODE_PROTOCOLS = (P_IP4, P_IP6, P_DNS4, P_DNS6)


def decode_node_address(encoded: str) -> tuple[str, str]:
    """
    Decode the leading node-address component of a base64 binary multiaddr.

    Only ip4, ip6, dns4 and dns6 components are recognised; the transport
    components that follow are ignored.

    Returns:
        tuple[str, str]: The protocol name and its address value.

    Raises:
        ValueError: If the payload is not a supported binary multiaddr.
    """
    try:
        address = Multiaddr(base64.b64decode(encoded, validate=True))
        protocols = address.protocols()
    except (ValueError, LookupError) as error:
        raise ValueError(f"Invalid multiaddr: {encoded!r}") from error

    if not protocols or protocols[0].code not in _NODE_PROTOCOLS:
        raise ValueError(f"Multiaddr has no node address: {address}")

    node = protocols[0]
    return node.name, address.value_for_protocol(node.code)


async def resolve_node_ips(encoded: str) -> list[str]:
    """
    Resolve a base64 binary multiaddr to the IP addresses it points at.

    Literal ip4/ip6 components are returned as-is; dns4/dns6 names are
    resolved through the event loop's resolver.

    Returns:
        list[str]: Zero or more IP addresses, in resolver order.

    Raises:
        ValueError: If the multiaddr cannot be decoded.
        OSError: If DNS resolution fails.
    """
    protocol, address = decode_node_address(encoded)

    if protocol in ("ip4", "ip6"):
        return [address]

    family = socket.AF_INET if protocol == "dns4" else socket.AF_INET6
    logger.debug("Resolving %s name %s", protocol, address)
    infos = await asyncio.get_running_loop().getaddrinfo(address, None, family=family)

    return list(dict.fromkeys(sockaddr[0] for *_, sockaddr in infos))
