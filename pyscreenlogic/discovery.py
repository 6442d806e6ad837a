# pyScreenLogic Module - Discovery Function
# -*- coding: utf-8 -*-
"""
 Locate a ScreenLogic gateway on the local network

 A fixed 8 byte request is broadcast to the discovery port and the first
 answer is decoded. The answer does not use the packet framing of the TCP
 protocol.

 Functions
    discover_gateway(timeout, port, broadcast_address)   # Return GatewayIdentity
"""
import logging
import socket
from dataclasses import dataclass
from typing import Optional

from pyscreenlogic.protocol.constants import DISCOVERY_PORT
from pyscreenlogic.protocol.messages import DISCOVERY_REQUEST, DiscoveryResponse

log = logging.getLogger(__name__)

BROADCAST_ADDRESS = "255.255.255.255"
MAX_DATAGRAM = 1024


@dataclass(frozen=True)
class GatewayIdentity:
    address: str
    port: int
    gateway_type: int = 0
    subnet: int = 0
    name: str = ""
    mac_address: Optional[str] = None


def discover_gateway(timeout: Optional[float] = None, port: int = DISCOVERY_PORT,
                     broadcast_address: str = BROADCAST_ADDRESS) -> GatewayIdentity:
    """
    Broadcast a discovery request and decode the first answer.

    Args:
        timeout           = Seconds to wait for the answer (None blocks)
        port              = Discovery UDP port
        broadcast_address = Address the request is sent to

    Raises OSError on socket failures or timeout and TruncatedPacketError when
    the answer is shorter than its fixed fields.
    """
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
        sock.settimeout(timeout)
        log.debug(f"Broadcasting discovery request to {broadcast_address}:{port}")
        sock.sendto(DISCOVERY_REQUEST, (broadcast_address, port))
        data, sender = sock.recvfrom(MAX_DATAGRAM)
    log.debug(f"Discovery answer from {sender[0]}: {data!r}")
    resp = DiscoveryResponse.decode(data)
    log.debug(f"Found gateway '{resp.name}' at {resp.address}:{resp.port}")
    return GatewayIdentity(
        address=resp.address,
        port=resp.port,
        gateway_type=resp.gateway_type,
        subnet=resp.subnet,
        name=resp.name,
    )
