import ipaddress
import logging
from dataclasses import dataclass

from pyscreenlogic.protocol.codec import Decoder, Encoder

log = logging.getLogger(__name__)

# Looks like a packet header with sequence 1, the gateway only needs these bytes
DISCOVERY_REQUEST = b"\x01\x00\x00\x00\x00\x00\x00\x00"


@dataclass
class DiscoveryResponse:
    """
    Answer to a discovery broadcast

    This datagram does not use the packet framing of the TCP protocol:
        {u32 type}{4 byte IPv4}{u16 port}{u8 gateway type}{u8 subnet}{name}
    The name runs to the end of the datagram and stops at the first NUL.
    """
    response_type: int
    address: str
    port: int
    gateway_type: int
    subnet: int
    name: str

    @classmethod
    def decode(cls, data: bytes) -> 'DiscoveryResponse':
        decoder = Decoder(data)
        response_type = decoder.read_uint32()
        address = str(ipaddress.IPv4Address(decoder.copy_bytes(4)))
        port = decoder.read_uint16()
        gateway_type = decoder.read_uint8()
        subnet = decoder.read_uint8()
        name = decoder.read_tail().split(b"\x00", 1)[0].decode('utf-8', errors='replace')
        return cls(response_type, address, port, gateway_type, subnet, name)

    def encode(self) -> bytes:
        encoder = Encoder()
        encoder.write_uint32(self.response_type)
        encoder.write_bytes(ipaddress.IPv4Address(self.address).packed)
        encoder.write_uint16(self.port)
        encoder.write_uint8(self.gateway_type)
        encoder.write_uint8(self.subnet)
        encoder.write_bytes(self.name.encode('utf-8') + b"\x00")
        return encoder.getvalue()
