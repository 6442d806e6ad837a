# pyScreenLogic - Packet Framing
# -*- coding: utf-8 -*-
"""
 Frame reader and writer for the ScreenLogic TCP protocol

 Every frame is an 8 byte little-endian header followed by the body:
    {u16 sequence}{u16 type code}{u32 body length}{body}

 Classes
    PacketHeader(sequence, type_code, length)
    PacketWriter(sock, initial_sequence)    # write_packet(message)
    PacketReader(stream, callback)          # read_packet(response_cls)
"""
import logging
import struct
from dataclasses import dataclass
from typing import Callable, Optional

from pyscreenlogic.exceptions import (GatewayConnectionClosedError, TruncatedPacketError,
                                      UnexpectedPacketError)

log = logging.getLogger(__name__)

HEADER = struct.Struct('<HHI')
MAX_SEQUENCE = 0xFFFF


@dataclass(frozen=True)
class PacketHeader:
    sequence: int
    type_code: int
    length: int

    def pack(self) -> bytes:
        return HEADER.pack(self.sequence, self.type_code, self.length)

    @classmethod
    def unpack(cls, data: bytes) -> 'PacketHeader':
        return cls(*HEADER.unpack(data))


OutOfBandCallback = Callable[[PacketHeader, bytes], None]


class PacketWriter:
    def __init__(self, sock, initial_sequence: int = 2):
        self.sock = sock
        self.sequence = initial_sequence & MAX_SEQUENCE

    def write_packet(self, message) -> PacketHeader:
        code, body = message.encode()
        body = body or b''
        header = PacketHeader(self.sequence, code, len(body))
        self.sequence = (self.sequence + 1) & MAX_SEQUENCE
        # Header and body go out in a single write, some gateway firmware
        # mishandles a frame split across two writes.
        self.sock.sendall(header.pack() + body)
        log.debug(f"Sent packet {type(message).__name__} seq={header.sequence} "
                  f"type={header.type_code} len={header.length}")
        return header


class PacketReader:
    def __init__(self, stream, callback: Optional[OutOfBandCallback] = None):
        self.stream = stream
        self.callback = callback

    def _read_exactly(self, size: int, at_boundary: bool = False) -> bytes:
        data = b''
        while len(data) < size:
            chunk = self.stream.read(size - len(data))
            if not chunk:
                if at_boundary and not data:
                    raise GatewayConnectionClosedError("Gateway closed the connection")
                raise TruncatedPacketError(f"Expected {size} bytes, stream ended after {len(data)}")
            data += chunk
        return data

    def read_frame(self):
        header = PacketHeader.unpack(self._read_exactly(HEADER.size, at_boundary=True))
        body = self._read_exactly(header.length) if header.length else b''
        return header, body

    def read_packet(self, response_cls):
        while True:
            header, body = self.read_frame()
            if response_cls.accepts(header.type_code):
                return response_cls.decode(header, body)
            # The gateway pushes some packets on its own, e.g. weather forecast
            # changes. They can arrive ahead of the response we are waiting for.
            if self.callback is None:
                raise UnexpectedPacketError(header.type_code, response_cls.TYPE_CODE)
            log.debug(f"Out-of-band packet type={header.type_code} len={header.length} "
                      f"while waiting for {response_cls.TYPE_CODE}")
            self.callback(header, body)
