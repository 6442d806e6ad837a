# pyScreenLogic - Protocol Codec
# -*- coding: utf-8 -*-
"""
 Field level codec for the ScreenLogic protocol

 All integers are little-endian. Strings are a u32 length followed by the
 string bytes, zero padded to a multiple of 4. Date-times are eight u16
 fields laid out like a Windows SYSTEMTIME:
    year, month, day of week, day, hour, minute, second, millisecond

 Classes
    Encoder()           # Append fields to a byte buffer
    Decoder(data)       # Read fields from a byte buffer
"""
import logging
import struct
from datetime import datetime
from typing import Callable, List, Optional

from pyscreenlogic.exceptions import MalformedPacketError, TruncatedPacketError

log = logging.getLogger(__name__)

UINT8 = struct.Struct('<B')
UINT16 = struct.Struct('<H')
UINT32 = struct.Struct('<I')
DATETIME = struct.Struct('<8H')


def string_padding(length: int) -> int:
    """Number of zero bytes that follow a string of the given length"""
    return (4 - (length % 4)) % 4


class Encoder:
    def __init__(self):
        self.buffer = bytearray()

    def __len__(self):
        return len(self.buffer)

    def getvalue(self) -> bytes:
        return bytes(self.buffer)

    def write_uint8(self, val: int):
        self.buffer += UINT8.pack(val)

    def write_uint16(self, val: int):
        self.buffer += UINT16.pack(val)

    def write_uint32(self, val: int):
        self.buffer += UINT32.pack(val)

    def write_bool(self, val: bool):
        self.write_uint8(1 if val else 0)

    def write_bytes(self, data: bytes):
        self.buffer += data

    def write_string(self, val):
        if isinstance(val, str):
            val = val.encode('utf-8')
        self.write_uint32(len(val))
        self.buffer += val
        self.buffer += bytes(string_padding(len(val)))

    def write_datetime(self, t: datetime):
        # Day of week is always sent as 0, the gateway does not need it
        self.buffer += DATETIME.pack(t.year, t.month, 0, t.day, t.hour, t.minute, t.second,
                                     t.microsecond // 1000)


class Decoder:
    def __init__(self, data: Optional[bytes]):
        self.data = bytes(data or b'')
        self.offset = 0

    def remaining(self) -> int:
        return len(self.data) - self.offset

    def _take(self, size: int) -> bytes:
        if self.remaining() < size:
            raise TruncatedPacketError(
                f"Need {size} bytes at offset {self.offset}, only {self.remaining()} remaining")
        chunk = self.data[self.offset:self.offset + size]
        self.offset += size
        return chunk

    def _unpack(self, fmt: struct.Struct):
        return fmt.unpack(self._take(fmt.size))

    def read_uint8(self) -> int:
        return self._unpack(UINT8)[0]

    def read_uint16(self) -> int:
        return self._unpack(UINT16)[0]

    def read_uint32(self) -> int:
        return self._unpack(UINT32)[0]

    def read_bool(self) -> bool:
        return self.read_uint8() == 1

    def copy_bytes(self, size: int) -> bytes:
        return self._take(size)

    def read_string(self) -> str:
        length = self.read_uint32()
        if self.remaining() < length:
            raise TruncatedPacketError(
                f"String of {length} bytes at offset {self.offset}, only {self.remaining()} remaining")
        raw = self._take(length)
        self._take(string_padding(length))
        return raw.decode('utf-8', errors='replace')

    def read_datetime(self) -> datetime:
        year, month, _, day, hour, minute, second, millisecond = self._unpack(DATETIME)
        try:
            return datetime(year, month, day, hour, minute, second, millisecond * 1000)
        except ValueError as exc:
            raise MalformedPacketError(
                f"Invalid date-time {year:04}-{month:02}-{day:02} {hour:02}:{minute:02}:{second:02}.{millisecond:03} "
                f"ending at offset {self.offset}") from exc

    def read_tail(self) -> bytes:
        return self._take(self.remaining())

    def read_list(self, read_item: Callable[[], object]) -> List:
        """Read a u32 count followed by that many items"""
        count = self.read_uint32()
        return [read_item() for _ in range(count)]

    def skip_records(self, *readers: Callable[[], object]) -> int:
        """
        Consume a u32 count followed by that many records of unknown meaning.

        Each record is read with the given readers in order and discarded.
        Returns the record count.
        """
        count = self.read_uint32()
        for _ in range(count):
            for reader in readers:
                reader()
        return count
