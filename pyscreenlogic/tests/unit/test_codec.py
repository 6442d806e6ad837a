from datetime import datetime

import pytest

from pyscreenlogic.exceptions import MalformedPacketError, TruncatedPacketError
from pyscreenlogic.protocol.codec import Decoder, Encoder, string_padding


@pytest.mark.parametrize("length,padding", [(0, 0), (1, 3), (2, 2), (3, 1), (4, 0), (5, 3), (8, 0)])
def test_string_padding(length, padding):
    assert string_padding(length) == padding


def test_integers_are_little_endian():
    enc = Encoder()
    enc.write_uint8(0x01)
    enc.write_uint16(0x0203)
    enc.write_uint32(0x04050607)
    assert enc.getvalue() == b"\x01\x03\x02\x07\x06\x05\x04"

    dec = Decoder(enc.getvalue())
    assert dec.read_uint8() == 0x01
    assert dec.read_uint16() == 0x0203
    assert dec.read_uint32() == 0x04050607
    assert dec.remaining() == 0


def test_string_layout():
    enc = Encoder()
    enc.write_string("abcde")
    assert enc.getvalue() == b"\x05\x00\x00\x00abcde\x00\x00\x00"


def test_aligned_string_has_no_padding():
    enc = Encoder()
    enc.write_string("abcd")
    assert enc.getvalue() == b"\x04\x00\x00\x00abcd"


@pytest.mark.parametrize("text", ["", "a", "ab", "abc", "abcd", "Pentair: 00-11-22"])
def test_string_padding_boundaries(text):
    enc = Encoder()
    enc.write_string(text)
    enc.write_uint32(0xDEADBEEF)
    dec = Decoder(enc.getvalue())
    assert dec.read_string() == text
    # the next field starts right after the padding
    assert dec.read_uint32() == 0xDEADBEEF


def test_string_missing_padding_is_truncated():
    data = b"\x05\x00\x00\x00abcde\x00\x00"
    with pytest.raises(TruncatedPacketError):
        Decoder(data).read_string()


def test_string_longer_than_buffer_is_truncated():
    data = b"\x10\x00\x00\x00abc"
    with pytest.raises(TruncatedPacketError):
        Decoder(data).read_string()


def test_short_integer_is_truncated():
    with pytest.raises(TruncatedPacketError):
        Decoder(b"\x01\x02\x03").read_uint32()


def test_datetime_layout():
    enc = Encoder()
    enc.write_datetime(datetime(2024, 7, 15, 13, 45, 30, 250000))
    # year, month, day of week (0), day, hour, minute, second, millisecond
    assert enc.getvalue() == (b"\xe8\x07" b"\x07\x00" b"\x00\x00" b"\x0f\x00"
                              b"\x0d\x00" b"\x2d\x00" b"\x1e\x00" b"\xfa\x00")
    assert Decoder(enc.getvalue()).read_datetime() == datetime(2024, 7, 15, 13, 45, 30, 250000)


@pytest.mark.parametrize("fields", [
    (0, 0, 0, 0, 0, 0, 0, 0),
    (2024, 0, 0, 15, 13, 45, 30, 0),
    (2024, 7, 0, 15, 13, 45, 30, 1000),
])
def test_invalid_datetime_is_malformed(fields):
    data = b"".join(val.to_bytes(2, "little") for val in fields)
    dec = Decoder(data)
    with pytest.raises(MalformedPacketError):
        dec.read_datetime()
    # the field is consumed either way
    assert dec.remaining() == 0


def test_read_bool():
    dec = Decoder(b"\x01\x00\x02")
    assert dec.read_bool() is True
    assert dec.read_bool() is False
    assert dec.read_bool() is False


def test_read_list_and_skip_records():
    enc = Encoder()
    enc.write_uint32(2)
    enc.write_uint16(7)
    enc.write_uint16(8)
    enc.write_uint32(3)
    for val in range(3):
        enc.write_uint8(val)
        enc.write_uint32(val)
    enc.write_uint8(0xAA)

    dec = Decoder(enc.getvalue())
    assert dec.read_list(dec.read_uint16) == [7, 8]
    assert dec.skip_records(dec.read_uint8, dec.read_uint32) == 3
    assert dec.read_uint8() == 0xAA


def test_empty_decoder():
    dec = Decoder(None)
    assert dec.remaining() == 0
    assert dec.read_tail() == b""
