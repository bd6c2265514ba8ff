"""Tests for hex frame encoding and the reply buffer."""

import pytest

from rs485_actuator.protocol.framing import (
    EncodingError,
    ResponseBuffer,
    encode_hex_frame,
    format_bytes,
)


def test_encode_spaced_frame():
    """Space separators are ignored and each pair becomes one byte."""
    assert encode_hex_frame("12 82 01 22 B7") == bytes([0x12, 0x82, 0x01, 0x22, 0xB7])


def test_encode_unspaced_and_lowercase():
    assert encode_hex_frame("12c301") == bytes([0x12, 0xC3, 0x01])


def test_encoded_length_is_half_digit_count():
    hex_string = "00 11 22 33 44 55 66 77 88 99 AA BB CC DD EE FF"
    frame = encode_hex_frame(hex_string)
    assert len(frame) == len(hex_string.replace(" ", "")) // 2
    assert list(frame) == [0x11 * i for i in range(16)]


def test_encode_odd_digit_count():
    """'1 82' strips to '182', which is odd."""
    with pytest.raises(EncodingError):
        encode_hex_frame("1 82")


def test_encode_non_hex_character():
    with pytest.raises(EncodingError):
        encode_hex_frame("1G")


def test_encoding_error_is_value_error():
    with pytest.raises(ValueError):
        encode_hex_frame("zz")


def test_encode_empty_string():
    assert encode_hex_frame("") == b""


def test_format_bytes():
    assert format_bytes(b"\x12\x82") == "0x12 0x82"


def test_buffer_accepts_up_to_capacity():
    buf = ResponseBuffer(10)
    assert buf.extend(bytes(range(6))) == 6
    assert not buf.full
    assert buf.extend(bytes(range(6, 14))) == 4
    assert buf.full
    assert len(buf) == 10
    assert bytes(buf) == bytes(range(10))


def test_buffer_rejects_when_full():
    buf = ResponseBuffer(3)
    buf.extend(b"\x01\x02\x03")
    assert buf.extend(b"\x04") == 0
    assert bytes(buf) == b"\x01\x02\x03"


def test_buffer_default_capacity():
    assert ResponseBuffer().capacity == 10


def test_buffer_invalid_capacity():
    with pytest.raises(ValueError):
        ResponseBuffer(0)
