"""Frame encoding and the bounded reply buffer.

Command frame layout::

    +---------+----------+--------+-------------------+------------+
    | Address | Function | Length |      Payload      | Terminator |
    | 1 byte  |  1 byte  | 1 byte |  variable length  |   1 byte   |
    +---------+----------+--------+-------------------+------------+

- Address: device address (0x12 for the actuator)
- Terminator: a literal byte baked into each command, not computed

Frames are written as human-readable hex strings such as
``"12 82 01 22 B7"`` and converted to bytes just before transmission.
"""

from __future__ import annotations

import string

from ..config import RESPONSE_CAPACITY

HEX_DIGITS = frozenset(string.hexdigits)


class EncodingError(ValueError):
    """Raised when a hex string cannot be turned into a frame."""


def encode_hex_frame(hex_string: str) -> bytes:
    """Convert a hex string into frame bytes.

    Whitespace separators are ignored. Each adjacent digit pair becomes
    one byte.

    Args:
        hex_string: Hex digits, optionally space separated.

    Returns:
        The frame as ``bytes``.

    Raises:
        EncodingError: If the digit count is odd or a character is not
            a hex digit.
    """
    digits = "".join(hex_string.split())
    if len(digits) % 2 != 0:
        raise EncodingError(
            f"Hex frame must have an even number of digits, got {len(digits)}: {hex_string!r}"
        )
    bad = [c for c in digits if c not in HEX_DIGITS]
    if bad:
        raise EncodingError(f"Invalid hex character {bad[0]!r} in {hex_string!r}")

    return bytes(int(digits[i : i + 2], 16) for i in range(0, len(digits), 2))


def format_bytes(data: bytes) -> str:
    """Render bytes as ``0x12 0x82 ...`` for log output."""
    return " ".join(f"0x{b:02X}" for b in data)


class ResponseBuffer:
    """Fixed-capacity buffer for reply bytes.

    Storage is allocated once at construction; bytes that do not fit
    are rejected and reported back to the caller.
    """

    def __init__(self, capacity: int = RESPONSE_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError(f"Capacity must be positive, got {capacity}")
        self._data = bytearray(capacity)
        self._length = 0

    @property
    def capacity(self) -> int:
        return len(self._data)

    @property
    def full(self) -> bool:
        return self._length >= len(self._data)

    def extend(self, data: bytes) -> int:
        """Store as many bytes of *data* as fit.

        Returns:
            Number of bytes accepted.
        """
        accepted = min(len(data), len(self._data) - self._length)
        self._data[self._length : self._length + accepted] = data[:accepted]
        self._length += accepted
        return accepted

    def __len__(self) -> int:
        return self._length

    def __bytes__(self) -> bytes:
        return bytes(self._data[: self._length])

    def __repr__(self) -> str:
        return f"ResponseBuffer({self._length}/{self.capacity}: {bytes(self).hex(' ')})"
