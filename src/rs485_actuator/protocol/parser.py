"""Response parsing for actuator replies."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from ..models.telemetry import ChannelReading
from .commands import DEVICE_ADDRESS

logger = logging.getLogger(__name__)

STATUS_REPLY_HEADER = bytes([DEVICE_ADDRESS, 0xC3, 0x01])
CHANNEL_OFFSETS = (3, 4)


class ValidationError(ValueError):
    """Raised when a reply does not carry the status-reply header."""


class ResponseOutcome(Enum):
    """How a transaction's reply window ended."""

    VALIDATED = "decoded"
    EMPTY_REPLY = "no_reply"
    MALFORMED = "ignored"


@dataclass
class StatusResponse:
    """Parsed status reply (header 12 C3 01)."""

    raw: bytes
    channels: list[ChannelReading] = field(default_factory=list)

    def __repr__(self) -> str:
        return (
            f"StatusResponse(raw={self.raw.hex(' ')}, "
            f"channels={[c.percentage for c in self.channels]})"
        )

    def to_dict(self) -> dict:
        return {
            "raw_hex": self.raw.hex(" "),
            "channels": [c.to_dict() for c in self.channels],
        }


def validate_header(data: bytes) -> None:
    """Check that *data* starts with the status-reply header.

    Raises:
        ValidationError: If the reply is shorter than the header or the
            header bytes differ.
    """
    if len(data) < len(STATUS_REPLY_HEADER):
        raise ValidationError(
            f"Reply too short for header: {len(data)} bytes ({data.hex(' ')})"
        )
    if data[: len(STATUS_REPLY_HEADER)] != STATUS_REPLY_HEADER:
        raise ValidationError(
            f"Unexpected reply header {data[:3].hex(' ')}, "
            f"expected {STATUS_REPLY_HEADER.hex(' ')}"
        )


def decode_status(data: bytes) -> StatusResponse | None:
    """Validate a reply and extract the two channel readings.

    Non-conforming replies are logged and discarded.

    Returns:
        A ``StatusResponse``, or ``None`` if the header did not match.
    """
    try:
        validate_header(data)
    except ValidationError as e:
        logger.warning("Response does not match the expected status response. Ignored: %s", e)
        return None

    logger.info("Response Array: [ %s ]", data.hex(" ").upper())

    if len(data) <= max(CHANNEL_OFFSETS):
        logger.info("Status reply carries no channel data (%d bytes)", len(data))
        return StatusResponse(raw=bytes(data))

    channels = [
        ChannelReading.from_raw(number, data[offset])
        for number, offset in enumerate(CHANNEL_OFFSETS, start=1)
    ]
    for reading in channels:
        logger.info("%s", reading.describe())

    return StatusResponse(raw=bytes(data), channels=channels)
