"""Channel telemetry: dimming percentage and output voltage."""

from __future__ import annotations

from dataclasses import dataclass

MIN_VOLTAGE = 70.0
VOLTAGE_SPAN = 140.0


def percentage(byte_value: int) -> float:
    """Map a raw channel state byte to a dimming percentage.

    The byte value is the percentage itself (0x32 -> 50%). Values above
    100 are passed through unclamped.
    """
    if byte_value == 0x00:
        return 0.0
    return float(byte_value)


def voltage(percent: float) -> float:
    """Map a dimming percentage to output voltage (70 V at 0%, 210 V at 100%)."""
    return MIN_VOLTAGE + (percent * VOLTAGE_SPAN / 100)


@dataclass
class ChannelReading:
    """Decoded state of one dimmer channel."""

    channel: int
    raw: int
    percentage: float
    voltage: float

    @classmethod
    def from_raw(cls, channel: int, raw: int) -> ChannelReading:
        pct = percentage(raw)
        return cls(channel=channel, raw=raw, percentage=pct, voltage=voltage(pct))

    def describe(self) -> str:
        return (
            f"Channel {self.channel}: {self.percentage:.0f}% dimming, "
            f"Voltage: {self.voltage:.1f}V"
        )

    def to_dict(self) -> dict:
        return {
            "channel": self.channel,
            "raw": self.raw,
            "percentage": self.percentage,
            "voltage": self.voltage,
        }
