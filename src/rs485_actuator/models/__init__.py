"""Data models for decoded actuator telemetry."""

from .telemetry import ChannelReading, percentage, voltage
