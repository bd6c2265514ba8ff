"""Compiled-in link constants for the RS-485 actuator.

Values mirror the actuator's factory wiring: 4800 baud 8N1, a 10 ms
transceiver settle time, and a 1 s reply window.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_BAUDRATE = 4800
SETTLE_TIME_MS = 10
REPLY_TIMEOUT_MS = 1000
RESPONSE_CAPACITY = 10
STATUS_POLL_INTERVAL_MS = 15000


@dataclass
class LinkSettings:
    """Per-run serial link settings."""

    port: str
    baudrate: int = DEFAULT_BAUDRATE
    settle_ms: int = SETTLE_TIME_MS
    timeout_ms: int = REPLY_TIMEOUT_MS
    poll_interval_ms: int = STATUS_POLL_INTERVAL_MS
    rts_level_for_tx: bool = True

    def __post_init__(self) -> None:
        if self.settle_ms < SETTLE_TIME_MS:
            raise ValueError(
                f"Settle time must be at least {SETTLE_TIME_MS} ms, got {self.settle_ms}"
            )
        if self.timeout_ms <= 0:
            raise ValueError(f"Reply timeout must be positive, got {self.timeout_ms}")
        if self.poll_interval_ms <= 0:
            raise ValueError(
                f"Poll interval must be positive, got {self.poll_interval_ms}"
            )
