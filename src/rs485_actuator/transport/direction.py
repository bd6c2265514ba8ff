"""Bus direction control for the half-duplex RS-485 line."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Callable, Iterator

from ..config import SETTLE_TIME_MS

logger = logging.getLogger(__name__)


class BusDirectionController:
    """Switches the transceiver between transmit and receive.

    Each switch is followed by a settle delay so the driver is stable
    before data is driven, and the last byte has cleared the line before
    the driver is released.

    Args:
        connection: Object exposing ``set_transmit_enable(bool)``.
        settle_ms: Settle time after each switch, in milliseconds.
        sleep: Sleep function taking seconds.
    """

    def __init__(
        self,
        connection,
        settle_ms: int = SETTLE_TIME_MS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if settle_ms < SETTLE_TIME_MS:
            raise ValueError(
                f"Settle time must be at least {SETTLE_TIME_MS} ms, got {settle_ms}"
            )
        self._connection = connection
        self._settle_s = settle_ms / 1000.0
        self._sleep = sleep
        self._transmitting = False

    @property
    def transmitting(self) -> bool:
        return self._transmitting

    def to_transmit(self) -> None:
        logger.debug("Switching RS-485 to TRANSMIT mode")
        self._connection.set_transmit_enable(True)
        self._transmitting = True
        self._sleep(self._settle_s)

    def to_receive(self) -> None:
        self._sleep(self._settle_s)
        logger.debug("Switching RS-485 to RECEIVE mode")
        self._connection.set_transmit_enable(False)
        self._transmitting = False

    @contextmanager
    def transmit(self) -> Iterator[None]:
        """Hold the bus in transmit mode for the duration of the block.

        The bus is returned to receive mode even if the write fails.
        """
        self.to_transmit()
        try:
            yield
        finally:
            self.to_receive()
