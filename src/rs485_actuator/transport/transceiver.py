"""Blocking request/response transactions on the RS-485 bus.

One transaction runs::

    Idle -> Transmitting -> AwaitingResponse -> {Validated | EmptyReply | Malformed} -> Idle

The actuator does not acknowledge every command, so a reply window that
closes with no bytes is a successful transaction with an empty reply.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable

from ..config import REPLY_TIMEOUT_MS, RESPONSE_CAPACITY, SETTLE_TIME_MS
from ..protocol.commands import Command
from ..protocol.framing import ResponseBuffer, encode_hex_frame, format_bytes
from ..protocol.parser import ResponseOutcome, StatusResponse, decode_status
from .direction import BusDirectionController

logger = logging.getLogger(__name__)

POLL_INTERVAL_S = 0.001


@dataclass
class TransactionResult:
    """Outcome of one transaction."""

    success: bool
    response: bytes
    outcome: ResponseOutcome
    status: StatusResponse | None = None

    def to_dict(self) -> dict:
        result = {
            "success": self.success,
            "reply": self.outcome.value,
            "response_hex": self.response.hex(" "),
        }
        if self.status is not None:
            result["status"] = self.status.to_dict()
        return result


class Transceiver:
    """Runs serialized send/await-reply cycles over a serial connection.

    Args:
        connection: A ``SerialConnection`` or any object with the same
            ``discard_input``, ``write``, ``flush``, ``bytes_waiting``,
            ``read`` and ``set_transmit_enable`` methods.
        timeout_ms: Reply window in milliseconds.
        settle_ms: Direction switch settle time in milliseconds.
        capacity: Reply buffer capacity in bytes.
        clock: Monotonic clock returning seconds.
        sleep: Sleep function taking seconds.
    """

    def __init__(
        self,
        connection,
        timeout_ms: int = REPLY_TIMEOUT_MS,
        settle_ms: int = SETTLE_TIME_MS,
        capacity: int = RESPONSE_CAPACITY,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._connection = connection
        self._timeout_s = timeout_ms / 1000.0
        self._capacity = capacity
        self._clock = clock
        self._sleep = sleep
        self._direction = BusDirectionController(connection, settle_ms, sleep)
        self._lock = threading.Lock()

    @property
    def direction(self) -> BusDirectionController:
        return self._direction

    @property
    def connection(self):
        return self._connection

    def transact(self, frame: bytes) -> TransactionResult:
        """Send *frame* and collect the reply window.

        Args:
            frame: Encoded command frame.

        Returns:
            A ``TransactionResult``; ``success`` is ``True`` for every
            completed transaction, including an empty reply.
        """
        with self._lock:
            stale = self._connection.discard_input()
            if stale:
                logger.debug("Discarded %d stale byte(s) before transmit", stale)

            with self._direction.transmit():
                written = self._connection.write(bytes(frame))
                self._connection.flush()
                if written is not None and written < len(frame):
                    logger.warning(
                        "Short write: %d of %d byte(s) sent", written, len(frame)
                    )
                logger.info("Sent: %s", format_bytes(frame))

            response = self._await_reply()

        if not response:
            logger.info("No response received.")
            return TransactionResult(True, b"", ResponseOutcome.EMPTY_REPLY)

        logger.info("Response detected! (%d bytes)", len(response))
        status = decode_status(response)
        if status is None:
            return TransactionResult(True, response, ResponseOutcome.MALFORMED)
        return TransactionResult(True, response, ResponseOutcome.VALIDATED, status)

    def _await_reply(self) -> bytes:
        buffer = ResponseBuffer(self._capacity)
        deadline = self._clock() + self._timeout_s
        dropped = 0

        # Bytes past capacity are still read off the port until the window closes.
        while self._clock() < deadline:
            waiting = self._connection.bytes_waiting()
            if not waiting:
                self._sleep(POLL_INTERVAL_S)
                continue
            data = self._connection.read(waiting)
            dropped += len(data) - buffer.extend(data)

        if dropped:
            logger.debug("Reply buffer full, discarded %d byte(s)", dropped)
        return bytes(buffer)

    def send_hex(self, hex_string: str) -> TransactionResult:
        """Encode *hex_string* and transact it.

        Raises:
            EncodingError: If the string is not a valid hex frame. No bus
                I/O happens in that case.
        """
        logger.info("Processing hex string: %s", hex_string)
        return self.transact(encode_hex_frame(hex_string))

    def send_command(self, command: Command) -> TransactionResult:
        """Transact one of the predefined actuator commands."""
        logger.info("Sending %s", command.label)
        return self.transact(command.frame)

    def check_status(self) -> TransactionResult:
        return self.send_command(Command.STATUS_CHECK)
