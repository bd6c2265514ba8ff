"""Operator console for the RS-485 actuator.

Reads single-digit commands from a text stream and runs a status check
on a fixed interval, both from one thread::

    rs485-actuator-console /dev/ttyUSB0 --baud 4800
"""

from __future__ import annotations

import argparse
import logging
import os
import select
import sys
import time
from typing import Callable, TextIO

from .config import (
    DEFAULT_BAUDRATE,
    REPLY_TIMEOUT_MS,
    SETTLE_TIME_MS,
    STATUS_POLL_INTERVAL_MS,
    LinkSettings,
)
from .protocol.commands import CONSOLE_CODES
from .scheduler import PollScheduler
from .transport.serial_connection import SerialConnection
from .transport.transceiver import Transceiver, TransactionResult

logger = logging.getLogger(__name__)

MENU = (
    "Enter a command: ",
    "0- turn on light",
    "1- turn off light",
    "2- turn on fan",
    "3- turn off fan",
    "4- check status",
)

STDIN_SELECT_SUPPORTED = sys.platform != "win32"
READ_CHUNK_SIZE = 1024


def _wait_readable(reader: LineReader, timeout_s: float) -> bool:
    readable, _, _ = select.select([reader], [], [], timeout_s)
    return bool(readable)


class LineReader:
    """Splits input read straight from a file descriptor into lines.

    Bytes are read with ``os.read`` so that nothing waits in a Python
    buffer after ``select`` reports the descriptor idle.
    """

    def __init__(self, fd: int, encoding: str = "utf-8") -> None:
        self._fd = fd
        self._encoding = encoding
        self._partial = b""
        self.closed = False

    def fileno(self) -> int:
        return self._fd

    def read_lines(self) -> list[str]:
        """Read what is available and return the complete lines.

        At end of input any unterminated text is returned as a final line
        and ``closed`` is set.
        """
        chunk = os.read(self._fd, READ_CHUNK_SIZE)
        if not chunk:
            self.closed = True
            rest, self._partial = self._partial, b""
            return [rest.decode(self._encoding, errors="replace")] if rest else []

        *lines, self._partial = (self._partial + chunk).split(b"\n")
        return [line.decode(self._encoding, errors="replace") for line in lines]


class ConsoleSession:
    """Dispatches operator input and periodic polls to one transceiver."""

    def __init__(
        self,
        transceiver: Transceiver,
        scheduler: PollScheduler | None = None,
        clock: Callable[[], float] = time.monotonic,
        out: Callable[[str], None] = print,
    ) -> None:
        self._transceiver = transceiver
        self._scheduler = scheduler or PollScheduler()
        self._clock = clock
        self._out = out

    @property
    def scheduler(self) -> PollScheduler:
        return self._scheduler

    def _now_ms(self) -> float:
        return self._clock() * 1000.0

    def print_menu(self) -> None:
        for line in MENU:
            self._out(line)

    def handle_line(self, line: str) -> TransactionResult | None:
        """Run the command for one line of operator input.

        Returns:
            The transaction result, or ``None`` if the line was empty or
            not a valid code.
        """
        code = line.strip()
        if not code:
            return None

        command = CONSOLE_CODES.get(code)
        if command is None:
            self._out("Invalid command. Please try again.")
            return None

        result = self._transceiver.send_command(command)
        self._report(result)
        return result

    def poll(self) -> TransactionResult | None:
        """Run the periodic status check if it is due."""
        return self._scheduler.run_if_due(self._now_ms(), self.check_status)

    def check_status(self) -> TransactionResult:
        result = self._transceiver.check_status()
        self._report(result)
        return result

    def _report(self, result: TransactionResult) -> None:
        if result.status is not None:
            for reading in result.status.channels:
                self._out(reading.describe())
        elif not result.response:
            self._out("No response received.")

    def run(
        self,
        stream: TextIO = sys.stdin,
        wait_readable: Callable[[LineReader, float], bool] = _wait_readable,
    ) -> None:
        """Serve operator input until end of stream.

        An initial status check runs immediately; afterwards the input
        wait is bounded by the time left until the next poll. Every line
        in a batch is handled before waiting again.
        """
        reader = LineReader(stream.fileno())
        self.print_menu()
        self.check_status()
        self._scheduler.mark(self._now_ms())

        while True:
            timeout_s = self._scheduler.remaining_ms(self._now_ms()) / 1000.0
            if wait_readable(reader, timeout_s):
                for line in reader.read_lines():
                    self.handle_line(line)
                if reader.closed:
                    logger.info("Input closed")
                    return
            self.poll()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Control the RS-485 light/fan actuator from the terminal. "
            "Requires a POSIX terminal; on Windows use the MCP server instead."
        )
    )
    parser.add_argument("port", help="serial device path, e.g. /dev/ttyUSB0")
    parser.add_argument(
        "--baud",
        type=int,
        default=DEFAULT_BAUDRATE,
        help=f"baud rate (default: {DEFAULT_BAUDRATE})",
    )
    parser.add_argument(
        "--interval-ms",
        type=int,
        default=STATUS_POLL_INTERVAL_MS,
        help=f"status poll interval in ms (default: {STATUS_POLL_INTERVAL_MS})",
    )
    parser.add_argument(
        "--timeout-ms",
        type=int,
        default=REPLY_TIMEOUT_MS,
        help=f"reply window in ms (default: {REPLY_TIMEOUT_MS})",
    )
    parser.add_argument(
        "--settle-ms",
        type=int,
        default=SETTLE_TIME_MS,
        help=f"transceiver settle time in ms (default: {SETTLE_TIME_MS})",
    )
    parser.add_argument(
        "--rts-low-for-tx",
        action="store_true",
        help="drive RTS low (instead of high) to enable the transmitter",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if not STDIN_SELECT_SUPPORTED:
        print(
            "Error: the console needs select() on stdin, which Windows does not "
            "support. Use rs485-actuator-mcp instead.",
            file=sys.stderr,
        )
        return 2
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        settings = LinkSettings(
            port=args.port,
            baudrate=args.baud,
            settle_ms=args.settle_ms,
            timeout_ms=args.timeout_ms,
            poll_interval_ms=args.interval_ms,
            rts_level_for_tx=not args.rts_low_for_tx,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    conn = SerialConnection(settings.port, settings.baudrate, settings.rts_level_for_tx)
    try:
        conn.open()
    except ConnectionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("RS-485 HEX Communication Initialized.")
    transceiver = Transceiver(
        conn, timeout_ms=settings.timeout_ms, settle_ms=settings.settle_ms
    )
    session = ConsoleSession(
        transceiver, PollScheduler(interval_ms=settings.poll_interval_ms)
    )
    try:
        session.run()
    except KeyboardInterrupt:
        pass
    finally:
        conn.close()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
