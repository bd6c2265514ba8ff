"""Serial connection to the RS-485 actuator.

Uses ``pyserial`` against a USB or on-board UART wired to an RS-485
transceiver. The transceiver's driver-enable input is wired to the
port's RTS line, so transmit/receive direction is switched in software.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import serial

from ..config import DEFAULT_BAUDRATE

logger = logging.getLogger(__name__)


@dataclass
class PortInfo:
    """Settings of the opened serial port."""

    port: str = ""
    baudrate: int = DEFAULT_BAUDRATE
    bytesize: int = serial.EIGHTBITS
    parity: str = serial.PARITY_NONE
    stopbits: float = serial.STOPBITS_ONE


class SerialConnection:
    """Manages the serial port the RS-485 transceiver hangs off.

    Usage::

        conn = SerialConnection("/dev/ttyUSB0")
        conn.open()
        conn.set_transmit_enable(True)
        conn.write(frame_bytes)
        conn.flush()
        conn.set_transmit_enable(False)
        reply = conn.read(conn.bytes_waiting())
        conn.close()
    """

    def __init__(
        self,
        port: str,
        baudrate: int = DEFAULT_BAUDRATE,
        rts_level_for_tx: bool = True,
    ) -> None:
        self._port_info = PortInfo(port=port, baudrate=baudrate)
        self._rts_level_for_tx = rts_level_for_tx
        self._serial: serial.Serial | None = None

    @property
    def connected(self) -> bool:
        return self._serial is not None and bool(self._serial.is_open)

    @property
    def port_info(self) -> PortInfo:
        return self._port_info

    def open(self) -> PortInfo:
        """Open the serial port in receive mode.

        Returns:
            PortInfo describing the opened port.

        Raises:
            ConnectionError: If the port cannot be opened.
        """
        info = self._port_info
        try:
            ser = serial.Serial(
                port=info.port,
                baudrate=info.baudrate,
                bytesize=info.bytesize,
                parity=info.parity,
                stopbits=info.stopbits,
                timeout=0,
            )
        except serial.SerialException as e:
            raise ConnectionError(
                f"Could not open RS-485 port {info.port} at {info.baudrate} baud. "
                f"Ensure the adapter is connected and you have permissions. "
                f"Last error: {e}"
            ) from e

        self._serial = ser
        self.set_transmit_enable(False)
        logger.info("RS-485 link open on %s (%d 8N1)", info.port, info.baudrate)
        return info

    def close(self) -> None:
        """Close the serial port."""
        if self._serial is None:
            return

        try:
            self._serial.close()
        except serial.SerialException as e:
            logger.warning("Error closing port: %s", e)
        finally:
            self._serial = None
            logger.info("Disconnected")

    def _require_serial(self) -> serial.Serial:
        if not self.connected:
            raise ConnectionError("Not connected to RS-485 port")
        return self._serial

    def set_transmit_enable(self, enabled: bool) -> None:
        """Drive the transceiver's transmit-enable line."""
        ser = self._require_serial()
        ser.rts = self._rts_level_for_tx if enabled else not self._rts_level_for_tx

    def write(self, data: bytes) -> int:
        """Write *data* to the bus in a single call.

        Returns:
            Number of bytes written.

        Raises:
            ConnectionError: If not connected.
        """
        return self._require_serial().write(data)

    def flush(self) -> None:
        """Block until all written bytes have left the UART."""
        self._require_serial().flush()

    def bytes_waiting(self) -> int:
        """Number of received bytes ready to read."""
        return self._require_serial().in_waiting

    def read(self, size: int) -> bytes:
        """Read up to *size* already-received bytes without blocking."""
        if size <= 0:
            return b""
        return self._require_serial().read(size)

    def discard_input(self) -> int:
        """Drop any bytes sitting in the receive buffer.

        Returns:
            Number of bytes discarded.
        """
        ser = self._require_serial()
        stale = ser.in_waiting
        ser.reset_input_buffer()
        return stale
