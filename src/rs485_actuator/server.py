"""MCP server entry point for the RS-485 light/fan actuator.

Exposes the actuator commands as tools via the Model Context Protocol
using the official Python MCP SDK with stdio transport.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .config import DEFAULT_BAUDRATE, LinkSettings
from .protocol.commands import CONSOLE_CODES, Command, command_for_code
from .protocol.framing import EncodingError
from .transport.serial_connection import SerialConnection
from .transport.transceiver import Transceiver

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "rs485-actuator",
    instructions="MCP server for an RS-485 light and fan dimmer actuator",
)

# Global connection state
_connection: SerialConnection | None = None
_transceiver: Transceiver | None = None


def _get_transceiver() -> Transceiver:
    """Get the active transceiver, raising if not connected."""
    if _transceiver is None or not _transceiver.connection.connected:
        raise RuntimeError(
            "Not connected to the RS-485 bus. Use the 'connect' tool first."
        )
    return _transceiver


def _command_table() -> list[dict[str, str]]:
    return [
        {"code": code, "command": cmd.name, "frame": cmd.value}
        for code, cmd in CONSOLE_CODES.items()
    ]


# ─── CONNECTION TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def connect(port: str, baudrate: int = DEFAULT_BAUDRATE) -> dict[str, Any]:
    """Open the serial port wired to the RS-485 transceiver.

    Runs an initial status check, as the actuator console does on start.

    Args:
        port: Serial device path, e.g. /dev/ttyUSB0 or COM3.
        baudrate: Line speed (default 4800, 8N1).
    """
    global _connection, _transceiver
    if _transceiver is not None and _transceiver.connection.connected:
        return {
            "connected": True,
            "message": "Already connected",
            "port": _transceiver.connection.port_info.port,
        }

    settings = LinkSettings(port=port, baudrate=baudrate)
    _connection = SerialConnection(settings.port, settings.baudrate)
    info = _connection.open()
    _transceiver = Transceiver(
        _connection, timeout_ms=settings.timeout_ms, settle_ms=settings.settle_ms
    )

    result = _transceiver.check_status()
    return {
        "connected": True,
        "port": info.port,
        "baudrate": info.baudrate,
        "status": result.to_dict(),
    }


@mcp.tool()
def disconnect() -> dict[str, bool]:
    """Close the serial port."""
    global _connection, _transceiver
    if _connection is not None:
        _connection.close()
    _connection = None
    _transceiver = None
    return {"disconnected": True}


# ─── ACTUATOR TOOLS ───────────────────────────────────────────────────

@mcp.tool()
def set_light(on: bool) -> dict[str, Any]:
    """Switch the light channel on or off.

    Args:
        on: True to turn the light on, False to turn it off.
    """
    command = Command.LIGHT_ON if on else Command.LIGHT_OFF
    result = _get_transceiver().send_command(command)
    return {"command": command.name, **result.to_dict()}


@mcp.tool()
def set_fan(on: bool) -> dict[str, Any]:
    """Switch the fan channel on or off.

    Args:
        on: True to turn the fan on, False to turn it off.
    """
    command = Command.FAN_ON if on else Command.FAN_OFF
    result = _get_transceiver().send_command(command)
    return {"command": command.name, **result.to_dict()}


@mcp.tool()
def check_status() -> dict[str, Any]:
    """Query channel dimming levels and their output voltages.

    The ``reply`` field is ``decoded`` when channel data arrived,
    ``no_reply`` when the device stayed silent, and ``ignored`` when a
    reply arrived without the status header.
    """
    result = _get_transceiver().check_status()
    return {"command": Command.STATUS_CHECK.name, **result.to_dict()}


@mcp.tool()
def execute_command(code: str) -> dict[str, Any]:
    """Run a command by its console code.

    Args:
        code: 0 light on, 1 light off, 2 fan on, 3 fan off, 4 check status.
    """
    try:
        command = command_for_code(code)
    except KeyError as e:
        return {"error": str(e.args[0])}

    result = _get_transceiver().send_command(command)
    return {"command": command.name, **result.to_dict()}


@mcp.tool()
def send_hex(hex_string: str) -> dict[str, Any]:
    """Send a raw frame written as hex, e.g. "12 82 01 22 B7".

    Args:
        hex_string: Hex digits, optionally space separated.
    """
    try:
        result = _get_transceiver().send_hex(hex_string)
    except EncodingError as e:
        return {"error": str(e)}
    return result.to_dict()


@mcp.tool()
def list_commands() -> dict[str, Any]:
    """List the predefined actuator commands and their frames."""
    return {"commands": _command_table()}


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("rs485://commands")
def resource_commands() -> str:
    """Actuator command table."""
    return json.dumps({"commands": _command_table()})


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
