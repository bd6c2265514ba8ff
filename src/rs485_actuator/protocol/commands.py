"""Bus commands understood by the actuator.

Each command is a literal frame. The trailing byte is a fixed
terminator baked into the literal, so frames are stored precomputed
rather than assembled from fields.
"""

from __future__ import annotations

from enum import Enum

from .framing import encode_hex_frame

DEVICE_ADDRESS = 0x12


class Command(Enum):
    """Actuator commands and their literal hex frames."""

    LIGHT_ON = "12 82 01 22 B7"
    LIGHT_OFF = "12 81 01 22 B6"
    FAN_ON = "12 82 01 25 BA"
    FAN_OFF = "12 81 01 25 B9"
    STATUS_CHECK = "12 43 01 56 AC"

    @property
    def frame(self) -> bytes:
        return COMMAND_FRAMES[self]

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").lower()


COMMAND_FRAMES: dict[Command, bytes] = {
    cmd: encode_hex_frame(cmd.value) for cmd in Command
}

# Operator console codes
CONSOLE_CODES: dict[str, Command] = {
    "0": Command.LIGHT_ON,
    "1": Command.LIGHT_OFF,
    "2": Command.FAN_ON,
    "3": Command.FAN_OFF,
    "4": Command.STATUS_CHECK,
}


def command_for_code(code: str) -> Command:
    """Look up the command for a console code.

    Raises:
        KeyError: If *code* is not one of ``0``-``4``.
    """
    try:
        return CONSOLE_CODES[code.strip()]
    except KeyError:
        raise KeyError(
            f"Unknown command code {code!r}. Valid: {list(CONSOLE_CODES)}"
        ) from None

