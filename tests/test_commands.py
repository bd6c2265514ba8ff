"""Tests for the actuator command table."""

import pytest

from rs485_actuator.protocol.commands import (
    CONSOLE_CODES,
    DEVICE_ADDRESS,
    Command,
    command_for_code,
)


def test_command_frames_match_bus_table():
    assert Command.LIGHT_ON.frame == bytes([0x12, 0x82, 0x01, 0x22, 0xB7])
    assert Command.LIGHT_OFF.frame == bytes([0x12, 0x81, 0x01, 0x22, 0xB6])
    assert Command.FAN_ON.frame == bytes([0x12, 0x82, 0x01, 0x25, 0xBA])
    assert Command.FAN_OFF.frame == bytes([0x12, 0x81, 0x01, 0x25, 0xB9])
    assert Command.STATUS_CHECK.frame == bytes([0x12, 0x43, 0x01, 0x56, 0xAC])


def test_all_frames_addressed_to_device():
    for cmd in Command:
        assert cmd.frame[0] == DEVICE_ADDRESS
        assert len(cmd.frame) == 5


def test_console_codes():
    assert CONSOLE_CODES == {
        "0": Command.LIGHT_ON,
        "1": Command.LIGHT_OFF,
        "2": Command.FAN_ON,
        "3": Command.FAN_OFF,
        "4": Command.STATUS_CHECK,
    }


def test_command_for_code_strips_whitespace():
    assert command_for_code(" 4\n") is Command.STATUS_CHECK


def test_command_for_unknown_code():
    with pytest.raises(KeyError):
        command_for_code("5")


def test_label():
    assert Command.FAN_OFF.label == "fan off"
