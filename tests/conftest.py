"""Shared fakes for bus tests: a manual clock and a scripted serial port."""

from __future__ import annotations

from collections import deque

import pytest

from rs485_actuator.transport.serial_connection import PortInfo


class FakeClock:
    """Monotonic clock that only moves when ``sleep`` is called."""

    def __init__(self, start: float = 100.0, events: list | None = None) -> None:
        self.now = start
        self.events = events if events is not None else []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.events.append(("sleep", seconds))
        self.now += seconds


class FakeConnection:
    """Stands in for SerialConnection.

    Each ``write`` consumes the next queued reply; reply chunks become
    readable ``delay_s`` seconds after the write.
    """

    def __init__(self, clock: FakeClock, stale: bytes = b"") -> None:
        self.clock = clock
        self.events = clock.events
        self.connected = True
        self.port_info = PortInfo(port="/dev/ttyFAKE")
        self.written: list[bytes] = []
        self._inbox = bytearray(stale)
        self._replies: deque[list[tuple[float, bytes]]] = deque()
        self._scheduled: list[tuple[float, bytes]] = []

    def queue_reply(self, *chunks: tuple[float, bytes]) -> None:
        self._replies.append(list(chunks))

    def _deliver(self) -> None:
        due = [c for c in self._scheduled if c[0] <= self.clock.now]
        self._scheduled = [c for c in self._scheduled if c[0] > self.clock.now]
        for _, data in due:
            self._inbox.extend(data)

    def set_transmit_enable(self, enabled: bool) -> None:
        self.events.append(("tx", enabled))

    def discard_input(self) -> int:
        self._deliver()
        count = len(self._inbox)
        self._inbox.clear()
        self.events.append(("discard", count))
        return count

    def write(self, data: bytes) -> int:
        self.events.append(("write", bytes(data)))
        self.written.append(bytes(data))
        if self._replies:
            for delay_s, chunk in self._replies.popleft():
                self._scheduled.append((self.clock.now + delay_s, chunk))
        return len(data)

    def flush(self) -> None:
        self.events.append(("flush",))

    def bytes_waiting(self) -> int:
        self._deliver()
        return len(self._inbox)

    def read(self, size: int) -> bytes:
        self._deliver()
        data = bytes(self._inbox[:size])
        del self._inbox[:size]
        return data


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def conn(clock: FakeClock) -> FakeConnection:
    return FakeConnection(clock)


@pytest.fixture
def make_conn(clock: FakeClock):
    def _make(stale: bytes = b"") -> FakeConnection:
        return FakeConnection(clock, stale=stale)

    return _make
