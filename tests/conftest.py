from __future__ import annotations

from collections import deque
from typing import Iterable, List, Optional

import pytest
from serial import SerialException

from hexbot.config.models import SerialLinkConfig
from hexbot.errors import TransportError
from hexbot.serial_io import SSC32Board, SerialLink
from hexbot.state_machine import RobotModel


class FakeSerial:
    """Stands in for a pyserial port.

    Writes are recorded. Each write makes the next scripted answer readable,
    the way the board answers one query at a time.
    """

    def __init__(self, *args, **kwargs) -> None:
        self.args = args
        self.kwargs = kwargs
        self.is_open = True
        self.timeout = kwargs.get("timeout")
        self.writes: List[bytes] = []
        self.reads: deque[bytes] = deque()
        self.answers: deque[bytes] = deque()
        self.fail_writes = False
        self.resets = 0

    def script(self, *answers) -> None:
        """Queue one answer per future write; a tuple answer arrives in several chunks.

        An empty chunk inside a tuple reads as a timeout.
        """
        self.answers.extend(answers)

    @property
    def in_waiting(self) -> int:
        return len(self.reads[0]) if self.reads else 0

    def write(self, payload: bytes) -> int:
        if self.fail_writes:
            raise SerialException("device disconnected")
        self.writes.append(payload)
        if self.answers:
            answer = self.answers.popleft()
            self.reads.extend(answer if isinstance(answer, tuple) else (answer,))
        return len(payload)

    def flush(self) -> None:
        pass

    def read(self, size: int = 1) -> bytes:
        if not self.reads:
            return b""
        chunk = self.reads.popleft()
        if len(chunk) > size:
            self.reads.appendleft(chunk[size:])
            chunk = chunk[:size]
        return chunk

    def read_until(self, expected: bytes = b"\n", size: Optional[int] = None) -> bytes:
        line = bytearray()
        while not line.endswith(expected):
            byte = self.read(1)
            if not byte:
                break
            line.extend(byte)
        return bytes(line)

    def reset_input_buffer(self) -> None:
        self.resets += 1
        self.reads.clear()

    def close(self) -> None:
        self.is_open = False

    def written_lines(self) -> List[str]:
        return [payload.decode("ascii") for payload in self.writes]


class RecordingTransport:
    """Line transport capturing what a command would put on the wire."""

    def __init__(self, fail_on: Optional[Iterable[int]] = None) -> None:
        self.lines: List[str] = []
        self._fail_on = set(fail_on or ())

    def write_line(self, line: str) -> None:
        if len(self.lines) in self._fail_on:
            raise TransportError("write failed")
        self.lines.append(line)


class FakeSerialFactory:
    """Serial factory handing out FakeSerial ports; can be told to fail."""

    def __init__(self) -> None:
        self.ports: List[FakeSerial] = []
        self.fail = False

    def __call__(self, *args, **kwargs) -> FakeSerial:
        if self.fail:
            raise SerialException("could not open port")
        port = FakeSerial(*args, **kwargs)
        self.ports.append(port)
        return port

    @property
    def last(self) -> FakeSerial:
        return self.ports[-1]


@pytest.fixture
def model() -> RobotModel:
    return RobotModel(speed=50)


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def serial_factory() -> FakeSerialFactory:
    return FakeSerialFactory()


@pytest.fixture
def link(serial_factory: FakeSerialFactory) -> SerialLink:
    link = SerialLink(SerialLinkConfig(port="loop://", read_timeout_ms=1, read_retries=2), serial_factory=serial_factory)
    link.open()
    return link


@pytest.fixture
def board(link: SerialLink) -> SSC32Board:
    return SSC32Board(link, sleep=lambda _: None)
