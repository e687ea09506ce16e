"""Text commands understood by the console and Bluetooth front ends.

One command per line, case-insensitive, arguments separated by blanks::

    F | B | L | R               walk forward, backward, left, right
    STOP                        stop the walking sequencer
    SPEED+ | SPEED- | SPEED n   change or set the horizontal speed (%)
    S ch pulse [speed] [time]   move one servo
    X ch [ch ...]               stop servos
    O ch offset                 set a channel's position offset
    VER | STATUS | QP ch        query the board
    Q | QUIT                    shut the controller down
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from hexbot.sequence.models import Direction
from hexbot.services.events import (
    AdjustSpeedEvent,
    QueryKind,
    QuitEvent,
    ServoMoveEvent,
    ServoOffsetEvent,
    ServoStopEvent,
    SetSpeedEvent,
    StatusQueryEvent,
    StopWalkEvent,
    WalkEvent,
)

USAGE = "F|B|L|R, STOP, SPEED+|SPEED-|SPEED n, S ch pulse [speed] [time], X ch..., O ch offset, VER, STATUS, QP ch, QUIT"

_WALK_KEYWORDS: Dict[str, Direction] = {
    "F": Direction.FORWARD,
    "B": Direction.BACKWARD,
    "L": Direction.LEFT,
    "R": Direction.RIGHT,
}


def parse_line(text: str, speed_step: int = 10) -> Optional[object]:
    """Translate one command line into an event; blank lines yield ``None``.

    Raises ValueError for unknown keywords and malformed arguments. Range
    checks are left to the command encoder.
    """
    parts = text.strip().split()
    if not parts:
        return None
    keyword, args = parts[0].upper(), parts[1:]

    if keyword in _WALK_KEYWORDS:
        _expect_args(keyword, args, 0, 0)
        return WalkEvent(direction=_WALK_KEYWORDS[keyword])

    if keyword in ("SPEED+", "SPEED-"):
        _expect_args(keyword, args, 0, 0)
        return AdjustSpeedEvent(delta=speed_step if keyword == "SPEED+" else -speed_step)

    handler = _HANDLERS.get(keyword)
    if handler is None:
        raise ValueError(f"Unknown command {parts[0]!r}. Usage: {USAGE}")
    return handler(keyword, args)


def _stop(keyword: str, args: List[str]) -> object:
    _expect_args(keyword, args, 0, 0)
    return StopWalkEvent()


def _speed(keyword: str, args: List[str]) -> object:
    _expect_args(keyword, args, 1, 1)
    return SetSpeedEvent(speed=_int(args[0], "speed"))


def _servo(keyword: str, args: List[str]) -> object:
    _expect_args(keyword, args, 2, 4)
    values = [_int(arg, name) for arg, name in zip(args, ("channel", "pulse", "speed", "time"))]
    speed = values[2] if len(values) > 2 else None
    time = values[3] if len(values) > 3 else None
    return ServoMoveEvent(channels=(values[0],), pulse=values[1], speed=speed, time=time)


def _stop_servos(keyword: str, args: List[str]) -> object:
    _expect_args(keyword, args, 1, None)
    return ServoStopEvent(channels=tuple(_int(arg, "channel") for arg in args))


def _offset(keyword: str, args: List[str]) -> object:
    _expect_args(keyword, args, 2, 2)
    return ServoOffsetEvent(channel=_int(args[0], "channel"), offset=_int(args[1], "offset"))


def _version(keyword: str, args: List[str]) -> object:
    _expect_args(keyword, args, 0, 0)
    return StatusQueryEvent(kind=QueryKind.VERSION)


def _status(keyword: str, args: List[str]) -> object:
    _expect_args(keyword, args, 0, 0)
    return StatusQueryEvent(kind=QueryKind.MOVEMENT)


def _pulse_width(keyword: str, args: List[str]) -> object:
    _expect_args(keyword, args, 1, 1)
    return StatusQueryEvent(kind=QueryKind.PULSE_WIDTH, channel=_int(args[0], "channel"))


def _quit(keyword: str, args: List[str]) -> object:
    return QuitEvent()


_HANDLERS: Dict[str, Callable[[str, List[str]], object]] = {
    "STOP": _stop,
    "SPEED": _speed,
    "S": _servo,
    "X": _stop_servos,
    "O": _offset,
    "VER": _version,
    "STATUS": _status,
    "QP": _pulse_width,
    "Q": _quit,
    "QUIT": _quit,
}


def _expect_args(keyword: str, args: List[str], minimum: int, maximum: Optional[int]) -> None:
    if len(args) < minimum or (maximum is not None and len(args) > maximum):
        raise ValueError(f"Wrong number of arguments for {keyword}. Usage: {USAGE}")


def _int(raw: str, name: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
