"""Token encoders and response parsers for the SSC-32 ASCII protocol."""

from __future__ import annotations

import enum
from typing import Optional

from hexbot.errors import (
    ChannelRangeError,
    MovementSpeedRangeError,
    MovementTimeRangeError,
    PositionOffsetRangeError,
    ProtocolError,
    PulseWidthRangeError,
    ServoSpeedRangeError,
    ServoTimeRangeError,
    SpeedPercentageRangeError,
    TravelPercentageRangeError,
)

LINE_TERMINATOR = "\r"
TOKEN_SEPARATOR = " "

CHANNEL_MIN = 0
CHANNEL_MAX = 31
PULSE_MIN = 500
PULSE_MAX = 2500
OFFSET_MIN = -100
OFFSET_MAX = 100
UINT16_MAX = 65535
TRAVEL_MIN = -100
TRAVEL_MAX = 100
SPEED_PERCENT_MIN = 0
SPEED_PERCENT_MAX = 200

BAUD_9600 = 9600
BAUD_38400 = 38400
BAUD_115200 = 115200
SUPPORTED_BAUDRATES = (BAUD_9600, BAUD_38400, BAUD_115200)

VERSION_QUERY = "VER"
MOVEMENT_STATUS_QUERY = "Q"
HEX_SEQUENCER_STOP = "XSTOP"


class ServoSide(enum.Enum):
    """Side of the hexapod a sequencer register belongs to."""

    LEFT = "L"
    RIGHT = "R"


class LegPosition(enum.Enum):
    """Vertical leg position: High is the maximum height, Low the minimum."""

    HIGH = "H"
    MID = "M"
    LOW = "L"


class FrontRear(enum.Enum):
    """Horizontal end of the leg stroke."""

    FRONT = "F"
    REAR = "R"


class MovementStatus(enum.Enum):
    """Answer to the movement status query."""

    COMPLETE = "complete"
    IN_PROGRESS = "in_progress"
    UNKNOWN = "unknown"


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _in_range(value: object, low: int, high: int) -> bool:
    return _is_int(value) and low <= value <= high  # type: ignore[operator]


def validate_channel(channel: int) -> None:
    if not _in_range(channel, CHANNEL_MIN, CHANNEL_MAX):
        raise ChannelRangeError(channel)


def validate_pulse_width(value: int, name: str = "pulse") -> None:
    if not _in_range(value, PULSE_MIN, PULSE_MAX):
        raise PulseWidthRangeError(name, value)


def validate_vertical_speed(speed: int) -> None:
    if not _in_range(speed, 0, UINT16_MAX):
        raise MovementSpeedRangeError(speed)


def validate_horizontal_time(time: int) -> None:
    if not _in_range(time, 1, UINT16_MAX):
        raise MovementTimeRangeError(time)


def validate_travel_percentage(percentage: int, name: str = "percentage") -> None:
    if not _in_range(percentage, TRAVEL_MIN, TRAVEL_MAX):
        raise TravelPercentageRangeError(name, percentage)


def validate_speed_percentage(percentage: int) -> None:
    if not _in_range(percentage, SPEED_PERCENT_MIN, SPEED_PERCENT_MAX):
        raise SpeedPercentageRangeError(percentage)


# Basic servo commands --------------------------------------------------------


def encode_single_servo(channel: int, pulse: int, speed: Optional[int] = None, time: Optional[int] = None) -> str:
    """Move one servo: ``#{ch}P{pulse}[S{speed}][T{time}]``."""
    validate_channel(channel)
    validate_pulse_width(pulse)
    if speed is not None and not (_is_int(speed) and speed >= 0):
        raise ServoSpeedRangeError(speed)
    if time is not None and not _in_range(time, 0, UINT16_MAX):
        raise ServoTimeRangeError(time)
    token = f"#{channel}P{pulse}"
    if speed is not None:
        token += f"S{speed}"
    if time is not None:
        token += f"T{time}"
    return token


def encode_position_offset(channel: int, offset: int) -> str:
    """Shift the 1500us centre of a servo by at most 100us (around 15 degrees)."""
    validate_channel(channel)
    if not _in_range(offset, OFFSET_MIN, OFFSET_MAX):
        raise PositionOffsetRangeError(offset)
    return f"#{channel}PO{offset}"


def encode_stop_servo(channel: int) -> str:
    """Stop a servo immediately at its current position."""
    validate_channel(channel)
    return f"STOP{channel}"


# Hexapod sequencer commands ---------------------------------------------------


def encode_vertical_servo(side: ServoSide, leg: LegPosition, value: int) -> str:
    """``LH``, ``LM``, ``LL``, ``RH``, ``RM``, ``RL`` registers."""
    validate_pulse_width(value, name="value")
    return f"{ServoSide(side).value}{LegPosition(leg).value} {value}"


def encode_vertical_speed(speed: int) -> str:
    """``VS``: speed shared by every vertical servo move."""
    validate_vertical_speed(speed)
    return f"VS {speed}"


def encode_horizontal_servo(side: ServoSide, end: FrontRear, value: int) -> str:
    """``LF``, ``LR``, ``RF``, ``RR``: pulse width at the front/rear end of the stroke."""
    validate_pulse_width(value, name="value")
    return f"{ServoSide(side).value}{FrontRear(end).value} {value}"


def encode_horizontal_time(time: int) -> str:
    """``HT``: time to move between the horizontal front and rear positions."""
    validate_horizontal_time(time)
    return f"HT {time}"


def encode_travel_percentage(side: ServoSide, percentage: int) -> str:
    """``XL`` / ``XR``: negative values make the legs on that side walk in reverse."""
    validate_travel_percentage(percentage)
    return f"X{ServoSide(side).value}{percentage}"


def encode_speed_percentage(percentage: int) -> str:
    """``XS``: the sequencer does not start until this command is received."""
    validate_speed_percentage(percentage)
    return f"XS {percentage}"


# Queries ----------------------------------------------------------------------


def build_pulse_width_query(channel: int) -> str:
    validate_channel(channel)
    return f"QP {channel}"


def parse_movement_status(response: Optional[str]) -> MovementStatus:
    """Interpret the answer to ``Q``; ``.`` and ``+`` both report a finished move."""
    if response is None:
        raise ProtocolError("no movement status received")
    text = response.strip()
    if text in (".", "+"):
        return MovementStatus.COMPLETE
    raise ProtocolError(f"unexpected movement status response {response!r}")


def parse_pulse_width(raw: bytes) -> int:
    """The board answers ``QP`` with one byte holding the pulse width divided by 10."""
    if len(raw) != 1:
        raise ProtocolError(f"expected a single byte pulse width, got {raw!r}")
    return 10 * raw[0]
