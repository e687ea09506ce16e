"""Serial communication with the SSC-32 servo controller."""

from .protocol import (
    BAUD_9600,
    BAUD_38400,
    BAUD_115200,
    SUPPORTED_BAUDRATES,
    FrontRear,
    LegPosition,
    MovementStatus,
    ServoSide,
)
from .command import Command, LineTransport
from .link import SerialLink
from .board import SSC32Board

__all__ = [
    "BAUD_9600",
    "BAUD_38400",
    "BAUD_115200",
    "SUPPORTED_BAUDRATES",
    "Command",
    "FrontRear",
    "LegPosition",
    "LineTransport",
    "MovementStatus",
    "SSC32Board",
    "SerialLink",
    "ServoSide",
]
