"""Error hierarchy shared by the encoder, the sequencer and the transport."""

from __future__ import annotations


class HexbotError(Exception):
    """Base class for every error raised by the hexbot package."""


class ValidationError(HexbotError, ValueError):
    """An argument is outside the range accepted by the board protocol."""

    def __init__(self, name: str, value: object, message: str) -> None:
        super().__init__(f"{name}={value!r}: {message}")
        self.name = name
        self.value = value


class ChannelRangeError(ValidationError):
    def __init__(self, channel: object) -> None:
        super().__init__("channel", channel, "servo channel needs to be between 0 and 31")


class PulseWidthRangeError(ValidationError):
    def __init__(self, name: str, value: object) -> None:
        super().__init__(name, value, "the valid range is between 500 and 2500us")


class PositionOffsetRangeError(ValidationError):
    def __init__(self, offset: object) -> None:
        super().__init__("offset", offset, "the position offset is restricted to -100us to 100us")


class ServoSpeedRangeError(ValidationError):
    def __init__(self, speed: object) -> None:
        super().__init__("speed", speed, "servo speed must be a non-negative number of us/s")


class ServoTimeRangeError(ValidationError):
    def __init__(self, time: object) -> None:
        super().__init__("time", time, "servo travel time must be between 0 and 65535")


class MovementSpeedRangeError(ValidationError):
    def __init__(self, speed: object) -> None:
        super().__init__("vertical_movement_speed", speed, "the valid range is 0 to 65535us/s")


class MovementTimeRangeError(ValidationError):
    def __init__(self, time: object) -> None:
        super().__init__("horizontal_movement_time", time, "the valid range is 1 to 65535us")


class TravelPercentageRangeError(ValidationError):
    def __init__(self, name: str, percentage: object) -> None:
        super().__init__(name, percentage, "the valid range is between -100% and 100%")


class SpeedPercentageRangeError(ValidationError):
    def __init__(self, percentage: object) -> None:
        super().__init__("speed", percentage, "the valid range is between 0% and 200%")


class SequenceRequiredError(ValidationError):
    def __init__(self, name: str) -> None:
        super().__init__(name, None, "a gait sequence is required")


class TransportError(HexbotError):
    """The serial link is not open or a write failed."""


class ResponseTimeoutError(HexbotError):
    """The board did not answer a query within the retry budget."""


class ProtocolError(HexbotError):
    """The board answered with something that could not be parsed."""


__all__ = [
    "ChannelRangeError",
    "HexbotError",
    "MovementSpeedRangeError",
    "MovementTimeRangeError",
    "PositionOffsetRangeError",
    "ProtocolError",
    "PulseWidthRangeError",
    "ResponseTimeoutError",
    "SequenceRequiredError",
    "ServoSpeedRangeError",
    "ServoTimeRangeError",
    "SpeedPercentageRangeError",
    "TransportError",
    "TravelPercentageRangeError",
    "ValidationError",
]
