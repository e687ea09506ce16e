"""Gait sequence value type: the leg travel geometry of the walking sequencer."""

from __future__ import annotations

import enum
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping

from hexbot.serial_io.protocol import (
    validate_horizontal_time,
    validate_pulse_width,
    validate_travel_percentage,
    validate_vertical_speed,
)

# Key names used by sequence files written for the legacy .NET controller.
LEGACY_FIELD_NAMES: Dict[str, str] = {
    "VerticalServo_Left_HighValue": "vertical_left_high",
    "VerticalServo_Left_MidValue": "vertical_left_mid",
    "VerticalServo_Left_LowValue": "vertical_left_low",
    "VerticalServo_Right_HighValue": "vertical_right_high",
    "VerticalServo_Right_MidValue": "vertical_right_mid",
    "VerticalServo_Right_LowValue": "vertical_right_low",
    "VerticalServo_MovementSpeed": "vertical_movement_speed",
    "HorizontalServo_Left_FrontValue": "horizontal_left_front",
    "HorizontalServo_Left_RearValue": "horizontal_left_rear",
    "HorizontalServo_Right_FrontValue": "horizontal_right_front",
    "HorizontalServo_Right_RearValue": "horizontal_right_rear",
    "HorizontalServo_MovementTime": "horizontal_movement_time",
    "TravelPercentage_Left": "travel_percentage_left",
    "TravelPercentage_Right": "travel_percentage_right",
}

_PULSE_FIELDS = (
    "vertical_left_high",
    "vertical_left_mid",
    "vertical_left_low",
    "vertical_right_high",
    "vertical_right_mid",
    "vertical_right_low",
    "horizontal_left_front",
    "horizontal_left_rear",
    "horizontal_right_front",
    "horizontal_right_rear",
)


class Direction(enum.Enum):
    """Walking directions obtained by changing the per-side travel percentage."""

    FORWARD = "forward"
    BACKWARD = "backward"
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class GaitSequence:
    """Walking gait configuration.

    The defaults describe the canonical stand-still, ready-to-walk posture.
    Values are validated on construction with the same errors the command
    encoder raises, so a sequence that exists can always be encoded.
    """

    vertical_left_high: int = 1600
    vertical_left_mid: int = 1300
    vertical_left_low: int = 1000

    vertical_right_high: int = 1000
    vertical_right_mid: int = 1300
    vertical_right_low: int = 1600

    vertical_movement_speed: int = 3000

    horizontal_left_front: int = 700
    horizontal_left_rear: int = 1600

    horizontal_right_front: int = 1600
    horizontal_right_rear: int = 700

    horizontal_movement_time: int = 1500
    travel_percentage_left: int = 100
    travel_percentage_right: int = 100

    def __post_init__(self) -> None:
        for name in _PULSE_FIELDS:
            validate_pulse_width(getattr(self, name), name=name)
        validate_vertical_speed(self.vertical_movement_speed)
        validate_horizontal_time(self.horizontal_movement_time)
        validate_travel_percentage(self.travel_percentage_left, name="travel_percentage_left")
        validate_travel_percentage(self.travel_percentage_right, name="travel_percentage_right")

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any], base: "GaitSequence | None" = None) -> "GaitSequence":
        """Build a sequence from a flat key/value set; missing keys keep ``base`` values.

        Keys may be the field names of this class or the legacy
        ``VerticalServo_Left_HighValue`` style names. Unknown keys raise
        ``KeyError``.
        """
        known = set(cls.field_names())
        updates: Dict[str, int] = {}
        for key, value in values.items():
            name = LEGACY_FIELD_NAMES.get(key, key)
            if name not in known:
                raise KeyError(f"Unknown gait sequence field '{key}'")
            updates[name] = _to_int(name, value)
        return replace(base or cls(), **updates)

    def with_travel(self, left: int, right: int) -> "GaitSequence":
        return replace(self, travel_percentage_left=left, travel_percentage_right=right)

    def for_direction(self, direction: Direction) -> "GaitSequence":
        """Derive the sequence used to walk in ``direction`` from this one."""
        if direction is Direction.FORWARD:
            return self
        if direction is Direction.BACKWARD:
            return self.with_travel(-100, -100)
        if direction is Direction.LEFT:
            return self.with_travel(100, -100)
        return self.with_travel(-100, 100)


def _to_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Gait sequence field '{name}' must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as exc:
            raise ValueError(f"Gait sequence field '{name}' must be an integer, got {value!r}") from exc
    raise ValueError(f"Gait sequence field '{name}' must be an integer, got {value!r}")
