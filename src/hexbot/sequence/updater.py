"""Translate gait sequences into the minimal set of sequencer commands."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Tuple

from hexbot.errors import SequenceRequiredError
from hexbot.serial_io.command import Command
from hexbot.serial_io.protocol import FrontRear, LegPosition, ServoSide
from hexbot.state_machine import MovementState

from .models import GaitSequence

logger = logging.getLogger("sequence.updater")

FieldEncoder = Callable[[Command, int], Command]

# Board register order: vertical positions, vertical speed, horizontal
# positions, horizontal time, travel percentages.
SEQUENCE_FIELDS: Tuple[Tuple[str, FieldEncoder], ...] = (
    ("vertical_left_high", lambda c, v: c.set_vertical_servo(ServoSide.LEFT, LegPosition.HIGH, v)),
    ("vertical_left_mid", lambda c, v: c.set_vertical_servo(ServoSide.LEFT, LegPosition.MID, v)),
    ("vertical_left_low", lambda c, v: c.set_vertical_servo(ServoSide.LEFT, LegPosition.LOW, v)),
    ("vertical_right_high", lambda c, v: c.set_vertical_servo(ServoSide.RIGHT, LegPosition.HIGH, v)),
    ("vertical_right_mid", lambda c, v: c.set_vertical_servo(ServoSide.RIGHT, LegPosition.MID, v)),
    ("vertical_right_low", lambda c, v: c.set_vertical_servo(ServoSide.RIGHT, LegPosition.LOW, v)),
    ("vertical_movement_speed", lambda c, v: c.set_vertical_servo_movement_speed(v)),
    ("horizontal_left_front", lambda c, v: c.set_horizontal_servo(ServoSide.LEFT, FrontRear.FRONT, v)),
    ("horizontal_left_rear", lambda c, v: c.set_horizontal_servo(ServoSide.LEFT, FrontRear.REAR, v)),
    ("horizontal_right_front", lambda c, v: c.set_horizontal_servo(ServoSide.RIGHT, FrontRear.FRONT, v)),
    ("horizontal_right_rear", lambda c, v: c.set_horizontal_servo(ServoSide.RIGHT, FrontRear.REAR, v)),
    ("horizontal_movement_time", lambda c, v: c.set_horizontal_servo_movement_time(v)),
    ("travel_percentage_left", lambda c, v: c.set_travel_percentage(ServoSide.LEFT, v)),
    ("travel_percentage_right", lambda c, v: c.set_travel_percentage(ServoSide.RIGHT, v)),
)


def start_sequence(command: Command, sequence: Optional[GaitSequence]) -> Command:
    """Write the whole sequence and (re)start the sequencer at the model speed.

    A running sequencer is stopped first, on its own line, because the
    board must be halted before its geometry is rewritten.
    """
    if sequence is None:
        raise SequenceRequiredError("sequence")
    if command.projected_state is MovementState.IN_WALK_SEQUENCE:
        command.stop_hex_sequencer().end_line()
    for name, encode in SEQUENCE_FIELDS:
        encode(command, getattr(sequence, name))
    return command.set_horizontal_speed_percentage(command.model.speed)


def update_sequence(
    command: Command,
    old_sequence: Optional[GaitSequence],
    old_speed: int,
    sequence: Optional[GaitSequence],
) -> Command:
    """Emit only the fields that differ between ``old_sequence`` and ``sequence``.

    ``XS`` follows the geometry only when the sequencer is stopped or the
    model speed moved away from ``old_speed``; re-sending it otherwise
    would reset the gait phase on the board.
    """
    if old_sequence is None:
        raise SequenceRequiredError("old_sequence")
    if sequence is None:
        raise SequenceRequiredError("sequence")
    changed = 0
    for name, encode in SEQUENCE_FIELDS:
        value = getattr(sequence, name)
        if getattr(old_sequence, name) != value:
            encode(command, value)
            changed += 1
    speed = command.model.speed
    if command.projected_state is MovementState.STOPPED or speed != old_speed:
        command.set_horizontal_speed_percentage(speed)
    logger.debug("Sequence update: %d field(s) changed, speed %d -> %d.", changed, old_speed, speed)
    return command
