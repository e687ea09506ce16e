"""Single-use builder assembling SSC-32 sub-commands into protocol lines."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from hexbot.state_machine import MovementState, MovementTransition, RobotModel, next_state

from .protocol import (
    HEX_SEQUENCER_STOP,
    TOKEN_SEPARATOR,
    FrontRear,
    LegPosition,
    ServoSide,
    encode_horizontal_servo,
    encode_horizontal_time,
    encode_position_offset,
    encode_single_servo,
    encode_speed_percentage,
    encode_stop_servo,
    encode_travel_percentage,
    encode_vertical_servo,
    encode_vertical_speed,
)

logger = logging.getLogger("serial.command")


class LineTransport(Protocol):
    """Anything able to write one terminated protocol line atomically."""

    def write_line(self, line: str) -> None: ...


@dataclass
class _PendingLine:
    tokens: List[str] = field(default_factory=list)
    transitions: List[MovementTransition] = field(default_factory=list)

    def render(self) -> str:
        return TOKEN_SEPARATOR.join(self.tokens)


class Command:
    """Accumulates protocol tokens and sends them with :meth:`execute`.

    Every primitive validates its arguments before touching the builder, so
    a rejected argument never leaves a partial token behind. Sequencer
    state changes implied by ``XS`` and ``XSTOP`` are tracked as a
    projection while the command is assembled and only applied to the
    :class:`RobotModel` once the line carrying them has been written.
    """

    def __init__(self, model: RobotModel) -> None:
        self._model = model
        self._lines: List[_PendingLine] = [_PendingLine()]
        self._projected_state = model.state
        self._executed = False

    @property
    def model(self) -> RobotModel:
        return self._model

    @property
    def projected_state(self) -> MovementState:
        """Sequencer state the board will be in once this command has been sent."""
        return self._projected_state

    @property
    def executed(self) -> bool:
        return self._executed

    def tokens(self) -> list[str]:
        return [token for line in self._lines for token in line.tokens]

    def lines(self) -> list[str]:
        """Rendered protocol lines, without terminator."""
        return [line.render() for line in self._lines if line.tokens]

    def is_empty(self) -> bool:
        return not any(line.tokens for line in self._lines)

    def end_line(self) -> "Command":
        """Close the current line; following tokens go to a new physical line."""
        self._ensure_not_executed()
        if self._lines[-1].tokens:
            self._lines.append(_PendingLine())
        return self

    # Basic servo commands ---------------------------------------------------

    def single_servo(
        self,
        channel: int,
        pulse: int,
        speed: Optional[int] = None,
        time: Optional[int] = None,
    ) -> "Command":
        """Move the servo on ``channel`` (0-31) to ``pulse`` microseconds."""
        return self._append(encode_single_servo(channel, pulse, speed, time))

    def servo_position_offset(self, channel: int, offset: int) -> "Command":
        """Shift the center of ``channel`` by ``offset`` microseconds (-100 to 100)."""
        return self._append(encode_position_offset(channel, offset))

    def stop_servo(self, channel: int) -> "Command":
        """Halt ``channel`` where it is, cancelling any timed move in progress."""
        return self._append(encode_stop_servo(channel))

    # Hexapod sequencer --------------------------------------------------------

    def set_vertical_servo(self, side: ServoSide, leg: LegPosition, value: int) -> "Command":
        """Set the pulse used for the high, mid or low leg height on one side."""
        return self._append(encode_vertical_servo(side, leg, value))

    def set_vertical_servo_movement_speed(self, speed: int) -> "Command":
        return self._append(encode_vertical_speed(speed))

    def set_horizontal_servo(self, side: ServoSide, end: FrontRear, value: int) -> "Command":
        """Set the front or rear stride pulse for one side."""
        return self._append(encode_horizontal_servo(side, end, value))

    def set_horizontal_servo_movement_time(self, time: int) -> "Command":
        return self._append(encode_horizontal_time(time))

    def set_travel_percentage(self, side: ServoSide, percentage: int) -> "Command":
        """Scale the stride of one side; negative values walk that side backwards."""
        return self._append(encode_travel_percentage(side, percentage))

    def set_horizontal_speed_percentage(self, percentage: int) -> "Command":
        """Send ``XS``; this (re)starts the board sequencer."""
        return self._append(encode_speed_percentage(percentage), MovementTransition.START_WALK)

    def stop_hex_sequencer(self) -> "Command":
        """Send ``XSTOP`` unless the sequencer is already (or about to be) stopped."""
        self._ensure_not_executed()
        if self._projected_state is MovementState.STOPPED:
            logger.debug("XSTOP skipped: sequencer already stopped.")
            return self
        return self._append(HEX_SEQUENCER_STOP, MovementTransition.STOP_WALK)

    # Execution --------------------------------------------------------------

    def execute(self, transport: LineTransport) -> int:
        """Write every assembled line in order and return how many were sent.

        Transitions attached to a line are applied to the model right after
        that line has been written; a failing write propagates and leaves
        the model as it was before the failed line.
        """
        self._ensure_not_executed()
        self._executed = True
        written = 0
        for line in self._lines:
            if not line.tokens:
                continue
            transport.write_line(line.render())
            written += 1
            for transition in line.transitions:
                self._model.apply_transition(transition)
        if not written:
            logger.debug("Command had no tokens; nothing sent.")
        return written

    def _append(self, token: str, transition: Optional[MovementTransition] = None) -> "Command":
        self._ensure_not_executed()
        line = self._lines[-1]
        line.tokens.append(token)
        if transition is not None:
            line.transitions.append(transition)
            self._projected_state = next_state(self._projected_state, transition)
        return self

    def _ensure_not_executed(self) -> None:
        if self._executed:
            raise RuntimeError("Command already executed; create a new one for the next batch.")

    def __repr__(self) -> str:
        return f"Command(lines={self.lines()!r}, projected_state={self._projected_state.name})"
