"""Per-controller robot model: sequencer state plus horizontal speed."""

from __future__ import annotations

import logging

from hexbot.errors import SpeedPercentageRangeError

from .movement import MovementState, MovementStateMachine, MovementTransition

logger = logging.getLogger("control.model")

SPEED_MIN = 0
SPEED_MAX = 200


class RobotModel:
    """Holds the movement state and the horizontal speed percentage.

    The movement state is read-only for callers. It only changes through
    :meth:`apply_transition`, which the command builder calls after the
    line carrying ``XS`` or ``XSTOP`` has been written to the board.
    """

    def __init__(self, speed: int = 100) -> None:
        self._machine = MovementStateMachine()
        self._speed = SPEED_MIN
        self.speed = speed

    @property
    def state(self) -> MovementState:
        return self._machine.movement_state

    @property
    def is_walking(self) -> bool:
        return self.state is MovementState.IN_WALK_SEQUENCE

    @property
    def speed(self) -> int:
        return self._speed

    @speed.setter
    def speed(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or not SPEED_MIN <= value <= SPEED_MAX:
            raise SpeedPercentageRangeError(value)
        self._speed = value

    def adjust_speed(self, delta: int) -> int:
        """Change the speed by ``delta`` percent, clamped to 0..200."""
        self._speed = max(SPEED_MIN, min(SPEED_MAX, self._speed + delta))
        return self._speed

    def apply_transition(self, transition: MovementTransition) -> MovementState:
        if transition is MovementTransition.STOP_WALK and not self.is_walking:
            logger.debug("Sequencer already stopped; ignoring %s.", transition.value)
            return self.state
        self._machine.send(transition.value)
        return self.state
