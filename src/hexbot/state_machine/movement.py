"""State machine mirroring the board's hexapod sequencer."""

from __future__ import annotations

import enum
import logging

from statemachine import State, StateMachine

logger = logging.getLogger("control.movement")


class MovementState(enum.Enum):
    """Whether the board sequencer is driving the legs autonomously."""

    STOPPED = "stopped"
    IN_WALK_SEQUENCE = "in_walk_sequence"


class MovementTransition(enum.Enum):
    """Events that move the sequencer between states."""

    START_WALK = "start_walk"
    STOP_WALK = "stop_walk"


class MovementStateMachine(StateMachine):
    """Stopped until ``XS`` is accepted by the board, Stopped again after ``XSTOP``."""

    stopped = State("Stopped", initial=True)
    in_walk_sequence = State("InWalkSequence")

    start_walk = stopped.to(in_walk_sequence) | in_walk_sequence.to.itself()
    stop_walk = in_walk_sequence.to(stopped)

    def after_transition(self, event: str, source: State, target: State) -> None:
        if source != target:
            logger.info("🔄 SEQUENCER: %s → %s (trigger: %s)", source.id, target.id, event)

    @property
    def movement_state(self) -> MovementState:
        return MovementState(self.current_state.id)


def next_state(state: MovementState, transition: MovementTransition) -> MovementState:
    """Pure transition table used to project the state of a command in assembly."""
    if transition is MovementTransition.START_WALK:
        return MovementState.IN_WALK_SEQUENCE
    if state is MovementState.STOPPED:
        raise ValueError("Sequencer is already stopped.")
    return MovementState.STOPPED
