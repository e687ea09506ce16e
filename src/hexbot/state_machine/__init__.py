"""Movement state machine and robot model."""

from .model import RobotModel
from .movement import MovementState, MovementStateMachine, MovementTransition, next_state

__all__ = [
    "MovementState",
    "MovementStateMachine",
    "MovementTransition",
    "RobotModel",
    "next_state",
]
