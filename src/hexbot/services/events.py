"""Intent events published by input front ends and consumed by the control engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, auto
from typing import Optional, Sequence

from hexbot.sequence.models import Direction, GaitSequence


class EventType(Enum):
    """Main event groups travelling on the bus."""

    WALK = auto()
    STOP_WALK = auto()
    SPEED = auto()
    SEQUENCE_CHANGED = auto()
    SERVO = auto()
    STATUS_QUERY = auto()
    QUIT = auto()
    STOP = auto()


class QueryKind(Enum):
    """Board queries a front end can ask for."""

    VERSION = "version"
    MOVEMENT = "movement"
    PULSE_WIDTH = "pulse_width"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class WalkEvent:
    """Start (or steer) the walking sequencer."""

    direction: Direction = Direction.FORWARD
    created_at: datetime = field(default_factory=_utc_now)
    type: EventType = field(init=False, default=EventType.WALK)


@dataclass(frozen=True)
class StopWalkEvent:
    created_at: datetime = field(default_factory=_utc_now)
    type: EventType = field(init=False, default=EventType.STOP_WALK)


@dataclass(frozen=True)
class SetSpeedEvent:
    """Set the horizontal speed percentage (0-200)."""

    speed: int
    created_at: datetime = field(default_factory=_utc_now)
    type: EventType = field(init=False, default=EventType.SPEED)


@dataclass(frozen=True)
class AdjustSpeedEvent:
    """Change the horizontal speed by ``delta`` percent, clamped to 0-200."""

    delta: int
    created_at: datetime = field(default_factory=_utc_now)
    type: EventType = field(init=False, default=EventType.SPEED)


@dataclass(frozen=True)
class SequenceChangedEvent:
    """A new gait sequence has been loaded from configuration."""

    sequence: GaitSequence
    source: Optional[str] = None
    created_at: datetime = field(default_factory=_utc_now)
    type: EventType = field(init=False, default=EventType.SEQUENCE_CHANGED)


@dataclass(frozen=True)
class ServoMoveEvent:
    """Move one or more servos to the same pulse width."""

    channels: Sequence[int]
    pulse: int
    speed: Optional[int] = None
    time: Optional[int] = None
    created_at: datetime = field(default_factory=_utc_now)
    type: EventType = field(init=False, default=EventType.SERVO)


@dataclass(frozen=True)
class ServoStopEvent:
    channels: Sequence[int]
    created_at: datetime = field(default_factory=_utc_now)
    type: EventType = field(init=False, default=EventType.SERVO)


@dataclass(frozen=True)
class ServoOffsetEvent:
    channel: int
    offset: int
    created_at: datetime = field(default_factory=_utc_now)
    type: EventType = field(init=False, default=EventType.SERVO)


@dataclass(frozen=True)
class StatusQueryEvent:
    kind: QueryKind
    channel: Optional[int] = None
    created_at: datetime = field(default_factory=_utc_now)
    type: EventType = field(init=False, default=EventType.STATUS_QUERY)


@dataclass(frozen=True)
class QuitEvent:
    """The operator asked the controller to shut down."""

    created_at: datetime = field(default_factory=_utc_now)
    type: EventType = field(init=False, default=EventType.QUIT)


@dataclass(frozen=True)
class StopEvent:
    """Tells the event loop to exit, with an optional reason."""

    reason: str | None = None
    created_at: datetime = field(default_factory=_utc_now)
    type: EventType = field(init=False, default=EventType.STOP)
