"""Event bus and intent events shared by producers and the control engine."""

from .event_bus import EventBus
from .events import (
    AdjustSpeedEvent,
    EventType,
    QueryKind,
    QuitEvent,
    SequenceChangedEvent,
    ServoMoveEvent,
    ServoOffsetEvent,
    ServoStopEvent,
    SetSpeedEvent,
    StatusQueryEvent,
    StopEvent,
    StopWalkEvent,
    WalkEvent,
)
from .sequence_watcher import SequenceFileWatcher

__all__ = [
    "AdjustSpeedEvent",
    "EventBus",
    "EventType",
    "QueryKind",
    "QuitEvent",
    "SequenceChangedEvent",
    "SequenceFileWatcher",
    "ServoMoveEvent",
    "ServoOffsetEvent",
    "ServoStopEvent",
    "SetSpeedEvent",
    "StatusQueryEvent",
    "StopEvent",
    "StopWalkEvent",
    "WalkEvent",
]
