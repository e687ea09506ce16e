"""Thread-safe event bus feeding the single control consumer."""

from __future__ import annotations

import logging
import queue
from typing import Optional

from .events import StopEvent

logger = logging.getLogger("services.event_bus")


class EventBus:
    """Bounded queue between intent producers and the control engine."""

    def __init__(self, maxsize: int = 256) -> None:
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=maxsize)

    def publish(self, event: object) -> bool:
        """Queue ``event``; returns False and warns when the queue is full."""
        try:
            self._queue.put_nowait(event)
        except queue.Full:
            logger.warning("Event bus queue full; dropping event %s", event)
            return False
        return True

    def get(self, timeout: Optional[float] = None) -> object:
        """Next event, waiting at most ``timeout`` seconds (raises queue.Empty)."""
        return self._queue.get(timeout=timeout)

    def get_nowait(self) -> object:
        return self._queue.get_nowait()

    def pending(self) -> int:
        return self._queue.qsize()

    def stop(self, reason: str | None = None) -> None:
        """Publish a StopEvent so the consumer loop exits."""
        self.publish(StopEvent(reason=reason))
