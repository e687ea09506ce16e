"""Shared plumbing for front ends that turn text lines into bus events."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from hexbot.services.event_bus import EventBus

from .line_protocol import parse_line


class LineFrontend:
    """Reads command lines on a daemon thread and publishes the parsed events.

    Subclasses implement :meth:`_run`; it must return once ``_stop_event``
    is set or the input is exhausted.
    """

    thread_name = "Frontend"

    def __init__(self, bus: EventBus, speed_step: int = 10) -> None:
        self._bus = bus
        self._speed_step = speed_step
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self.logger = logging.getLogger(f"frontends.{self.thread_name.lower()}")

    @property
    def is_running(self) -> bool:
        return bool(self._thread and self._thread.is_alive())

    def start(self) -> None:
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name=self.thread_name, daemon=True)
        self._thread.start()
        self.logger.info("%s front end started.", self.thread_name)

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread and self._thread is not threading.current_thread():
            self._thread.join(timeout=2.0)
        self._thread = None

    def handle_line(self, text: str) -> bool:
        """Parse and publish one line; returns True when an event was queued."""
        try:
            event = parse_line(text, speed_step=self._speed_step)
        except ValueError as exc:
            self.logger.error("Received unknown action %r: %s", text.strip(), exc)
            return False
        if event is None:
            return False
        self.logger.debug("Received %s", type(event).__name__)
        return self._bus.publish(event)

    def _run(self) -> None:
        raise NotImplementedError
