"""Interactive maintenance console on standard input."""

from __future__ import annotations

import sys
from typing import Optional, TextIO

from hexbot.services.event_bus import EventBus
from hexbot.services.events import QuitEvent

from .base import LineFrontend
from .line_protocol import USAGE


class ConsoleFrontend(LineFrontend):
    """Reads commands typed on ``stream``; end of input requests a quit."""

    thread_name = "Console"

    def __init__(self, bus: EventBus, speed_step: int = 10, stream: Optional[TextIO] = None) -> None:
        super().__init__(bus, speed_step=speed_step)
        self._stream = stream if stream is not None else sys.stdin

    def _run(self) -> None:
        self.logger.info("Awaiting commands (%s).", USAGE)
        while not self._stop_event.is_set():
            line = self._stream.readline()
            if not line:
                self.logger.info("Console input closed.")
                self._bus.publish(QuitEvent())
                return
            self.handle_line(line)
