"""Polls the gait sequence file and publishes changes on the event bus."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, Optional

from hexbot.sequence.loader import load_sequence
from hexbot.sequence.models import GaitSequence

from .event_bus import EventBus
from .events import SequenceChangedEvent

logger = logging.getLogger("services.sequence_watcher")

SequenceReader = Callable[[Path], GaitSequence]


class SequenceFileWatcher:
    """Reload the sequence file whenever its modification time changes.

    A file that fails to parse does not replace the current sequence: the
    last good one is published again so the consumer re-applies it.
    """

    def __init__(
        self,
        path: Path,
        bus: EventBus,
        poll_interval_s: float = 1.0,
        reader: SequenceReader = load_sequence,
    ) -> None:
        self._path = path
        self._bus = bus
        self._poll_interval_s = poll_interval_s
        self._reader = reader
        self._sequence: Optional[GaitSequence] = None
        self._last_mtime: Optional[float] = None
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    @property
    def sequence(self) -> Optional[GaitSequence]:
        return self._sequence

    @property
    def is_running(self) -> bool:
        return bool(self._thread and self._thread.is_alive())

    def load(self) -> GaitSequence:
        """Read the file once; raises if the first read fails."""
        self._last_mtime = self._mtime()
        self._sequence = self._reader(self._path)
        return self._sequence

    def start(self) -> None:
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="SequenceWatcher", daemon=True)
        self._thread.start()
        logger.info("Watching %s every %.2fs", self._path, self._poll_interval_s)

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=2.0)
        self._thread = None

    def poll(self) -> bool:
        """Check the file once; returns True when an event was published."""
        mtime = self._mtime()
        if mtime is None or mtime == self._last_mtime:
            return False
        self._last_mtime = mtime
        try:
            sequence = self._reader(self._path)
        except Exception as exc:
            logger.error("Error while reading gait sequence from %s: %s", self._path, exc)
            if self._sequence is None:
                return False
            logger.info("Re-applying previous gait sequence.")
            return self._bus.publish(SequenceChangedEvent(sequence=self._sequence, source=str(self._path)))
        self._sequence = sequence
        logger.info("Gait sequence changed in %s", self._path)
        return self._bus.publish(SequenceChangedEvent(sequence=sequence, source=str(self._path)))

    def _run(self) -> None:
        while not self._stop_event.wait(self._poll_interval_s):
            self.poll()
        logger.debug("Sequence watcher exiting.")

    def _mtime(self) -> Optional[float]:
        try:
            return self._path.stat().st_mtime
        except OSError:
            return None
