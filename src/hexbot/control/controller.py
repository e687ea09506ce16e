"""Control engine: the single consumer applying intent events to the board."""

from __future__ import annotations

import logging
import queue
import threading
import time
from typing import Optional

from hexbot.errors import TransportError, ValidationError
from hexbot.services import (
    AdjustSpeedEvent,
    EventBus,
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

from .context import ControlContext

logger = logging.getLogger("control.engine")

# Events that cannot do anything useful without a board connection.
_BOARD_EVENTS = (WalkEvent, StopWalkEvent, ServoMoveEvent, ServoStopEvent, ServoOffsetEvent, StatusQueryEvent)


class ControlEngine:
    """Runs the event loop that owns the context, and therefore the serial link.

    Producers only publish on the bus, so at most one command is ever being
    assembled or written at a time.
    """

    def __init__(self, context: ControlContext, bus: EventBus, reconnect_delay_s: float = 2.0) -> None:
        self.context = context
        self.bus = bus
        self._reconnect_delay_s = reconnect_delay_s
        self._last_reconnect_attempt: Optional[float] = None
        self._loop_thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._quit_requested = threading.Event()

    @property
    def is_running(self) -> bool:
        return bool(self._loop_thread and self._loop_thread.is_alive())

    @property
    def quit_requested(self) -> bool:
        return self._quit_requested.is_set()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop_event.clear()
        self._loop_thread = threading.Thread(target=self._event_loop, name="ControlEventLoop", daemon=True)
        self._loop_thread.start()
        logger.info("Control engine started.")

    def stop(self) -> None:
        """Exit the event loop, then stop the sequencer if the board is reachable."""
        self._stop_event.set()
        self.bus.stop("engine shutdown")
        if self._loop_thread:
            self._loop_thread.join(timeout=2.0)
        self._loop_thread = None
        if self.context.reachable and self.context.board.is_open:
            try:
                self.context.stop_walking()
            except TransportError as exc:
                logger.error("Could not stop sequencer on shutdown: %s", exc)
        logger.info("Control engine stopped.")

    def wait_for_quit(self, timeout: Optional[float] = None) -> bool:
        return self._quit_requested.wait(timeout)

    def dispatch_event(self, event: object) -> bool:
        """Apply one event; returns False when it was dropped or failed."""
        event_name = type(event).__name__
        logger.debug("Dispatching %s (sequencer %s)", event_name, self.context.model.state.name)

        if isinstance(event, QuitEvent):
            logger.info("Quit requested.")
            self._quit_requested.set()
            return True

        if not self.context.reachable and not self._try_reconnect():
            if isinstance(event, _BOARD_EVENTS):
                logger.warning("Board unreachable; dropping %s.", event_name)
                return False

        try:
            self._handle(event)
        except ValidationError as exc:
            logger.error("Rejected %s: %s", event_name, exc)
            return False
        except TransportError as exc:
            logger.error("Transport error while handling %s: %s", event_name, exc)
            self.context.mark_unreachable()
            return False
        except Exception:
            logger.exception("Error while dispatching event: %s", event)
            return False
        return True

    def _event_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                event = self.bus.get(timeout=0.5)
            except queue.Empty:
                continue

            if isinstance(event, StopEvent):
                logger.info("Control engine received stop event: %s", event.reason)
                break

            self.dispatch_event(event)

    def _handle(self, event: object) -> None:
        """Route an intent event to the matching context operation."""
        context = self.context
        if isinstance(event, WalkEvent):
            context.walk(event.direction)
        elif isinstance(event, StopWalkEvent):
            context.stop_walking()
        elif isinstance(event, SetSpeedEvent):
            context.set_speed(event.speed)
        elif isinstance(event, AdjustSpeedEvent):
            context.adjust_speed(event.delta)
        elif isinstance(event, SequenceChangedEvent):
            context.reload_sequence(event.sequence)
        elif isinstance(event, ServoMoveEvent):
            context.move_servos(event.channels, event.pulse, event.speed, event.time)
        elif isinstance(event, ServoStopEvent):
            context.stop_servos(event.channels)
        elif isinstance(event, ServoOffsetEvent):
            context.set_servo_offset(event.channel, event.offset)
        elif isinstance(event, StatusQueryEvent):
            context.query_status(event.kind, event.channel)
        else:
            logger.debug("Unhandled event type: %s", type(event).__name__)

    def _try_reconnect(self) -> bool:
        """Attempt a reconnect at most once per ``reconnect_delay_s``."""
        now = time.monotonic()
        if self._last_reconnect_attempt is not None and now - self._last_reconnect_attempt < self._reconnect_delay_s:
            return False
        self._last_reconnect_attempt = now
        return self.context.reconnect()
