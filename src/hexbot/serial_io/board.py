"""Query helpers for the SSC-32 servo controller."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from hexbot.errors import ProtocolError, ResponseTimeoutError

from .link import SerialLink
from .protocol import (
    MOVEMENT_STATUS_QUERY,
    VERSION_QUERY,
    MovementStatus,
    build_pulse_width_query,
    parse_movement_status,
    parse_pulse_width,
)

logger = logging.getLogger("serial.board")


class SSC32Board:
    """High-level wrapper for the board's version and status queries."""

    def __init__(self, link: SerialLink, sleep: Callable[[float], None] = time.sleep) -> None:
        self._link = link
        self._sleep = sleep
        self._version: Optional[str] = None

    @property
    def link(self) -> SerialLink:
        return self._link

    @property
    def is_open(self) -> bool:
        return self._link.is_open

    def write_line(self, line: str) -> None:
        self._link.write_line(line)

    def get_version(self) -> Optional[str]:
        """Firmware version string, cached after the first successful answer."""
        if self._version is not None:
            return self._version
        try:
            response = self._link.request(VERSION_QUERY)
        except ResponseTimeoutError as exc:
            logger.warning("❌ VER: %s", exc)
            return None
        self._version = response.strip()
        logger.info("📥 VER: %s", self._version)
        return self._version

    def query_movement_status(self) -> MovementStatus:
        """Ask whether the last move has finished; the board answers with one character."""
        try:
            response = self._link.request_byte(MOVEMENT_STATUS_QUERY).decode("ascii", errors="replace")
            status = parse_movement_status(response)
        except (ResponseTimeoutError, ProtocolError) as exc:
            logger.error("Error while querying movement status: %s", exc)
            status = MovementStatus.UNKNOWN
        logger.debug("📥 Q: %s", status.value)
        return status

    def query_pulse_width(self, channel: int) -> Optional[int]:
        """Current pulse width of ``channel`` in microseconds, None if unanswered."""
        query = build_pulse_width_query(channel)
        try:
            raw = self._link.request_byte(query)
            pulse = parse_pulse_width(raw)
        except (ResponseTimeoutError, ProtocolError) as exc:
            logger.warning("❌ QP %d: %s", channel, exc)
            return None
        logger.debug("📥 QP %d: %dus", channel, pulse)
        return pulse

    def wait_until_movement_complete(
        self,
        poll_interval_s: float = 0.1,
        timeout_s: Optional[float] = None,
        max_unknown: int = 5,
    ) -> MovementStatus:
        """Poll the movement status until the board stops reporting a move in progress.

        Consecutive Unknown answers are tolerated up to ``max_unknown`` and
        the whole wait is bounded by ``timeout_s``; the last status seen is
        returned either way.
        """
        deadline = time.monotonic() + timeout_s if timeout_s is not None else None
        unknown_count = 0
        while True:
            status = self.query_movement_status()
            if status is MovementStatus.COMPLETE:
                return status
            if status is MovementStatus.UNKNOWN:
                unknown_count += 1
                if unknown_count >= max_unknown:
                    logger.warning("Movement status unknown %d times in a row; giving up.", unknown_count)
                    return status
            else:
                unknown_count = 0
            if deadline is not None and time.monotonic() >= deadline:
                logger.warning("Movement did not complete within %.1fs.", timeout_s)
                return status
            self._sleep(poll_interval_s)
