"""Remote control over a Bluetooth serial (RFCOMM) port."""

from __future__ import annotations

from typing import Any, Callable, Optional

try:
    import serial
    from serial import SerialException
except ImportError as exc:  # pragma: no cover - dependency guard
    raise ImportError("pyserial is required. Install with `pip install pyserial`.") from exc

from hexbot.config.models import BluetoothConfig
from hexbot.services.event_bus import EventBus

from .base import LineFrontend

SerialFactory = Callable[..., Any]


class BluetoothFrontend(LineFrontend):
    """Reads newline or carriage-return terminated commands from the RFCOMM port.

    The port is (re)opened lazily by the reader loop, so a phone pairing
    after start-up or dropping out is picked up without a restart.
    """

    thread_name = "Bluetooth"

    def __init__(
        self,
        bus: EventBus,
        config: BluetoothConfig,
        speed_step: int = 10,
        serial_factory: Optional[SerialFactory] = None,
        reconnect_delay_s: float = 2.0,
    ) -> None:
        super().__init__(bus, speed_step=speed_step)
        self._config = config
        self._serial_factory = serial_factory or serial.serial_for_url
        self._reconnect_delay_s = reconnect_delay_s
        self._serial: Any = None
        self._buffer = bytearray()

    def stop(self) -> None:
        super().stop()
        self._close_port()

    def _run(self) -> None:
        while not self._stop_event.is_set():
            if not self._ensure_port():
                self._stop_event.wait(self._reconnect_delay_s)
                continue
            try:
                data = self._serial.read(max(1, self._serial.in_waiting or 1))
            except SerialException as exc:
                self.logger.error("Bluetooth read error: %s", exc)
                self._close_port()
                self._stop_event.wait(self._reconnect_delay_s)
                continue
            if data:
                self.feed(data)
        self.logger.debug("Bluetooth reader loop exiting.")

    def feed(self, data: bytes) -> int:
        """Buffer raw bytes and handle every complete line; returns lines handled."""
        self._buffer.extend(data)
        handled = 0
        while True:
            positions = [pos for pos in (self._buffer.find(b"\n"), self._buffer.find(b"\r")) if pos >= 0]
            if not positions:
                return handled
            end = min(positions)
            raw = bytes(self._buffer[:end])
            del self._buffer[: end + 1]
            text = raw.decode("ascii", errors="replace").strip()
            if text:
                self.handle_line(text)
                handled += 1

    def _ensure_port(self) -> bool:
        if self._serial is not None and self._serial.is_open:
            return True
        try:
            self._serial = self._serial_factory(
                self._config.port,
                baudrate=self._config.baudrate,
                timeout=self._config.read_timeout_ms / 1000.0,
            )
        except (SerialException, OSError) as exc:
            self.logger.warning("Cannot open Bluetooth port %s: %s", self._config.port, exc)
            self._serial = None
            return False
        self._buffer.clear()
        self.logger.info("Bluetooth port %s opened at %d baud.", self._config.port, self._config.baudrate)
        return True

    def _close_port(self) -> None:
        if self._serial is None:
            return
        try:
            self._serial.close()
        except (SerialException, OSError) as exc:
            self.logger.debug("Error while closing Bluetooth port: %s", exc)
        self._serial = None
