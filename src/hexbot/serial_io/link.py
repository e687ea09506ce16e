"""Serial transport session to the SSC-32 board."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional

try:
    import serial
    from serial import SerialException
except ImportError as exc:  # pragma: no cover - dependency guard
    raise ImportError("pyserial is required. Install with `pip install pyserial`.") from exc

from hexbot.config.models import SerialLinkConfig
from hexbot.errors import ResponseTimeoutError, TransportError

from .protocol import LINE_TERMINATOR

logger = logging.getLogger("serial.link")

SerialFactory = Callable[..., Any]

_TERMINATOR_BYTES = LINE_TERMINATOR.encode("ascii")


class SerialLink:
    """Owns the serial port: open/close, atomic line writes, bounded reads."""

    def __init__(self, config: SerialLinkConfig, serial_factory: Optional[SerialFactory] = None) -> None:
        self._config = config
        self._serial_factory: SerialFactory = serial_factory or serial.serial_for_url
        self._serial: Optional[Any] = None
        self._port = config.port
        self._baudrate = config.baudrate
        self._io_lock = threading.RLock()

    @property
    def config(self) -> SerialLinkConfig:
        return self._config

    @property
    def port(self) -> str:
        return self._port

    @property
    def baudrate(self) -> int:
        return self._baudrate

    @property
    def is_open(self) -> bool:
        return bool(self._serial is not None and self._serial.is_open)

    # Lifecycle -----------------------------------------------------------------

    def open(self, port: Optional[str] = None, baudrate: Optional[int] = None) -> None:
        """Open ``port`` at ``baudrate`` (defaults from config); raises TransportError."""
        if port is not None:
            self._port = port
        if baudrate is not None:
            self._baudrate = baudrate
        with self._io_lock:
            if self.is_open:
                self._close_port()
            try:
                self._serial = self._serial_factory(
                    self._port,
                    baudrate=self._baudrate,
                    bytesize=self._config.bytesize,
                    parity=self._config.parity,
                    stopbits=self._config.stopbits,
                    timeout=self._config.read_timeout_ms / 1000.0,
                    write_timeout=self._config.write_timeout,
                )
            except (SerialException, OSError, ValueError) as exc:
                self._serial = None
                logger.warning("Cannot open port %s @%d (%s)", self._port, self._baudrate, exc)
                raise TransportError(f"unable to open serial port {self._port}: {exc}") from exc
        logger.info("Opened port %s @%d baud.", self._port, self._baudrate)

    def reopen(self) -> bool:
        """Try to open the last used port again; returns False instead of raising."""
        try:
            self.open()
        except TransportError:
            return False
        return True

    def close(self) -> None:
        with self._io_lock:
            self._close_port()

    def __enter__(self) -> "SerialLink":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # I/O ---------------------------------------------------------------------

    def write_line(self, line: str) -> None:
        """Append the protocol terminator and write the whole line in one call."""
        payload = (line + LINE_TERMINATOR).encode("ascii")
        with self._io_lock:
            port = self._require_open()
            try:
                port.write(payload)
                port.flush()
            except SerialException as exc:
                logger.error("Write to %s failed: %s", self._port, exc)
                self._close_port()
                raise TransportError(f"write to {self._port} failed: {exc}") from exc
        logger.debug("📤 TX %s: %s", self._port, line)

    def read_response(self, timeout_s: Optional[float] = None) -> str:
        """Read one terminated answer line, giving up after the retry budget.

        Bytes that arrive slowly are accumulated across retries; an answer
        still missing its terminator when the budget runs out is discarded
        and reported as a timeout.
        """
        data = self._read(timeout_s, single_byte=False)
        text = data.decode("ascii", errors="replace")
        logger.debug("📥 RX %s: %r", self._port, text)
        return text

    def read_byte(self, timeout_s: Optional[float] = None) -> bytes:
        """Read a single byte, used for answers that carry no terminator."""
        data = self._read(timeout_s, single_byte=True)
        logger.debug("📥 RX %s: %s", self._port, data.hex(" "))
        return data

    def request(self, line: str, timeout_s: Optional[float] = None) -> str:
        """Write a query line and read its answer without another writer in between."""
        with self._io_lock:
            self._discard_input()
            self.write_line(line)
            return self.read_response(timeout_s)

    def request_byte(self, line: str, timeout_s: Optional[float] = None) -> bytes:
        """Write a query line and read its one-byte answer."""
        with self._io_lock:
            self._discard_input()
            self.write_line(line)
            return self.read_byte(timeout_s)

    # Internal helpers -----------------------------------------------------------

    def _read(self, timeout_s: Optional[float], single_byte: bool) -> bytes:
        """Read one byte or one terminated line; each retry waits up to ``timeout_s``."""
        timeout = timeout_s if timeout_s is not None else self._config.read_timeout_ms / 1000.0
        retries = max(1, self._config.read_retries)
        data = bytearray()
        with self._io_lock:
            port = self._require_open()
            port.timeout = timeout
            try:
                for _ in range(retries):
                    if single_byte:
                        data.extend(port.read(1))
                        if data:
                            break
                    else:
                        data.extend(port.read_until(expected=_TERMINATOR_BYTES))
                        if data.endswith(_TERMINATOR_BYTES):
                            break
            except SerialException as exc:
                logger.error("Read from %s failed: %s", self._port, exc)
                self._close_port()
                raise TransportError(f"read from {self._port} failed: {exc}") from exc
        if not data:
            raise ResponseTimeoutError(f"no response from {self._port} after {retries} x {timeout:.3f}s")
        if not single_byte and not data.endswith(_TERMINATOR_BYTES):
            logger.warning("Incomplete answer from %s discarded: %r", self._port, bytes(data))
            raise ResponseTimeoutError(f"incomplete response from {self._port} after {retries} x {timeout:.3f}s")
        return bytes(data)

    def _discard_input(self) -> None:
        port = self._require_open()
        try:
            port.reset_input_buffer()
        except SerialException as exc:  # pragma: no cover - driver specific
            logger.debug("Could not flush input buffer on %s: %s", self._port, exc)

    def _require_open(self) -> Any:
        if not self.is_open:
            raise TransportError(f"serial link {self._port} is not open")
        return self._serial

    def _close_port(self) -> None:
        if self._serial is not None and self._serial.is_open:
            logger.info("Closing port %s", self._port)
            self._serial.close()
        self._serial = None
