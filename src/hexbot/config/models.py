"""Dataclass definitions for the HexBot configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Optional, Sequence, Tuple


@dataclass(frozen=True)
class SerialLinkConfig:
    """Serial link to the SSC-32 board."""

    port: str = "/dev/ttyUSB0"
    baudrate: int = 115200
    bytesize: int = 8
    parity: Literal["N", "E", "O", "M", "S"] = "N"
    stopbits: float = 1
    write_timeout: Optional[float] = 1.0
    read_timeout_ms: int = 100
    read_retries: int = 5
    reconnect_delay_ms: int = 2000


@dataclass(frozen=True)
class BluetoothConfig:
    """RFCOMM serial port carrying the line-oriented remote control protocol."""

    port: str = "/dev/rfcomm0"
    baudrate: int = 115200
    read_timeout_ms: int = 500


@dataclass(frozen=True)
class SequenceConfig:
    """Where the gait sequence is read from and whether it is hot-reloaded."""

    filepath: Optional[Path] = None
    watch: bool = True
    poll_interval_ms: int = 1000

    def resolved_path(self) -> Optional[Path]:
        if self.filepath is None:
            return None
        return Path(self.filepath).expanduser().resolve()


@dataclass(frozen=True)
class ServoPose:
    """Pulse width sent to one channel when the controller starts."""

    channel: int
    pulse: int


def _default_startup_pose() -> Tuple[ServoPose, ...]:
    return tuple(ServoPose(channel=channel, pulse=1000) for channel in (6, 7, 8, 22, 23, 24))


@dataclass(frozen=True)
class ControlConfig:
    """Behaviour of the control engine."""

    initial_speed: int = 50
    speed_step: int = 10
    status_poll_interval_ms: int = 100
    movement_timeout_ms: int = 10000
    max_unknown_status: int = 5
    event_queue_size: int = 256
    startup_pose: Sequence[ServoPose] = field(default_factory=_default_startup_pose)


@dataclass(frozen=True)
class LoggingConfig:
    """Logging level, file and rotation."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    filepath: Optional[Path] = Path("logs/hexbot.log")
    max_bytes: int = 5 * 1024 * 1024
    backup_count: int = 5
    console: bool = True

    def resolved_path(self) -> Optional[Path]:
        if self.filepath is None:
            return None
        return Path(self.filepath).expanduser().resolve()


@dataclass(frozen=True)
class Config:
    """Root configuration object."""

    serial: SerialLinkConfig = field(default_factory=SerialLinkConfig)
    bluetooth: BluetoothConfig = field(default_factory=BluetoothConfig)
    sequence: SequenceConfig = field(default_factory=SequenceConfig)
    control: ControlConfig = field(default_factory=ControlConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
