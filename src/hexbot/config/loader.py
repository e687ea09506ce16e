"""Configuration loader utilities."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import yaml

from .models import (
    BluetoothConfig,
    Config,
    ControlConfig,
    LoggingConfig,
    SequenceConfig,
    SerialLinkConfig,
    ServoPose,
)


def _normalize_path(path: Path | str) -> Path:
    return path if isinstance(path, Path) else Path(path)


def load_raw_mapping(path: Path) -> Dict[str, Any]:
    """Read a YAML or JSON file into a plain dict."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found at {path}")

    suffix = path.suffix.lower()
    with path.open("r", encoding="utf-8") as stream:
        if suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(stream) or {}
        elif suffix == ".json":
            data = json.load(stream)
        else:
            raise ValueError(f"Unsupported config format: {suffix}")
    if not isinstance(data, dict):
        raise ValueError(f"Top level of {path} must be a mapping.")
    return data


def load_config(config_path: Path | str) -> Config:
    """Load configuration file and construct Config dataclass."""

    config_path = _normalize_path(config_path)
    raw = load_raw_mapping(config_path)

    serial = SerialLinkConfig(**_section(raw, "serial"))
    bluetooth = BluetoothConfig(**_section(raw, "bluetooth"))

    sequence_raw = _section(raw, "sequence")
    # Sequence and log files are relative to the config file.
    sequence_path = sequence_raw.get("filepath")
    if sequence_path:
        sequence_raw["filepath"] = (config_path.parent / sequence_path).resolve()
    sequence = SequenceConfig(**sequence_raw)

    control = _load_control_config(_section(raw, "control"))

    logging_raw = _section(raw, "logging")
    log_path = logging_raw.get("filepath")
    if log_path:
        logging_raw["filepath"] = (config_path.parent / log_path).resolve()
    logging = LoggingConfig(**logging_raw)

    return Config(serial=serial, bluetooth=bluetooth, sequence=sequence, control=control, logging=logging)


def _section(raw: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = raw.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{name}' must be a mapping.")
    return dict(value)


def _load_control_config(control_raw: Dict[str, Any]) -> ControlConfig:
    pose_raw = control_raw.pop("startup_pose", None)
    if pose_raw is None:
        return ControlConfig(**control_raw)

    try:
        pose = tuple(ServoPose(channel=int(item["channel"]), pulse=int(item["pulse"])) for item in pose_raw)
    except (TypeError, KeyError, ValueError) as exc:
        raise ValueError("startup_pose entries must provide integer 'channel' and 'pulse'.") from exc
    return ControlConfig(startup_pose=pose, **control_raw)
