"""Configuration package for the HexBot controller."""

from .loader import load_config
from .models import BluetoothConfig, Config, ControlConfig, LoggingConfig, SequenceConfig, SerialLinkConfig, ServoPose

__all__ = [
    "BluetoothConfig",
    "Config",
    "ControlConfig",
    "LoggingConfig",
    "SequenceConfig",
    "SerialLinkConfig",
    "ServoPose",
    "load_config",
]
