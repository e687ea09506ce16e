"""Operator input front ends publishing intent events."""

from .base import LineFrontend
from .bluetooth import BluetoothFrontend
from .console import ConsoleFrontend
from .line_protocol import USAGE, parse_line

__all__ = ["BluetoothFrontend", "ConsoleFrontend", "LineFrontend", "USAGE", "parse_line"]
