"""Process-wide logging and exception handling."""

from .exceptions import install_exception_hook
from .logging import configure_logging

__all__ = ["configure_logging", "install_exception_hook"]
