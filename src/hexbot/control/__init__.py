"""Control context and the single-consumer control engine."""

from .context import ControlContext
from .controller import ControlEngine

__all__ = ["ControlContext", "ControlEngine"]
