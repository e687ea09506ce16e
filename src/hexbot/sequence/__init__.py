"""Gait sequences and the incremental sequencer updater."""

from .loader import load_sequence
from .models import LEGACY_FIELD_NAMES, Direction, GaitSequence
from .updater import SEQUENCE_FIELDS, start_sequence, update_sequence

__all__ = [
    "Direction",
    "GaitSequence",
    "LEGACY_FIELD_NAMES",
    "SEQUENCE_FIELDS",
    "load_sequence",
    "start_sequence",
    "update_sequence",
]
