"""Read gait sequences from YAML, JSON or legacy XML files."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ElementTree
from pathlib import Path
from typing import Any, Dict

from hexbot.config.loader import load_raw_mapping

from .models import LEGACY_FIELD_NAMES, GaitSequence

logger = logging.getLogger("sequence.loader")


def load_sequence(path: Path | str) -> GaitSequence:
    """Parse ``path`` into a :class:`GaitSequence`; absent keys keep their defaults.

    YAML/JSON files hold a flat mapping, optionally nested under a
    ``sequence`` key. XML files use one element per field with the value in
    a ``value`` attribute, as written by the legacy .NET controller.
    """
    path = path if isinstance(path, Path) else Path(path)
    if path.suffix.lower() == ".xml":
        values = _read_xml(path)
    else:
        values = load_raw_mapping(path)
        nested = values.get("sequence")
        if isinstance(nested, dict):
            values = nested
    sequence = GaitSequence.from_mapping(values)
    logger.info("Loaded gait sequence from %s (%d field(s) set).", path, len(values))
    return sequence


def _read_xml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Sequence file not found at {path}")
    known = set(GaitSequence.field_names()) | set(LEGACY_FIELD_NAMES)
    values: Dict[str, Any] = {}
    root = ElementTree.parse(path).getroot()
    for element in root.iter():
        if element.tag not in known:
            continue
        raw = element.get("value")
        if raw is None:
            raw = (element.text or "").strip()
        values[element.tag] = raw
        logger.debug("set %s to %s", element.tag, raw)
    return values
