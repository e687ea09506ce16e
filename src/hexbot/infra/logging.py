"""Logging configuration helpers."""

from __future__ import annotations

import logging
import logging.handlers

from hexbot.config.models import LoggingConfig

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(threadName)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(config: LoggingConfig) -> None:
    """Route all records to a rotating log file and, optionally, stderr."""

    log_level = getattr(logging, config.level.upper(), logging.INFO)
    logging.captureWarnings(True)

    handlers: list[logging.Handler] = []
    if config.filepath is not None:
        log_path = config.resolved_path()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(_build_formatter())
        handlers.append(file_handler)

    if config.console or not handlers:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        console_handler.setFormatter(_build_formatter())
        handlers.append(console_handler)

    logging.basicConfig(level=log_level, handlers=handlers, force=True)
    # One line per byte read is too chatty outside of DEBUG sessions.
    logging.getLogger("serial.link").setLevel(max(log_level, logging.INFO))


def _build_formatter() -> logging.Formatter:
    return logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
