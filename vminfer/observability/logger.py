# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Structured logging for vminfer

Library modules log through ``logging.getLogger("vminfer.<component>")``.
``setup_logging`` attaches a single handler to the ``vminfer`` logger that
renders each record as a ``LogEntry`` in text or JSON form.

Example:
    from vminfer.observability import setup_logging, Verbosity

    setup_logging(Verbosity.DEBUG, json_format=True)
"""

import json
import logging
import os
import sys
from dataclasses import dataclass, asdict, field
from datetime import datetime
from enum import IntEnum
from typing import Optional, TextIO

ROOT_LOGGER = "vminfer"
VERBOSITY_ENV = "VMINFER_VERBOSITY"


class Verbosity(IntEnum):
    """
    Logging verbosity levels.

    Uses IntEnum for numeric comparison (e.g., if verbosity >= INFO).
    """

    SILENT = 0
    ERROR = 1
    WARNING = 2
    INFO = 3
    DEBUG = 4

    def to_logging_level(self) -> int:
        return {
            Verbosity.SILENT: logging.CRITICAL + 10,
            Verbosity.ERROR: logging.ERROR,
            Verbosity.WARNING: logging.WARNING,
            Verbosity.INFO: logging.INFO,
            Verbosity.DEBUG: logging.DEBUG,
        }[self]


@dataclass
class LogEntry:
    """
    Structured log entry.

    Attributes:
        level: Log level (ERROR, WARNING, INFO, DEBUG)
        message: Log message
        timestamp: ISO format timestamp
        component: Source logger name
        duration_us: Optional duration in microseconds
        extra: Additional context fields
    """

    level: str
    message: str
    timestamp: str
    component: str = ROOT_LOGGER
    duration_us: Optional[float] = None
    extra: dict = field(default_factory=dict)

    def to_json(self) -> str:
        """Convert to JSON string."""
        data = {k: v for k, v in asdict(self).items() if v is not None}
        if not data.get("extra"):
            data.pop("extra", None)
        return json.dumps(data, default=str)

    def to_text(self) -> str:
        """Convert to human-readable text format."""
        parts = [
            f"[{self.level}]",
            f"[{self.component}]",
            self.message,
        ]
        if self.duration_us is not None:
            parts.append(f"({self.duration_us:.0f}us)")
        return " ".join(parts)


class StructuredFormatter(logging.Formatter):
    """Formats ``logging.LogRecord`` objects as LogEntry text or JSON."""

    def __init__(self, json_format: bool = False):
        super().__init__()
        self.json_format = json_format

    def format(self, record: logging.LogRecord) -> str:
        entry = LogEntry(
            level=record.levelname,
            message=record.getMessage(),
            timestamp=datetime.fromtimestamp(record.created).isoformat(),
            component=record.name,
            duration_us=getattr(record, "duration_us", None),
        )
        if record.exc_info:
            entry.extra["exception"] = self.formatException(record.exc_info)
        return entry.to_json() if self.json_format else entry.to_text()


def verbosity_from_env(default: Verbosity = Verbosity.WARNING) -> Verbosity:
    """Read ``VMINFER_VERBOSITY`` (0-4); fall back to ``default``."""
    value = os.environ.get(VERBOSITY_ENV)
    if value is None:
        return default
    try:
        return Verbosity(max(0, min(4, int(value))))
    except ValueError:
        return default


def setup_logging(
    verbosity: Optional[int] = None,
    json_format: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configure the ``vminfer`` logger.

    Replaces any handler a previous call installed.

    Args:
        verbosity: Verbosity level (0=SILENT, 1=ERROR, 2=WARNING, 3=INFO, 4=DEBUG);
            defaults to ``VMINFER_VERBOSITY`` or WARNING
        json_format: Emit one JSON object per line
        stream: Output stream (default: stderr)
    """
    if verbosity is None:
        level = verbosity_from_env()
    else:
        level = Verbosity(max(0, min(4, int(verbosity))))

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, "_vminfer_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter(json_format=json_format))
    handler._vminfer_handler = True
    logger.addHandler(handler)
    logger.setLevel(level.to_logging_level())
    logger.propagate = False
    return logger
