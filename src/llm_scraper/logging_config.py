"""JSON structured logging for applications embedding the scraper.

The library itself only creates module loggers; nothing is configured on
import. Call ``setup_logging`` once from the application entry point.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from pythonjsonlogger.json import JsonFormatter

# Loggers of the model transports, noisy below INFO
_QUIET_LOGGERS = ("httpx", "httpcore", "openai", "anthropic")


def json_formatter() -> JsonFormatter:
    return JsonFormatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
        rename_fields={
            "asctime": "timestamp",
            "levelname": "level",
            "name": "logger",
        },
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )


def setup_logging(log_level: str = "INFO", stream: TextIO | None = None) -> None:
    """Send every log record to *stream* (stdout by default) as one JSON object per line."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(json_formatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))
