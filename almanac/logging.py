"""Logging utilities for structured output.

Loggers wrap stdlib loggers with their own processor chain, so library use
without configure_logging follows the stdlib defaults (WARNING and above to
stderr) and never writes to stdout.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.processors.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso", utc=False),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.JSONRenderer(),
]


def configure_logging(level: str = "INFO") -> None:
    """Configure stdlib logging for JSON logs on stderr."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )


def get_logger(name: str | None = None) -> Any:
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
    )
