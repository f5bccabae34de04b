"""
Structured Logging — JSON Output for Production

Configures Python logging to emit structured JSON logs.
Each log entry includes timestamp, level, module, and
any additional context fields.

The scoring engine itself never logs. It returns a decision
trace and the orchestrator writes it out with emit_trace(),
at JOBSHIELD_TRACE_LEVEL (DEBUG by default).

Usage:
    from jobshield.logging import get_logger
    logger = get_logger("detector")
    logger.info("Analysis complete", extra={"score": 72, "status": "Potential Scam"})
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Iterable, Optional


LOG_LEVEL = os.getenv("JOBSHIELD_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("JOBSHIELD_LOG_FORMAT", "json")  # "json" or "text"

# Level for engine decision traces; raise to INFO to keep them in production logs
TRACE_LEVEL = os.getenv("JOBSHIELD_TRACE_LEVEL", "DEBUG").upper()

EXTRA_FIELDS = (
    "score", "status", "has_critical", "event", "data", "ai_source",
    "ai_skipped", "analysis_id", "owner_id", "error",
    "error_type", "duration_ms", "status_code", "method", "path",
)


class JSONFormatter(logging.Formatter):
    """Formats log records as JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in EXTRA_FIELDS:
            val = getattr(record, key, None)
            if val is not None:
                entry[key] = val

        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable format for development."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)-8s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def setup_logging():
    """Configure the jobshield logger tree. Call once at app startup."""
    root = logging.getLogger("jobshield")
    root.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    if LOG_FORMAT == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(TextFormatter())

    root.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return root


def get_logger(name: str) -> logging.Logger:
    """Get a named logger under the jobshield namespace."""
    return logging.getLogger(f"jobshield.{name}")


def emit_trace(
    logger: logging.Logger,
    trace: Iterable[Any],
    level: Optional[int] = None,
) -> int:
    """
    Write an engine decision trace, one record per event.

    Each event needs ``event`` and ``data`` attributes; both are carried
    as structured fields. Returns the number of records written.
    """
    if level is None:
        level = getattr(logging, TRACE_LEVEL, logging.DEBUG)
    if not logger.isEnabledFor(level):
        return 0

    written = 0
    for event in trace:
        logger.log(
            level, "engine %s", event.event,
            extra={"event": event.event, "data": event.data},
        )
        written += 1
    return written
