"""Structured logging with context injection.

Features:
- console handler
- JSON logs optional (easy ingestion)
- context injection (event_id/target) without needing a big framework
"""

from __future__ import annotations

import json
import logging
import sys
import time
from dataclasses import dataclass
from typing import Any

from chronicle.configs.settings import get_settings

ROOT_LOGGER_NAME = "chronicle"

CONTEXT_FIELDS = ("event_id", "target", "collection_id")

# ---------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------


class JsonFormatter(logging.Formatter):
    """Format log records as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        base = {
            "ts": time.time(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for k in CONTEXT_FIELDS:
            if hasattr(record, k):
                base[k] = getattr(record, k)

        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(base, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Format log records as human-readable text."""

    def format(self, record: logging.LogRecord) -> str:
        parts = [record.levelname, record.name]

        ctx = [f"{k}={getattr(record, k)}" for k in CONTEXT_FIELDS if getattr(record, k, None)]
        if ctx:
            parts.append("[" + " ".join(ctx) + "]")

        parts.append(record.getMessage())
        s = " ".join(parts)

        if record.exc_info:
            s += "\n" + self.formatException(record.exc_info)

        return s


# ---------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class LoggingOptions:
    """Configure logging behavior."""

    level: str = "INFO"
    json_logs: bool = False

    @classmethod
    def from_settings(cls) -> "LoggingOptions":
        settings = get_settings()
        return cls(level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)


def setup_logger(options: LoggingOptions | None = None) -> logging.Logger:
    """Install a single console handler on the package logger."""
    options = options or LoggingOptions.from_settings()
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, options.level.upper(), logging.INFO))

    # Replace handlers from earlier calls instead of stacking them
    for h in list(logger.handlers):
        if getattr(h, "_chronicle_handler", False):
            logger.removeHandler(h)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logger.level)
    handler.setFormatter(JsonFormatter() if options.json_logs else TextFormatter())
    handler._chronicle_handler = True
    logger.addHandler(handler)
    return logger


# ---------------------------------------------------------------------
# Context injection
# ---------------------------------------------------------------------


class ContextAdapter(logging.LoggerAdapter):
    """Inject context fields into log records."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        extra = kwargs.get("extra", {})
        merged = dict(self.extra)
        merged.update(extra)
        kwargs["extra"] = merged
        return msg, kwargs


def with_context(
    logger: logging.Logger,
    *,
    event_id: str | None = None,
    target: str | None = None,
    collection_id: str | None = None,
) -> ContextAdapter:
    """Create a context adapter carrying event, target and collection info."""
    extra: dict[str, Any] = {}
    if event_id:
        extra["event_id"] = event_id
    if target:
        extra["target"] = target
    if collection_id:
        extra["collection_id"] = collection_id
    return ContextAdapter(logger, extra)
