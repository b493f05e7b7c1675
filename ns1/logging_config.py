"""Logging setup for applications embedding the client (JSON and text output)."""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from ns1.rest.request_context import get_call_context

if TYPE_CHECKING:
    from ns1.config import Settings

# Attributes present on every LogRecord; anything else was passed via ``extra=``.
_STANDARD_RECORD_ATTRS: frozenset[str] = frozenset(
    {
        "args",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)


def _timestamp(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, tz=timezone.utc)


def _format_exception(record: logging.LogRecord) -> str | None:
    if record.exc_info and record.exc_info[0] is not None:
        return "".join(traceback.format_exception(*record.exc_info))
    return None


class JSONFormatter(logging.Formatter):
    """Single-line JSON records, tagged with the in-flight API call if any."""

    def format(self, record: logging.LogRecord) -> str:
        record.message = record.getMessage()
        entry: dict[str, Any] = {
            "timestamp": _timestamp(record).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.message,
        }

        ctx = get_call_context()
        if ctx is not None:
            entry["request_id"] = ctx.request_id
            entry["http_method"] = ctx.method
            entry["url"] = ctx.url

        for key, value in record.__dict__.items():
            if key not in _STANDARD_RECORD_ATTRS and not key.startswith("_"):
                entry[key] = value

        exc = _format_exception(record)
        if exc:
            entry["exception"] = exc

        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable lines with a short request ID prefix inside API calls."""

    def format(self, record: logging.LogRecord) -> str:
        record.message = record.getMessage()
        ts = _timestamp(record).strftime("%Y-%m-%d %H:%M:%S")

        ctx = get_call_context()
        rid_prefix = f"[{ctx.request_id[:12]}] " if ctx is not None else ""

        line = f"{ts} {record.levelname:<8} {rid_prefix}{record.name} - {record.message}"

        exc = _format_exception(record)
        if exc:
            line += "\n" + exc

        return line


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "text",
    *,
    debug: bool = False,
) -> None:
    """Configure the root logger. Call once at startup.

    With *debug* the ``ns1`` logger is lowered to ``DEBUG`` so the client's
    request and rate-limit diagnostics are emitted regardless of *log_level*.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    if log_format.lower() == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(TextFormatter())
    root.addHandler(handler)

    if debug:
        logging.getLogger("ns1").setLevel(logging.DEBUG)


def setup_logging_from_settings(settings: Settings) -> None:
    setup_logging(settings.log_level, settings.log_format, debug=settings.debug)
