"""Logging setup for playground sessions.

Every record emitted by an orchestrator carries its ``session_id``; lesson
operations add ``module_id``, ``phase``, ``contract_address`` or
``error_code`` through ``extra=``. Both formatters render those fields:
JSON lines for staging/production, a colored one-liner for development.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, MutableMapping

# Record attributes rendered by both formatters, in output order.
CONTEXT_KEYS: tuple[str, ...] = (
    "session_id",
    "module_id",
    "phase",
    "contract_address",
    "error_code",
)


def record_context(record: logging.LogRecord) -> dict[str, Any]:
    """Collect the playground context fields set on ``record``."""
    context: dict[str, Any] = {}
    for key in CONTEXT_KEYS:
        value = getattr(record, key, None)
        if value is not None:
            context[key] = value
    return context


class SessionLoggerAdapter(logging.LoggerAdapter):
    """Binds a session id to every record while keeping per-call ``extra``.

    The stock adapter replaces the caller's ``extra`` with its own; here the
    two are merged and the bound session fields win on conflict.
    """

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**(kwargs.get("extra") or {}), **(self.extra or {})}
        return msg, kwargs


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.pathname:
            entry.update(module=record.module, function=record.funcName, line=record.lineno)

        entry.update(record_context(record))

        if record.exc_info and record.exc_info[1]:
            exc_type, exc, _ = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__ if exc_type else "Unknown",
                "message": str(exc),
                "traceback": self.formatException(record.exc_info),
            }
        return json.dumps(entry, default=str)


class DevFormatter(logging.Formatter):
    """Colored single-line formatter for local runs."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "")
        ts = datetime.fromtimestamp(record.created, timezone.utc).strftime("%H:%M:%S")

        context = record_context(record)
        session_id = context.pop("session_id", None)
        msg = record.getMessage()
        if session_id:
            msg = f"[{str(session_id)[:8]}] {msg}"
        if context:
            msg += "  " + " ".join(f"{k}={v}" for k, v in context.items())

        line = f"{color}{ts} [{record.levelname:>8s}]{self.RESET} {record.name}: {msg}"
        if record.exc_info and record.exc_info[1]:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(env: str = "development", log_level: str = "INFO") -> None:
    """Install a single stdout handler on the root logger.

    Args:
        env: Application environment (development/staging/production)
        log_level: Minimum log level name
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter() if env in ("staging", "production") else DevFormatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    for noisy in ("redis", "asyncio"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
