"""Logging setup for the SSO audit backend.

``LOG_LEVEL`` selects the level applied to the service and server loggers and
``LOG_FORMAT`` chooses between plain text and one JSON object per line. The
configuration is applied on import.
"""

from __future__ import annotations
import json
import logging
import os
from datetime import UTC, datetime
from typing import Any


_LOGGER_NAMES = (
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "fastapi",
    "sso_audit",
    "sso_audit_backend",
)
_DEFAULT_LOGGER = "sso_audit_backend.app"
_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


class JsonFormatter(logging.Formatter):
    """Render records as JSON, including fields passed through ``extra``."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _resolve_level(raw: str | None) -> int:
    level = logging.getLevelName((raw or "info").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging() -> None:
    """Install a single stderr handler and apply ``LOG_LEVEL``."""
    level = _resolve_level(os.getenv("LOG_LEVEL"))
    use_json = os.getenv("LOG_FORMAT", "text").strip().lower() == "json"

    handler = logging.StreamHandler()
    formatter = JsonFormatter() if use_json else logging.Formatter(_TEXT_FORMAT)
    handler.setFormatter(formatter)
    handler._sso_audit = True  # type: ignore[attr-defined]

    root = logging.getLogger()
    for existing in list(root.handlers):
        if getattr(existing, "_sso_audit", False):
            root.removeHandler(existing)
    root.addHandler(handler)

    for name in _LOGGER_NAMES:
        logging.getLogger(name).setLevel(level)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``name`` or the default backend logger."""
    return logging.getLogger(name or _DEFAULT_LOGGER)


configure_logging()


__all__ = ["JsonFormatter", "configure_logging", "get_logger"]
