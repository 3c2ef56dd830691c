"""Structured logging with request correlation and credential redaction.

Every service module logs through `StructuredLogger`, which attaches the
current correlation id and masks values whose key looks sensitive before the
record reaches a handler. Production output is one JSON object per line.
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Any

from pythonjsonlogger.json import JsonFormatter

from core.config import get_settings
from core.security_config import is_sensitive_key


REDACTED = "[REDACTED]"

# Header lists are often logged as [{"name": ..., "value": ...}].
_HEADER_NAME_KEYS = ("name", "key")
_HEADER_VALUE_KEYS = frozenset({"value", "val", "v"})

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> str:
    """Return the id bound to the current context, creating one if unset."""
    current = _correlation_id.get()
    if not current:
        current = str(uuid.uuid4())
        _correlation_id.set(current)
    return current


def set_correlation_id(correlation_id: str | None) -> None:
    _correlation_id.set(correlation_id)


def redact(value: Any) -> Any:
    """Recursively mask sensitive entries in dicts and lists."""
    if isinstance(value, list | tuple):
        return [redact(item) for item in value]
    if not isinstance(value, dict):
        return value

    header_name = next(
        (value[k] for k in _HEADER_NAME_KEYS if isinstance(value.get(k), str)), None
    )
    masks_value = header_name is not None and is_sensitive_key(header_name)

    cleaned: dict[str, Any] = {}
    for key, item in value.items():
        if is_sensitive_key(str(key)) or (masks_value and key in _HEADER_VALUE_KEYS):
            cleaned[key] = REDACTED
        else:
            cleaned[key] = redact(item)
    return cleaned


class StructuredLogger:
    """Thin wrapper over `logging.Logger` taking fields as keyword arguments.

    In production the fields travel as `extra` so the JSON formatter emits
    them as top-level keys; elsewhere they are appended to the message as
    `key=value` pairs for readability.
    """

    def __init__(self, name: str) -> None:
        self.logger = logging.getLogger(name)

    def _emit(
        self, level: int, message: str, fields: dict[str, Any], exc_info: bool = False
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        correlation_id = get_correlation_id()
        safe_fields = redact(fields)

        if get_settings().ENVIRONMENT == "production":
            self.logger.log(
                level,
                message,
                extra={"correlation_id": correlation_id, **safe_fields},
                exc_info=exc_info,
            )
            return

        text = f"[{correlation_id}] {message}"
        if safe_fields:
            pairs = " ".join(f"{k}={v}" for k, v in safe_fields.items())
            text = f"{text} ({pairs})"
        self.logger.log(level, text, exc_info=exc_info)

    def debug(self, message: str, **fields: Any) -> None:
        self._emit(logging.DEBUG, message, fields)

    def info(self, message: str, **fields: Any) -> None:
        self._emit(logging.INFO, message, fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._emit(logging.WARNING, message, fields)

    def error(self, message: str, **fields: Any) -> None:
        self._emit(logging.ERROR, message, fields)

    def exception(self, message: str, **fields: Any) -> None:
        """Log at ERROR level with the active exception's traceback."""
        self._emit(logging.ERROR, message, fields, exc_info=True)


def setup_logging() -> None:
    """Install a single stdout handler on the root logger.

    Calling it again is a no-op once the root logger has handlers.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    environment = get_settings().ENVIRONMENT
    level = logging.DEBUG if environment == "development" else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    if environment == "production":
        handler.setFormatter(
            JsonFormatter(
                "%(asctime)s %(levelname)s %(name)s %(message)s",
                rename_fields={"asctime": "timestamp", "levelname": "level"},
            )
        )
        # Access logs and per-request httpx lines are noise at this level.
        for noisy in ("uvicorn.access", "httpx"):
            logging.getLogger(noisy).setLevel(logging.WARNING)
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s")
        )

    root.setLevel(level)
    root.addHandler(handler)
