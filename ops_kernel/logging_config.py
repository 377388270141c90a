"""
Structured JSON logging for the operations hub.

Every service logs through ``get_logger(...)`` under the ``ops_kernel``
namespace.  Records are written one JSON object per line; keyword fields
passed via ``extra`` become top-level keys, and the fields bound on
``LogContext`` (the document being worked on, the acting user) are added to
every record emitted while they are bound.

Usage:
    logger = get_logger("modules.invoices.service")
    with LogContext.bind(document_id="INV-2026-0001", actor_id=str(actor_id)):
        logger.info("invoice_payment_recorded", extra={"amount": amount})
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterator, Mapping
from uuid import UUID

_LOGGER_PREFIX = "ops_kernel"

_EMPTY: Mapping[str, str] = MappingProxyType({})


class LogContext:
    """
    Request-scoped fields attached to every log record.

    The bound fields live in one ``ContextVar`` as a read-only mapping, so
    each thread and each asyncio task sees its own copy.
    """

    FIELDS = frozenset({"correlation_id", "document_id", "actor_id", "trace_id"})

    _fields: ContextVar[Mapping[str, str]] = ContextVar("ops_log_context", default=_EMPTY)

    @classmethod
    def _merged(cls, values: Mapping[str, Any]) -> Mapping[str, str]:
        unknown = set(values) - cls.FIELDS
        if unknown:
            raise TypeError(f"unknown log context field(s): {sorted(unknown)}")
        merged = dict(cls._fields.get())
        merged.update({k: str(v) for k, v in values.items() if v is not None})
        return MappingProxyType(merged)

    @classmethod
    def set(cls, **values: Any) -> None:
        """Bind fields until cleared. ``None`` leaves a field unchanged."""
        cls._fields.set(cls._merged(values))

    @classmethod
    def get_all(cls) -> dict[str, str]:
        return dict(cls._fields.get())

    @classmethod
    def clear(cls) -> None:
        cls._fields.set(_EMPTY)

    @classmethod
    @contextmanager
    def bind(cls, **values: Any) -> Iterator[type["LogContext"]]:
        """Bind fields for the duration of a ``with`` block."""
        token = cls._fields.set(cls._merged(values))
        try:
            yield cls
        finally:
            cls._fields.reset(token)


# Attributes every LogRecord carries; anything else on a record came from ``extra``.
_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


def _json_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    # Decimal and UUID print exactly; anything unforeseen falls back to str too.
    return str(value)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
    for name, value in vars(exc).items():
        if name != "code" and not name.startswith("_"):
            fields[f"exc_{name}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        for name, value in vars(record).items():
            if name not in _RECORD_ATTRIBUTES:
                entry.setdefault(name, value)

        if record.exc_info and record.exc_info[1] is not None:
            entry.update(_exception_fields(record.exc_info[1]))
            entry["traceback"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=_json_value)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


_state_lock = threading.Lock()
_handler: logging.Handler | None = None


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Attach the JSON handler to the ``ops_kernel`` logger.

    Only the first call has any effect until ``reset_logging()``; later calls
    keep the handler already installed.
    """
    global _handler
    with _state_lock:
        if _handler is not None:
            return
        _handler = handler if handler is not None else logging.StreamHandler(stream or sys.stderr)
        _handler.setFormatter(StructuredFormatter())

        hub_logger = logging.getLogger(_LOGGER_PREFIX)
        hub_logger.setLevel(level)
        hub_logger.propagate = False
        hub_logger.addHandler(_handler)


def reset_logging() -> None:
    """Remove the installed handler so the next ``configure_logging()`` applies. Tests only."""
    global _handler
    with _state_lock:
        hub_logger = logging.getLogger(_LOGGER_PREFIX)
        for installed in list(hub_logger.handlers):
            hub_logger.removeHandler(installed)
        hub_logger.setLevel(logging.WARNING)
        _handler = None
