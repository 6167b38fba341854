"""Structured logging helpers with batch correlation context."""

from __future__ import annotations

import contextvars
import logging
import uuid
from contextlib import contextmanager
from typing import Iterator

_BATCH_ID_VAR: contextvars.ContextVar[str] = contextvars.ContextVar(
    "batch_id", default="-"
)
_PHASE_VAR: contextvars.ContextVar[str] = contextvars.ContextVar(
    "phase", default="-"
)


class _BatchContextFilter(logging.Filter):
    """Inject batch correlation fields into all log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.batch_id = _BATCH_ID_VAR.get("-")
        record.phase = _PHASE_VAR.get("-")
        return True


def _ensure_filter_on_root_handlers() -> None:
    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        has_filter = any(isinstance(f, _BatchContextFilter) for f in handler.filters)
        if not has_filter:
            handler.addFilter(_BatchContextFilter())


def configure_structured_logging(level: int = logging.INFO) -> None:
    """Configure root logging format with batch/phase context."""
    fmt = (
        "%(asctime)s | %(levelname)s | batch_id=%(batch_id)s | phase=%(phase)s | "
        "%(name)s | %(message)s"
    )
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=level, format=fmt)
    else:
        root_logger.setLevel(level)
        formatter = logging.Formatter(fmt)
        for handler in root_logger.handlers:
            handler.setFormatter(formatter)
    _ensure_filter_on_root_handlers()


def get_batch_id() -> str:
    """Get current batch correlation ID."""
    return _BATCH_ID_VAR.get("-")


@contextmanager
def phase_scope(phase: str) -> Iterator[None]:
    """Temporarily set phase context for emitted logs."""
    token = _PHASE_VAR.set(phase)
    try:
        yield
    finally:
        _PHASE_VAR.reset(token)


@contextmanager
def batch_scope(batch_id: str | None = None) -> Iterator[str]:
    """Tag logs emitted inside the block with a (new) batch ID."""
    value = batch_id or uuid.uuid4().hex[:12]
    token = _BATCH_ID_VAR.set(value)
    try:
        yield value
    finally:
        _BATCH_ID_VAR.reset(token)
