from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Iterator, Optional, Tuple, Type


_TRACE_ID_CTX: ContextVar[str] = ContextVar("trace_id", default="unknown")
_LOGGER = logging.getLogger("smallfarm.events")


def init_logging(*, log_path: Optional[str] = None) -> None:
    """
    Attach the event handler to the ``smallfarm.events`` logger.

    Works regardless of how the root logger was configured; calling it again
    replaces the previous handler.
    """
    for existing in list(_LOGGER.handlers):
        _LOGGER.removeHandler(existing)
        existing.close()
    if log_path:
        path = Path(log_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = RotatingFileHandler(
            path, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
        )
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    _LOGGER.addHandler(handler)
    _LOGGER.setLevel(logging.INFO)
    _LOGGER.propagate = False


def set_trace_id(trace_id: str):
    return _TRACE_ID_CTX.set(trace_id)


def reset_trace_id(token) -> None:
    _TRACE_ID_CTX.reset(token)


def get_trace_id() -> str:
    value = _TRACE_ID_CTX.get()
    return value or "unknown"


def _build_payload(event: str, fields: Dict[str, Any]) -> str:
    payload = {"event": event, "trace_id": get_trace_id(), **fields}
    return json.dumps(payload, ensure_ascii=True, default=str)


def log_event(event: str, **fields: Any) -> None:
    _LOGGER.info(_build_payload(event, fields))


def log_warning(event: str, **fields: Any) -> None:
    _LOGGER.warning(_build_payload(event, fields))


def log_error(event: str, exc: BaseException, **fields: Any) -> None:
    """Log a failure event; the traceback of ``exc`` is attached to the record."""
    fields.setdefault("error", str(exc))
    fields.setdefault("error_type", type(exc).__name__)
    _LOGGER.error(_build_payload(event, fields), exc_info=exc)


@contextmanager
def log_failures(
    event: str, *, expected: Tuple[Type[BaseException], ...] = (), **fields: Any
) -> Iterator[None]:
    """Log ``<event>_failed`` with context for unexpected errors, then re-raise."""
    try:
        yield
    except expected:
        raise
    except Exception as exc:
        log_error(f"{event}_failed", exc, **fields)
        raise
