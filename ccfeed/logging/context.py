"""Per-request logging context.

Fields pushed here (``run_id``, ``pipeline``, ``route``...) are stamped onto
every log record emitted while they are active, so the lines belonging to one
fetch-and-map cycle can be grouped together. Worker threads used for the
parallel pipeline fetch receive a copy of the submitting thread's context.
"""

from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Any, Dict, Iterator
from uuid import uuid4

_log_context: ContextVar[Dict[str, Any]] = ContextVar("ccfeed_log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the fields currently in scope."""
    return dict(_log_context.get())


def push_log_context(**fields: Any) -> Token:
    """Merge ``fields`` into the active context.

    Returns:
        Token to hand back to :func:`pop_log_context`.
    """
    return _log_context.set({**_log_context.get(), **fields})


def pop_log_context(token: Token) -> None:
    """Restore the context that was active before the matching push."""
    _log_context.reset(token)


def clear_log_context() -> None:
    """Drop every field (used by tests)."""
    _log_context.set({})


def new_run_id() -> str:
    """Short identifier for one fetch-and-map cycle."""
    return uuid4().hex[:12]


@contextmanager
def log_context(**fields: Any) -> Iterator[Dict[str, Any]]:
    """Scope ``fields`` to a ``with`` block.

    Example:
        >>> with log_context(run_id=new_run_id(), feed="cc.xml"):
        ...     logger.info("Building feed")
    """
    token = push_log_context(**fields)
    try:
        yield get_log_context()
    finally:
        pop_log_context(token)
