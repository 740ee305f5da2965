"""Scoped logging context.

Fields pushed here (a query id, the record being scored, ...) are attached to
every log record emitted inside the scope by ``ContextualFilter``. Storage is
a ``ContextVar`` so concurrent callers never see each other's fields.
"""

from contextvars import ContextVar, Token
from typing import Any, Dict, Optional


LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("search_score_log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the active context fields."""
    return dict(LogContextVar.get())


def push_log_context(**fields) -> Token:
    """Merge ``fields`` into the active context.

    Returns:
        Token to hand to pop_log_context() to restore the previous state

    Example:
        >>> token = push_log_context(query_id="q-1", record="left-pad")
        >>> pop_log_context(token)
    """
    return LogContextVar.set({**LogContextVar.get(), **fields})


def pop_log_context(token: Token) -> None:
    """Restore the context captured by push_log_context()."""
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Drop every context field. Mostly useful in tests."""
    LogContextVar.set({})


class log_context:
    """Context manager pushing fields on entry and restoring them on exit.

    Example:
        >>> with log_context(query_id="q-1"):
        ...     logger.info("Ranking records")
    """

    def __init__(self, **fields):
        self.fields = fields
        self.token: Optional[Token] = None

    def __enter__(self):
        self.token = push_log_context(**self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token is not None:
            pop_log_context(self.token)
            self.token = None
        return False
