"""Correlation id carried through the handling of one request."""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

REQUEST_ID_HEADER = "X-Request-ID"
NO_REQUEST_ID = "-"

_request_id: ContextVar[str] = ContextVar("taskflow_request_id", default=NO_REQUEST_ID)


def get_request_id() -> str:
    """Return the id bound to the current context, or ``"-"`` outside a request."""
    return _request_id.get()


@contextmanager
def request_context(request_id: str) -> Iterator[str]:
    """Bind ``request_id`` for the duration of the ``with`` block."""
    token = _request_id.set(request_id)
    try:
        yield request_id
    finally:
        _request_id.reset(token)


__all__ = ["NO_REQUEST_ID", "REQUEST_ID_HEADER", "get_request_id", "request_context"]
