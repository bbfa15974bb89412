"""Application middleware implementations."""

from __future__ import annotations

import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from .context import REQUEST_ID_HEADER, request_context

MAX_REQUEST_ID_LENGTH = 128


def _accept_request_id(value: str | None) -> str:
    if value and len(value) <= MAX_REQUEST_ID_LENGTH and value.isprintable():
        return value
    return uuid.uuid4().hex


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Tag every request with an id, reusing the caller's ``X-Request-ID`` when sane.

    The id is stored on ``request.state`` for exception handlers, bound to the
    logging context while the request runs, and echoed on the response.
    """

    def __init__(self, app: ASGIApp, header_name: str = REQUEST_ID_HEADER) -> None:
        super().__init__(app)
        self._header_name = header_name

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = _accept_request_id(request.headers.get(self._header_name))
        request.state.request_id = request_id
        with request_context(request_id):
            response = await call_next(request)
        response.headers.setdefault(self._header_name, request_id)
        return response


__all__ = ["CorrelationIdMiddleware", "MAX_REQUEST_ID_LENGTH"]
