"""Application-level exception handling helpers."""

from __future__ import annotations

import logging
from contextlib import AbstractContextManager, nullcontext
from http import HTTPStatus
from typing import Any, Mapping

from fastapi import FastAPI, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from .core.context import REQUEST_ID_HEADER, request_context
from .schemas.system import ErrorResponse

logger = logging.getLogger(__name__)


class ApplicationError(Exception):
    """Base class for domain-specific errors.

    ``message`` is the short, title-like text; ``description`` is the longer
    sentence shown beneath it.
    """

    def __init__(
        self,
        message: str,
        *,
        description: str | None = None,
        code: str = "application_error",
        status_code: int = status.HTTP_400_BAD_REQUEST,
        details: Any | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.description = description
        self.code = code
        self.status_code = status_code
        self.details = details


class NotFoundError(ApplicationError):
    """Error representing missing resources."""

    def __init__(
        self,
        message: str = "Resource not found.",
        *,
        description: str | None = None,
        code: str = "not_found",
        details: Any | None = None,
    ) -> None:
        super().__init__(
            message,
            description=description,
            code=code,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
        )


class DuplicateNameError(ApplicationError):
    """Raised when a category name collides with an existing one, ignoring case."""

    def __init__(self, name: str) -> None:
        super().__init__(
            "Category already exists.",
            description=f'Failed to create category "{name}". It may already exist.',
            code="duplicate_name",
            status_code=status.HTTP_409_CONFLICT,
            details={"name": name},
        )
        self.name = name


class CategoryInUseError(ApplicationError):
    """Raised when deleting a category that tasks still reference."""

    def __init__(self, name: str, task_count: int) -> None:
        noun = "task" if task_count == 1 else "tasks"
        super().__init__(
            "Cannot delete category.",
            description=(
                f'Category "{name}" is used by {task_count} {noun}. '
                "Move or delete those tasks first."
            ),
            code="category_in_use",
            status_code=status.HTTP_409_CONFLICT,
            details={"name": name, "task_count": task_count},
        )
        self.name = name
        self.task_count = task_count


class InvalidFormatError(ApplicationError):
    """Raised when an import document does not have the expected shape."""

    def __init__(self, reason: str | None = None) -> None:
        super().__init__(
            "Import failed.",
            description="Invalid file format. Please check your file and try again.",
            code="invalid_format",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"reason": reason} if reason else None,
        )


class OperationFailedError(ApplicationError):
    """Error representing unexpected failures surfaced to the caller."""

    def __init__(
        self,
        message: str = "Internal server error.",
        *,
        description: str | None = "The operation failed. Please try again.",
        code: str = "operation_failed",
        details: Any | None = None,
    ) -> None:
        super().__init__(
            message,
            description=description,
            code=code,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
        )


_HTTP_STATUS_CODE_MAP: dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: "bad_request",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
    status.HTTP_409_CONFLICT: "conflict",
}


def _request_scope(request: Request) -> AbstractContextManager[object]:
    request_id = getattr(request.state, "request_id", None)
    if not request_id:
        return nullcontext()
    return request_context(request_id)


def _merge_details_with_request(request: Request, details: Any | None) -> Any | None:
    request_id = getattr(request.state, "request_id", None)
    if not request_id:
        return details
    if details is None:
        return {"request_id": request_id}
    if isinstance(details, dict):
        if "request_id" not in details:
            return {**details, "request_id": request_id}
        return details
    return {"request_id": request_id, "detail": details}


def _error_response(
    request: Request,
    *,
    status_code: int,
    code: str,
    message: str,
    description: str | None = None,
    details: Any | None = None,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    payload = ErrorResponse(
        code=code,
        message=message,
        description=description,
        details=_merge_details_with_request(request, details),
    )
    response = JSONResponse(status_code=status_code, content=payload.model_dump(mode="json"))
    if headers:
        response.headers.update(headers)
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
    return response


def _http_exception_details(status_code: int, detail: Any) -> tuple[str, Any | None]:
    if isinstance(detail, str):
        return detail, None
    try:
        status_phrase = HTTPStatus(status_code).phrase
    except ValueError:
        status_phrase = "Error"
    if detail is None:
        return status_phrase, None
    if isinstance(detail, list):
        return status_phrase, {"errors": detail}
    return status_phrase, detail


def register_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with the provided FastAPI app."""

    @app.exception_handler(ApplicationError)
    async def _handle_application_error(
        request: Request,
        exc: ApplicationError,
    ) -> JSONResponse:
        with _request_scope(request):
            log = logger.error if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR else logger.warning
            log(
                "Application error encountered",
                extra={"code": exc.code, "status_code": exc.status_code},
            )
            return _error_response(
                request,
                status_code=exc.status_code,
                code=exc.code,
                message=exc.message,
                description=exc.description,
                details=exc.details,
            )

    @app.exception_handler(RequestValidationError)
    async def _handle_request_validation_error(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        with _request_scope(request):
            errors = jsonable_encoder(exc.errors())
            logger.warning("Request validation failed", extra={"errors": errors})
            return _error_response(
                request,
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                code="validation_error",
                message="Request validation failed.",
                details={"errors": errors},
            )

    @app.exception_handler(StarletteHTTPException)
    async def _handle_http_exception(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        with _request_scope(request):
            code = _HTTP_STATUS_CODE_MAP.get(exc.status_code, "http_error")
            message, extra_details = _http_exception_details(exc.status_code, exc.detail)
            logger.warning(
                "HTTP exception raised",
                extra={"code": code, "status_code": exc.status_code, "path": str(request.url.path)},
            )
            return _error_response(
                request,
                status_code=exc.status_code,
                code=code,
                message=message,
                details=extra_details,
                headers=exc.headers or None,
            )

    @app.exception_handler(Exception)
    async def _handle_unhandled_exception(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        with _request_scope(request):
            logger.exception("Unhandled application error.")
            wrapped = OperationFailedError()
            return _error_response(
                request,
                status_code=wrapped.status_code,
                code=wrapped.code,
                message=wrapped.message,
                description=wrapped.description,
            )


__all__ = [
    "ApplicationError",
    "CategoryInUseError",
    "DuplicateNameError",
    "InvalidFormatError",
    "NotFoundError",
    "OperationFailedError",
    "register_exception_handlers",
]
