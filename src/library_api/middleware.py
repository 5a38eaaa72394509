"""FastAPI middleware: error translation, request tracing and security headers.

Registration order matters. Starlette wraps each newly added middleware around
the previous ones, so GlobalExceptionMiddleware is added last to end up
outermost::

    app.add_middleware(CORSMiddleware, ...)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(GlobalExceptionMiddleware)
"""

import uuid
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, Protocol

import structlog
from pydantic import ValidationError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from library_api.exceptions import (
    InvalidArgumentError,
    InvalidOperationError,
    NotFoundError,
    UnauthorizedError,
)
from library_api.logging import get_logger
from library_api.schemas.error import ErrorDetail, ErrorResponse

REQUEST_ID_HEADER = "X-Request-ID"
_REQUEST_ID_SCOPE_KEY = "request_id"

GENERIC_ERROR_MESSAGE = "An error occurred while processing your request."
UNHANDLED_EXCEPTION_EVENT = "An unhandled exception occurred"


class FailureKind(StrEnum):
    """Closed set of buckets an escaping exception is sorted into."""

    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    INVALID_OPERATION = "invalid_operation"
    UNCLASSIFIED = "unclassified"


STATUS_BY_KIND: dict[FailureKind, int] = {
    FailureKind.INVALID_ARGUMENT: 400,
    FailureKind.NOT_FOUND: 404,
    FailureKind.UNAUTHORIZED: 401,
    FailureKind.INVALID_OPERATION: 500,
    FailureKind.UNCLASSIFIED: 500,
}


class ErrorLogger(Protocol):
    """The slice of a structlog BoundLogger the exception middleware uses."""

    def error(self, event: str, *args: Any, **kw: Any) -> Any: ...


def classify(exc: BaseException) -> FailureKind:
    """Map an exception to its failure kind, most specific match first.

    Domain exceptions are matched before the builtin families they extend,
    so a NotFoundError is never mistaken for a plain ValueError or the like.
    A pydantic ValidationError escaping a handler comes from server-side model
    building, not from the request body (FastAPI answers those with 422), so it
    is unclassified even though it subclasses ValueError.
    """
    match exc:
        case UnauthorizedError() | PermissionError():
            return FailureKind.UNAUTHORIZED
        case NotFoundError() | LookupError():
            return FailureKind.NOT_FOUND
        case ValidationError():
            return FailureKind.UNCLASSIFIED
        case InvalidArgumentError() | ValueError():
            return FailureKind.INVALID_ARGUMENT
        case InvalidOperationError():
            return FailureKind.INVALID_OPERATION
        case _:
            return FailureKind.UNCLASSIFIED


def status_for(kind: FailureKind) -> int:
    return STATUS_BY_KIND[kind]


def format_timestamp(moment: datetime) -> str:
    """Format as yyyy-MM-ddTHH:mm:ss.fffZ in UTC."""
    return moment.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%S.") + (
        f"{moment.microsecond // 1000:03d}Z"
    )


def build_error_envelope(trace_id: str, now: datetime | None = None) -> dict[str, object]:
    """Build the camelCase error envelope as a dict for JSONResponse."""
    detail = ErrorDetail(
        message=GENERIC_ERROR_MESSAGE,
        trace_id=trace_id,
        timestamp=format_timestamp(now or datetime.now(UTC)),
    )
    return ErrorResponse(error=detail).model_dump(by_alias=True)


def get_request_id(request: Request) -> str:
    """Return the correlation id for this request.

    Taken from the X-Request-ID header when the client sent one, otherwise a
    fresh UUID. The value is stored in the ASGI scope on first access, so every
    middleware and handler in the same request sees the same id.
    """
    request_id = request.scope.get(_REQUEST_ID_SCOPE_KEY)
    if request_id is None:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.scope[_REQUEST_ID_SCOPE_KEY] = request_id
    return request_id


class GlobalExceptionMiddleware(BaseHTTPMiddleware):
    """Translate any exception escaping the app into the standard error envelope.

    - Successful responses pass through untouched and nothing is logged
    - On failure, logs once at error level with the original exception
    - Responds with the mapped status, application/json and a detail-free
      message; the exception is never re-raised

    The logger can be swapped for tests::

        app.add_middleware(GlobalExceptionMiddleware, logger=fake_logger)
    """

    def __init__(self, app: ASGIApp, logger: ErrorLogger | None = None) -> None:
        super().__init__(app)
        self._logger: ErrorLogger = logger or get_logger(__name__)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = get_request_id(request)
        try:
            return await call_next(request)
        except Exception as exc:
            kind = classify(exc)
            self._logger.error(
                UNHANDLED_EXCEPTION_EVENT,
                exc_info=exc,
                failure_kind=kind.value,
                path=request.url.path,
                method=request.method,
                request_id=request_id,
            )
            return JSONResponse(
                status_code=status_for(kind),
                content=build_error_envelope(request_id),
                media_type="application/json",
                headers={REQUEST_ID_HEADER: request_id},
            )


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Add request ID to every request for tracing.

    - Uses the id resolved by get_request_id (header or generated UUID)
    - Binds request_id to structlog context (auto-included in all logs)
    - Adds X-Request-ID to response headers
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = get_request_id(request)

        # Bind to structlog context; all logs in this request will include it
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": (
        "default-src 'self'; script-src 'self' 'unsafe-inline'; "
        "style-src 'self' 'unsafe-inline'; img-src 'self' data: https:;"
    ),
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Attach browser hardening headers to every response."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response
