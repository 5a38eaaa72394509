"""Error response schemas.

Every failure translated by GlobalExceptionMiddleware uses the same envelope:
{"success": false, "error": {"message": "...", "traceId": "...", "timestamp": "..."}}.
"""

from typing import Literal

from library_api.schemas.base import CamelModel


class ErrorDetail(CamelModel):
    """Inner error object. message is never the original exception text."""

    message: str
    trace_id: str
    timestamp: str


class ErrorResponse(CamelModel):
    """Top-level error envelope returned for unhandled failures."""

    success: Literal[False] = False
    error: ErrorDetail
