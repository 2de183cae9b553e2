"""
Global exception handlers for FastAPI.
"""

from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

import structlog

from openinterviewer.core.exceptions import (
    AccessDeniedError,
    ConfigurationError,
    InsufficientDataError,
    InterviewNotFoundError,
    InterviewSystemError,
    LLMRateLimitError,
    LLMTimeoutError,
    PreconditionError,
    SessionCompletedError,
    SessionNotFoundError,
    StorageUnavailableError,
    StudyHasInterviewsError,
    StudyLockedError,
    StudyNotFoundError,
    ValidationError,
)

log = structlog.get_logger(__name__)

# First match wins; subclasses must precede their bases
STATUS_MAP = [
    (SessionNotFoundError, status.HTTP_404_NOT_FOUND),
    (StudyNotFoundError, status.HTTP_404_NOT_FOUND),
    (InterviewNotFoundError, status.HTTP_404_NOT_FOUND),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (SessionCompletedError, status.HTTP_400_BAD_REQUEST),
    (PreconditionError, status.HTTP_400_BAD_REQUEST),
    (AccessDeniedError, status.HTTP_403_FORBIDDEN),
    (StudyLockedError, status.HTTP_409_CONFLICT),
    (StudyHasInterviewsError, status.HTTP_409_CONFLICT),
    (StorageUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (LLMTimeoutError, status.HTTP_504_GATEWAY_TIMEOUT),
    (LLMRateLimitError, status.HTTP_429_TOO_MANY_REQUESTS),
]


def status_for(exc: InterviewSystemError) -> int:
    for exc_type, status_code in STATUS_MAP:
        if isinstance(exc, exc_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(exc: InterviewSystemError) -> Dict[str, Any]:
    error: Dict[str, Any] = {
        "type": type(exc).__name__,
        "message": exc.message,
    }
    if isinstance(exc, StudyLockedError):
        error["interviewCount"] = exc.interview_count
    elif isinstance(exc, InsufficientDataError):
        error["minimum"] = exc.minimum
    return {"error": error}


def setup_exception_handlers(app: FastAPI):
    """Register custom exception handlers with the FastAPI application.

    Sets up handlers for all InterviewSystemError subclasses with appropriate
    HTTP status codes, plus handlers for configuration errors and generic exceptions.
    """

    @app.exception_handler(InterviewSystemError)
    async def interview_system_error_handler(
        request: Request,
        exc: InterviewSystemError,
    ) -> JSONResponse:
        """Map application errors to HTTP status codes with a uniform error body."""
        log_ctx = log.bind(
            path=request.url.path,
            method=request.method,
            error_type=type(exc).__name__,
        )

        status_code = status_for(exc)

        log_ctx.warning(
            "request_error",
            message=exc.message,
            status_code=status_code,
        )

        return JSONResponse(status_code=status_code, content=error_body(exc))

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(
        request: Request,
        exc: ConfigurationError,
    ) -> JSONResponse:
        """Configuration problems are reported without leaking their details."""
        log.error(
            "configuration_error",
            path=request.url.path,
            message=exc.message,
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "type": "ConfigurationError",
                    "message": "Server configuration error",
                }
            },
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        log_ctx = log.bind(
            path=request.url.path,
            method=request.method,
            error_type=type(exc).__name__,
        )

        log_ctx.error(
            "unhandled_exception",
            message=str(exc),
            exc_info=exc,
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "type": "InternalServerError",
                    "message": "An unexpected error occurred",
                }
            },
        )
