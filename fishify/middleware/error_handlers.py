"""Exception handlers for the application."""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from fishify.exceptions import ErrorCode, FishifyException
from fishify.logging_config import get_logger, log_with_context

logger = get_logger(__name__)


async def fishify_exception_handler(request: Request, exc: FishifyException) -> JSONResponse:
    """Handle fishify exceptions with their mapped HTTP status codes.

    Returns structured JSON error responses with error code, message and
    details, so a chat bot can show the message to the user.
    """
    log_with_context(
        logger,
        "warning",
        "Command failed",
        error_code=exc.code.value,
        error_message=exc.message,
        status_code=exc.status_code,
        method=request.method,
        path=request.url.path,
        event_type="fishify_error",
    )

    error_content: dict[str, Any] = {"code": exc.code.value, "message": exc.message, "details": exc.details}

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": error_content},
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions without exposing internals."""
    log_with_context(
        logger,
        "error",
        "Unhandled exception",
        error=str(exc),
        error_type=type(exc).__name__,
        method=request.method,
        path=request.url.path,
        event_type="unhandled_error",
    )
    logger.error("Exception traceback:", exc_info=exc)

    return JSONResponse(
        status_code=500,
        content={"error": {"code": ErrorCode.INTERNAL_ERROR.value, "message": "Internal server error"}},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(FishifyException, fishify_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, general_exception_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]
