"""
Error handling at the service boundary.

Note errors never escape to callers as exceptions: they become a failed
:class:`ApiResponse` carrying the error code and message.
"""
import logging
from typing import Any, Callable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from securenotes.core.exceptions import NoteError, ValidationError
from securenotes.schemas.common import ApiResponse

logger = logging.getLogger(__name__)


def failure_response(exc: NoteError) -> ApiResponse:
    """Convert a note error into a failed envelope."""
    return ApiResponse.failure(exc.error_code, exc.message)


def guarded(operation: Callable[..., Any], *args: Any, **kwargs: Any) -> ApiResponse:
    """
    Run a service operation and wrap its outcome.

    Returns:
        ApiResponse with ``data`` on success, ``error`` on a note error
    """
    try:
        return ApiResponse(data=operation(*args, **kwargs))
    except NoteError as e:
        logger.debug(f"{operation.__name__} failed: {e.error_code}")
        return failure_response(e)


async def note_error_handler(request: Request, exc: NoteError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=failure_response(exc).model_dump(),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = [
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ApiResponse.failure(
            ValidationError.error_code,
            "; ".join(messages) or "Invalid request",
        ).model_dump(),
    )


def register_error_handlers(app: FastAPI, debug: bool = False) -> None:
    """Install handlers that turn every failure into the response envelope."""

    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ApiResponse.failure(
                "INTERNAL_ERROR",
                str(exc) if debug else "Unexpected error, please try again",
            ).model_dump(),
        )

    app.add_exception_handler(NoteError, note_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
