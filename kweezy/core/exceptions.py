"""
Domain errors and their HTTP rendering
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class KweezyError(Exception):
    """Base class for errors surfaced to API clients"""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(KweezyError):
    status_code = status.HTTP_404_NOT_FOUND


class BadRequestError(KweezyError):
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(KweezyError):
    status_code = status.HTTP_409_CONFLICT


class AuthError(KweezyError):
    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDeniedError(KweezyError):
    status_code = status.HTTP_403_FORBIDDEN


def error_body(code: int, message: str) -> dict:
    return {"code": code, "message": message, "data": None}


def first_validation_message(exc: RequestValidationError) -> str:
    """
    Pick the message of the first failing rule.

    Custom validators raise ValueError, which pydantic prefixes with
    "Value error, "; that prefix is dropped.
    """
    errors = exc.errors()
    if not errors:
        return "Invalid request."
    first = errors[0]
    message = str(first.get("msg", "Invalid request."))
    if first.get("type") == "value_error":
        return message.removeprefix("Value error, ")
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    if loc:
        return f"{'.'.join(loc)}: {message}"
    return message


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain and validation errors onto the response envelope"""

    @app.exception_handler(KweezyError)
    async def handle_kweezy_error(request: Request, exc: KweezyError):
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.status_code, exc.message))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body(status.HTTP_400_BAD_REQUEST, first_validation_message(exc))
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error.")
        )
