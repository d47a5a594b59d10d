"""API error taxonomy and the {"error": {"message", "code"}} envelope.

Handlers raise; the exception handlers registered here are the only place
where failures become HTTP responses.
"""

from __future__ import annotations

import logging

from app.repositories.errors import ConstraintViolation, RecordNotFound
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

UNAUTHORIZED = "UNAUTHORIZED"
NOT_FOUND = "NOT_FOUND"
VALIDATION_ERROR = "VALIDATION_ERROR"
SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
INTERNAL_ERROR = "INTERNAL_ERROR"
AUTH_ERROR = "AUTH_ERROR"

INVALID_JSON_MESSAGE = "Invalid JSON body"

_STATUS_CODES = {
    400: VALIDATION_ERROR,
    401: UNAUTHORIZED,
    404: NOT_FOUND,
    503: SERVICE_UNAVAILABLE,
}


class ApiError(Exception):
    """Base API error. Subclasses pin the status code and error code."""

    status_code = 500
    code = INTERNAL_ERROR

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class Unauthorized(ApiError):
    status_code = 401
    code = UNAUTHORIZED

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class NotFound(ApiError):
    status_code = 404
    code = NOT_FOUND


class ValidationFailed(ApiError):
    status_code = 400
    code = VALIDATION_ERROR


class ServiceUnavailable(ApiError):
    status_code = 503
    code = SERVICE_UNAVAILABLE


class InternalError(ApiError):
    status_code = 500
    code = INTERNAL_ERROR


class AuthFailed(ApiError):
    """Auth provider rejected the call. Status depends on the endpoint."""

    status_code = 400
    code = AUTH_ERROR


def error_response(message: str, code: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": {"message": message, "code": code}})


def first_error_message(errors: list[dict]) -> str:
    """Human-readable message for the first failing rule, prefixed with its field."""
    if not errors:
        return "Invalid request"
    err = errors[0]
    loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
    if err.get("type") == "json_invalid":
        return INVALID_JSON_MESSAGE
    if err.get("type") == "missing" and not loc:
        return INVALID_JSON_MESSAGE
    message = str(err.get("msg", "Invalid value"))
    message = message.removeprefix("Value error, ")
    return f"{'.'.join(loc)}: {message}" if loc else message


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        return error_response(exc.message, exc.code, exc.status_code)

    @app.exception_handler(RecordNotFound)
    async def not_found_handler(request: Request, exc: RecordNotFound):
        return error_response(exc.message, NOT_FOUND, 404)

    @app.exception_handler(ConstraintViolation)
    async def constraint_handler(request: Request, exc: ConstraintViolation):
        return error_response(exc.message, VALIDATION_ERROR, 400)

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError):
        return error_response(first_error_message(list(exc.errors())), VALIDATION_ERROR, 400)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        code = _STATUS_CODES.get(exc.status_code, INTERNAL_ERROR if exc.status_code >= 500 else VALIDATION_ERROR)
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return error_response(message, code, exc.status_code)

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error("Database error on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
        return error_response("Database error", INTERNAL_ERROR, 500)

    # Prevent internal details from leaking
    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
        return error_response("Internal server error.", INTERNAL_ERROR, 500)
