# inventory/core/exceptions.py
"""
Domain exceptions and their mapping to the JSON error envelope.

Services and guards raise these; `register_exception_handlers` turns every
failure into `{"error": "<message>"}` with the matching HTTP status so no
request ever ends with a non-JSON body.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("inventory.errors")


class AppError(Exception):
    """Base exception for all business logic errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Unexpected error."):
        self.message = message
        super().__init__(self.message)


class BadRequestError(AppError):
    """Malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(AppError):
    """No active session."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Unauthorised. Please log in."):
        super().__init__(message)


class ForbiddenError(AppError):
    """Wrong role, or not the owner of the resource."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    """Duplicate values and business-rule conflicts."""

    status_code = status.HTTP_409_CONFLICT


class UnsupportedMediaTypeError(AppError):
    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE

    def __init__(self, message: str = "Content-Type must be application/json."):
        super().__init__(message)


class ValidationError(AppError):
    """Client-correctable field errors, already joined into one message."""

    status_code = 422

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(" ".join(errors))


class StorageError(AppError):
    """Opaque persistence failure carrying the driver's message."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(f"Database error: {message}")


class UploadError(AppError):
    """
    Rejected or failed image upload.

    Bad files are the client's fault (400); disk failures are ours (500).
    """

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message},
        headers={"Cache-Control": "no-store, no-cache, must-revalidate"},
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return error_response(exc.message, exc.status_code)


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return error_response(str(exc.detail), exc.status_code)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Query/form parameters FastAPI could not parse (e.g. `?id=abc`).
    Those are malformed requests, not field validation failures.
    """
    problems = []
    for err in exc.errors():
        name = err["loc"][-1] if err.get("loc") else "request"
        problems.append(f"{name}: {err['msg']}")
    return error_response(
        "Invalid request: " + "; ".join(problems), status.HTTP_400_BAD_REQUEST
    )


async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    detail = str(getattr(exc, "orig", None) or exc)
    logger.error("%s %s storage failure: %s", request.method, request.url.path, detail)
    return error_response(f"Database error: {detail}", status.HTTP_500_INTERNAL_SERVER_ERROR)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(f"Server error: {exc}", status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
