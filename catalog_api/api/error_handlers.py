"""Error Translator — global exception handlers mapping every failure to the envelope.

Invariants:
    - Every error body is {success: false, statusCode, message, stack}
    - stack is the formatted traceback outside production and null in production
    - Unmatched routes -> 404 "Not found - <path>"
    - This is the only module that inspects raw SQLAlchemy exceptions
    - Unclassified storage errors answer the generic message; SQL text and
      bound parameters never reach the client

Design Decisions:
    - Two stages: not_found_handler builds a NotFoundFailure for unmatched routes
      and forwards it; classify_exception maps anything to (status, message)
    - Classification is a pure function so tests can feed simulated storage errors
    - Handlers registered per class (CatalogError, SQLAlchemyError, validation,
      HTTP) plus a catch-all Exception handler for unclassified failures
"""

import logging
import traceback

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError, StatementError
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalog_api.core.errors import CatalogError, NotFoundFailure
from catalog_api.core.identifiers import INVALID_ID_MESSAGE
from catalog_api.core.responses import Failure, failure_response

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "Duplicate field value entered"
GENERIC_MESSAGE = "Something went wrong!"


def register_error_handlers(app: FastAPI, production: bool = False) -> None:
    """Register all global error handlers on the FastAPI app."""

    async def error_handler(request: Request, exc: Exception) -> JSONResponse:
        failure = classify_exception(exc)
        _log(request, exc, failure)
        return JSONResponse(
            status_code=failure.status_code,
            content=build_error_body(failure, exc, production),
        )

    async def not_found_handler(
        request: Request, exc: StarletteHTTPException,
    ) -> JSONResponse:
        if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
            return await error_handler(
                request, NotFoundFailure(f"Not found - {request.url.path}"),
            )
        return await error_handler(request, exc)

    app.add_exception_handler(CatalogError, error_handler)
    app.add_exception_handler(RequestValidationError, error_handler)
    app.add_exception_handler(SQLAlchemyError, error_handler)
    app.add_exception_handler(StarletteHTTPException, not_found_handler)
    app.add_exception_handler(Exception, error_handler)


def classify_exception(exc: BaseException) -> Failure:
    """Map any exception to the status/message pair the client sees."""
    if isinstance(exc, CatalogError):
        return exc.to_failure()
    if isinstance(exc, RequestValidationError):
        return failure_response(400, _validation_message(exc))
    if is_malformed_identifier(exc):
        return failure_response(400, INVALID_ID_MESSAGE)
    if is_duplicate_key(exc):
        return failure_response(400, DUPLICATE_MESSAGE)
    if isinstance(exc, StarletteHTTPException):
        return failure_response(exc.status_code, str(exc.detail) or GENERIC_MESSAGE)
    if isinstance(exc, SQLAlchemyError):
        return failure_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_MESSAGE)

    status_code = getattr(exc, "status_code", None)
    if not isinstance(status_code, int) or status_code < 400:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return failure_response(status_code, str(exc) or GENERIC_MESSAGE)


def is_malformed_identifier(exc: BaseException) -> bool:
    """Storage rejected an id as not being a UUID.

    PostgreSQL reports "invalid input syntax for type uuid" server-side; asyncpg
    encodes UUID parameters client-side and fails with "invalid input for query
    argument $1: ... (invalid UUID ...)", wrapped by SQLAlchemy as a DBAPIError.
    """
    if isinstance(exc, DBAPIError):
        text = str(exc.orig).lower()
        return "invalid input syntax for type uuid" in text or "invalid uuid" in text
    if isinstance(exc, StatementError):
        orig = exc.orig
        return isinstance(orig, ValueError) and "uuid" in str(orig).lower()
    return False


def is_duplicate_key(exc: BaseException) -> bool:
    """Uniqueness constraint violation (PostgreSQL 23505 or SQLite UNIQUE)."""
    if not isinstance(exc, IntegrityError):
        return False
    if getattr(exc.orig, "pgcode", None) == "23505":
        return True
    text = str(exc.orig).lower()
    return "unique" in text or "duplicate key" in text


def build_error_body(failure: Failure, exc: BaseException, production: bool) -> dict:
    body = failure.to_body()
    body["stack"] = None if production else "".join(
        traceback.format_exception(type(exc), exc, exc.__traceback__),
    )
    return body


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request data"
    first = errors[0]
    location = ".".join(str(loc) for loc in first.get("loc", ()) if loc != "body")
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


def _log(request: Request, exc: BaseException, failure: Failure) -> None:
    extra = {
        "path": request.url.path,
        "method": request.method,
        "status_code": failure.status_code,
        "error_code": getattr(exc, "code", type(exc).__name__),
    }
    if failure.status_code >= 500:
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            extra=extra, exc_info=exc,
        )
    else:
        logger.warning(f"Request failed: {failure.message}", extra=extra)
