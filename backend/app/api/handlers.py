import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import jwt
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import BuildsyError

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str, **extra: Any) -> JSONResponse:
    content: dict[str, Any] = {"success": False, "message": message}
    content.update({key: value for key, value in extra.items() if value is not None})
    return JSONResponse(status_code=status_code, content=content)


@contextmanager
def reported_as(message: str) -> Iterator[None]:
    """Report store outages as a 500 carrying the route's failure message."""
    try:
        yield
    except OperationalError as e:
        raise BuildsyError(message, error=str(e.orig)) from e


def _format_validation_errors(errors: list[dict[str, Any]]) -> list[str]:
    messages = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc)
        msg = error.get("msg", "Invalid value")
        messages.append(f"{field}: {msg}" if field else msg)
    return messages


async def buildsy_error_handler(request: Request, exc: BuildsyError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.error)
    return error_response(exc.status_code, exc.message, errors=exc.errors, error=exc.error)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(400, "Validation error", errors=_format_validation_errors(exc.errors()))


async def pydantic_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return error_response(400, "Validation error", errors=_format_validation_errors(exc.errors()))


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return error_response(400, "Duplicate field value entered")


async def token_error_handler(request: Request, exc: jwt.InvalidTokenError) -> JSONResponse:
    if isinstance(exc, jwt.ExpiredSignatureError):
        return error_response(401, "Token expired")
    return error_response(401, "Invalid token")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        url = request.url.path + (f"?{request.url.query}" if request.url.query else "")
        return error_response(404, f"Route not found - {url}")
    return error_response(exc.status_code, str(exc.detail))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(500, str(exc) or "Internal Server Error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BuildsyError, buildsy_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ValidationError, pydantic_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, integrity_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(jwt.InvalidTokenError, token_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_error_handler)
