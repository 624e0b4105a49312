"""
Error normalizer: the single place that turns any failure into the client
error envelope {error, details?, stack?} and an HTTP status.

Every normalized error is logged exactly once with its request context.
"""

import logging
import traceback
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.core.errors import (
    AppError,
    DuplicateKeyError,
    ExpiredTokenError,
    InvalidTokenError,
    MalformedIdentifierError,
    NotFoundError,
    ValidationError,
)

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

ErrorBody = dict[str, Any]


@dataclass(frozen=True)
class RequestContext:
    """Request fields recorded with every logged error."""

    url: str
    method: str
    ip: str | None

    @classmethod
    def from_request(cls, request: Request) -> "RequestContext":
        url = request.url.path
        if request.url.query:
            url = f"{url}?{request.url.query}"
        return cls(
            url=url,
            method=request.method,
            ip=request.client.host if request.client else None,
        )


def _message(err: BaseException) -> str:
    if isinstance(err, AppError):
        return err.message
    return str(err)


def _stack(err: BaseException) -> str:
    return "".join(traceback.format_exception(type(err), err, err.__traceback__))


def _invalid_id(err: MalformedIdentifierError) -> tuple[int, ErrorBody]:
    return 400, {"error": "Invalid ID format", "details": err.message}


def _duplicate(err: DuplicateKeyError) -> tuple[int, ErrorBody]:
    return 400, {"error": "Duplicate field value", "details": f"{err.field} already exists"}


def _validation(err: ValidationError) -> tuple[int, ErrorBody]:
    return 400, {"error": "Validation error", "details": list(err.errors.values())}


def _invalid_token(err: InvalidTokenError) -> tuple[int, ErrorBody]:
    return 401, {"error": "Invalid token", "details": err.message}


def _expired_token(err: ExpiredTokenError) -> tuple[int, ErrorBody]:
    return 401, {"error": "Token expired", "details": err.message}


# Classification precedence: first matching type wins.
_CLASSIFIERS: tuple[tuple[type[AppError], Callable[[Any], tuple[int, ErrorBody]]], ...] = (
    (MalformedIdentifierError, _invalid_id),
    (DuplicateKeyError, _duplicate),
    (ValidationError, _validation),
    (InvalidTokenError, _invalid_token),
    (ExpiredTokenError, _expired_token),
)


def _classify(err: BaseException, message: str, settings: "Settings") -> tuple[int, ErrorBody]:
    for error_type, classify in _CLASSIFIERS:
        if isinstance(err, error_type):
            return classify(err)

    status_code = getattr(err, "status_code", None)
    if not isinstance(status_code, int):
        status_code = 500
    body: ErrorBody = {"error": message or "Server Error"}
    # Stack traces only for server faults, and only in dev.
    if settings.APP_ENV == "dev" and status_code >= 500:
        body["stack"] = _stack(err)
    return status_code, body


def normalize_error(
    err: BaseException,
    context: RequestContext,
    settings: "Settings",
) -> tuple[int, ErrorBody]:
    """
    Map err to (status, body), logging it once with its request context.

    Known taxonomy errors get their fixed envelope. Anything else uses its
    status_code attribute (default 500) and message; for 5xx the stack trace
    is added when APP_ENV is dev. Client errors log at WARNING, server
    errors at ERROR with the traceback attached.
    """
    message = _message(err)
    status_code, body = _classify(err, message, settings)
    is_server_error = status_code >= 500
    logger.log(
        logging.ERROR if is_server_error else logging.WARNING,
        "Error: %s %s %s status=%s ip=%s",
        message,
        context.method,
        context.url,
        status_code,
        context.ip,
        exc_info=(type(err), err, err.__traceback__) if is_server_error else None,
        extra={
            "error_message": message,
            "stack": _stack(err),
            "url": context.url,
            "method": context.method,
            "ip": context.ip,
        },
    )
    return status_code, body


def from_request_validation(exc: RequestValidationError) -> ValidationError:
    """Convert pydantic request errors into the ValidationError taxonomy type."""
    errors: dict[str, str] = {}
    for item in exc.errors():
        loc = [str(part) for part in item.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "request"
        errors.setdefault(field, f"{field}: {item.get('msg', 'Invalid value')}")
    return ValidationError(errors)


def from_http_exception(exc: StarletteHTTPException) -> AppError:
    if exc.status_code == 404:
        return NotFoundError("Route not found")
    return AppError(str(exc.detail), status_code=exc.status_code)


def _respond(err: BaseException, request: Request) -> JSONResponse:
    status_code, body = normalize_error(err, RequestContext.from_request(request), get_settings())
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(status_code=status_code, content=body, headers=headers)


async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _respond(exc, request)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _respond(from_request_validation(exc), request)


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _respond(from_http_exception(exc), request)


async def _unhandled_errors(request: Request, call_next):
    """Catch anything the exception handlers did not, so it still gets the envelope."""
    try:
        return await call_next(request)
    except Exception as exc:
        return _respond(exc, request)


def register_error_handlers(app: FastAPI) -> None:
    """Route every failure through normalize_error."""
    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.middleware("http")(_unhandled_errors)
