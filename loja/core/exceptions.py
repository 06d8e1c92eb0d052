"""
Error taxonomy and global exception handlers.

Controllers raise the typed errors below; everything else propagates to the
handlers registered here, which log the request context and shape the
``{success: false, message}`` envelope. Stack traces are only returned
outside production.
"""

from __future__ import annotations

import logging
import traceback
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException

from loja.core.config import settings

logger = logging.getLogger(__name__)

_REDACTED = "<redacted>"
_SECRET_FIELDS = {"password", "senha", "token"}

RATE_LIMIT_MESSAGE = "Muitas tentativas de login. Tente novamente mais tarde."


# ── Typed errors ────────────────────────────────────────────────────
class AppError(Exception):
    status_code = 500

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.headers = headers


class ValidationError(AppError):
    status_code = 400


class AuthenticationError(AppError):
    status_code = 401

    def __init__(self, message: str) -> None:
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class AuthorizationError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class ServerError(AppError):
    status_code = 500


# ── Helpers ─────────────────────────────────────────────────────────
def redact(payload: Any) -> Any:
    """Return a copy of *payload* with secret fields masked, for logging."""
    if isinstance(payload, dict):
        return {
            key: _REDACTED if str(key).lower() in _SECRET_FIELDS else redact(value)
            for key, value in payload.items()
        }
    if isinstance(payload, list):
        return [redact(item) for item in payload]
    return payload


def _log_request_error(request: Request, exc: Exception, level: int, body: Any = None) -> None:
    if body is None:
        # stored by loja.api.deps.capture_request_body; the stream is consumed by now
        body = getattr(request.state, "body", None)
    logger.log(
        level,
        "%s %s failed: %s | params=%s query=%s body=%s",
        request.method,
        request.url.path,
        exc,
        dict(request.path_params),
        dict(request.query_params),
        redact(body),
        exc_info=level >= logging.ERROR,
    )


def _error_response(
    status_code: int,
    message: str,
    exc: Exception,
    headers: dict[str, str] | None = None,
    original: bool = False,
) -> JSONResponse:
    content: dict[str, Any] = {"success": False, "message": message}
    if not settings.is_production:
        if original:
            content["originalMessage"] = str(exc)
        content["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def format_validation_errors(errors: list[dict[str, Any]]) -> str:
    """Aggregate pydantic errors into a single comma-separated message."""
    messages = []
    for err in errors:
        field = ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path"))
        if err.get("type") == "missing":
            messages.append(f"{field} é obrigatório")
            continue
        msg = str(err.get("msg", "")).removeprefix("Value error, ")
        messages.append(f"{field}: {msg}" if field else msg)
    return ", ".join(messages)


# ── Handlers ────────────────────────────────────────────────────────
async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    _log_request_error(request, exc, level)
    return _error_response(exc.status_code, exc.message, exc, exc.headers)


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = format_validation_errors(list(exc.errors()))
    _log_request_error(request, exc, logging.WARNING, body=exc.body)
    return _error_response(400, message, exc)


async def _http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    _log_request_error(request, exc, logging.WARNING)
    return _error_response(
        exc.status_code, str(exc.detail), exc, getattr(exc, "headers", None)
    )


async def _rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    _log_request_error(request, exc, logging.WARNING)
    return _error_response(429, RATE_LIMIT_MESSAGE, exc)


async def _integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    _log_request_error(request, exc, logging.ERROR)
    return _error_response(409, "Registro duplicado", exc)


async def _sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    _log_request_error(request, exc, logging.ERROR)
    return _error_response(500, "Erro no banco de dados", exc)


async def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    _log_request_error(request, exc, logging.ERROR)
    return _error_response(500, "Erro interno do servidor", exc, original=True)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all exception handlers to the FastAPI app."""
    app.add_exception_handler(AppError, _app_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)  # type: ignore[arg-type]
    app.add_exception_handler(HTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, _integrity_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _sqlalchemy_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _generic_exception_handler)
