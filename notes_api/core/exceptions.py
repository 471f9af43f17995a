"""
Domain errors and global exception handlers for consistent API errors.

Every error body has the shape {error, message, code, details?, request_id?}.
`error` carries the human readable text because the web client shows it first.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class AppError(Exception):
    """Base de errores de dominio; cada subclase fija su status HTTP."""

    status_code: int = 400
    code: str = "error"

    def __init__(self, message: str, details: Optional[List[Dict[str, str]]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationFailed(AppError):
    status_code = 400
    code = "validation_error"


class ConflictError(AppError):
    status_code = 400
    code = "conflict"


class NotFoundError(AppError):
    status_code = 404
    code = "not_found"


class InvalidCredentialError(AppError):
    status_code = 400
    code = "invalid_credential"


class ExpiredError(AppError):
    status_code = 400
    code = "expired"


class UnauthorizedError(AppError):
    status_code = 401
    code = "unauthorized"


class ForbiddenError(AppError):
    status_code = 403
    code = "forbidden"


class RateLimitedError(AppError):
    status_code = 429
    code = "rate_limited"


def _req_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", object()), "request_id", None)


def _body(request: Request, error: str, message: str, code: str, details: Any = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": error, "message": message, "code": code}
    if details:
        body["details"] = details
    rid = _req_id(request)
    if rid:
        body["request_id"] = rid
    return body


def _field_message(err: Dict[str, Any]) -> str:
    # Los validadores propios levantan ValueError; Pydantic antepone "Value error, "
    ctx = err.get("ctx") or {}
    if err.get("type") == "value_error" and ctx.get("error") is not None:
        return str(ctx["error"])
    return str(err.get("msg") or "Invalid value")


def validation_details(errors: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Convierte errores de Pydantic a [{field, message}] sin el prefijo 'body'."""
    out: List[Dict[str, str]] = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        out.append({"field": ".".join(loc), "message": _field_message(err)})
    return out


def register_exception_handlers(app: FastAPI) -> None:
    log = logging.getLogger("notes.errors")

    @app.exception_handler(AppError)
    async def _app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            log.error("AppError %s request_id=%s: %s", exc.code, _req_id(request), exc.message)
        body = _body(request, exc.message, exc.message, exc.code, exc.details)
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(StarletteHTTPException)
    async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
        message = str(exc.detail or "HTTP error")
        body = _body(request, message, message, "http_error")
        return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def _validation_handler(request: Request, exc: RequestValidationError):
        details = validation_details(list(exc.errors()))
        first = details[0]["message"] if details else "Invalid input data"
        body = _body(request, "Validation failed", first, ValidationFailed.code, details)
        return JSONResponse(status_code=400, content=body)

    @app.exception_handler(Exception)
    async def _generic_handler(request: Request, exc: Exception):
        rid = _req_id(request)
        log.exception("Unhandled error request_id=%s", rid)
        body = _body(request, "Server error", "Internal server error", "server_error")
        return JSONResponse(status_code=500, content=body)
