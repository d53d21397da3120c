from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """An error that maps directly onto the response envelope."""

    def __init__(
        self,
        status_code: int,
        *,
        message: str | None = None,
        error: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(message or error or "")
        self.status_code = status_code
        self.message = message
        self.error = error
        self.headers = headers


def envelope(success: bool, **fields: Any) -> dict[str, Any]:
    body: dict[str, Any] = {"success": success}
    body.update({k: v for k, v in fields.items() if v is not None})
    return body


def _field_name(loc: tuple[Any, ...] | list[Any]) -> str:
    # ("body", "attendees", 1) -> "attendees"; ("query", "from") -> "from"
    parts = [str(p) for p in loc if p not in ("body", "query", "path")]
    return parts[0] if parts else "unknown"


async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=envelope(False, message=exc.message, error=exc.error),
        headers=exc.headers,
    )


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=envelope(False, error=str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [{"field": _field_name(e.get("loc", ())), "message": e.get("msg", "Invalid value")} for e in exc.errors()]
    logger.info("Validation failed path=%s fields=%s", request.url.path, [e["field"] for e in errors])
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=envelope(False, message="Validation failed", errors=errors),
    )


async def handle_error(request: Request, exc: Exception) -> JSONResponse:
    """Shared 500 formatter for anything the handlers did not anticipate."""
    logger.exception("Unhandled error path=%s method=%s", request.url.path, request.method)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=envelope(False, message="Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, handle_error)
