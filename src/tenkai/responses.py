"""The ``{success, message, data, error}`` envelope and the error handlers that produce it."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from tenkai.errors import DEFAULT_FAILURE_MESSAGE, TenkaiError, ValidationError

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)


def envelope(
    *,
    success: bool = True,
    message: str = "",
    data: Any = None,
    error: str | None = None,
    warnings: list[str] | None = None,
    status_code: int = 200,
) -> JSONResponse:
    """Build a JSON response in the shared envelope shape."""
    body: dict[str, Any] = {"success": success, "message": message}
    if data is not None:
        body["data"] = jsonable_encoder(data)
    if error:
        body["error"] = error
    if warnings:
        body["warnings"] = warnings
    return JSONResponse(body, status_code=status_code)


async def handle_tenkai_error(request: Request, exc: TenkaiError) -> JSONResponse:
    if exc.status_code >= 500:  # noqa: PLR2004
        logger.error(
            "Request failed: method=%s path=%s error=%s",
            request.method,
            request.url.path,
            exc.detail,
        )
    else:
        logger.info(
            "Request rejected: method=%s path=%s status=%d error=%s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.detail,
        )
    return envelope(
        success=False,
        message=exc.message or DEFAULT_FAILURE_MESSAGE,
        error=exc.detail or None,
        status_code=exc.status_code,
    )


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    detail = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    )
    return envelope(
        success=False,
        message=ValidationError.default_message or "",
        error=detail,
        status_code=400,
    )


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    return envelope(
        success=False,
        message=str(exc.detail),
        status_code=exc.status_code,
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error: method=%s path=%s", request.method, request.url.path, exc_info=exc
    )
    return envelope(
        success=False,
        message=DEFAULT_FAILURE_MESSAGE,
        error=str(exc) or type(exc).__name__,
        status_code=500,
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TenkaiError, handle_tenkai_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)
