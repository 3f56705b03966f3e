from __future__ import annotations

"""
JSON exception handlers.

Installed by `app.main.create_app`. Every error is rendered as
`{"error": <message>, "code"?: ..., "request_id": ...}` with the HTTP status
of the classified error, which is the shape the frontend already consumes.
"""

import logging
from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import AppException
from app.middleware.request_id import get_request_id

logger = logging.getLogger(__name__)


def _error(body: Dict[str, Any], status_code: int, headers: Dict[str, str] | None = None) -> JSONResponse:
    hdrs = {"Cache-Control": "no-store"}
    if headers:
        hdrs.update(headers)
    return JSONResponse(status_code=status_code, content=body, headers=hdrs)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:  # type: ignore
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s (code=%s)", request.method, request.url.path, exc.message, exc.code)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return _error(exc.to_body(request_id=get_request_id(request)), exc.status_code, exc.headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:  # type: ignore
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    body = {"error": detail, "request_id": get_request_id(request)}
    return _error(body, exc.status_code, getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:  # type: ignore
    body = {
        "error": "Validation error",
        "details": jsonable_encoder(exc.errors()),
        "request_id": get_request_id(request),
    }
    return _error(body, status.HTTP_422_UNPROCESSABLE_ENTITY)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:  # type: ignore
    # Hide internals; the stack trace goes to the log only.
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    body = {"error": "An unexpected error occurred.", "request_id": get_request_id(request)}
    return _error(body, status.HTTP_500_INTERNAL_SERVER_ERROR)


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, global_exception_handler)


__all__ = [
    "app_exception_handler",
    "http_exception_handler",
    "validation_exception_handler",
    "global_exception_handler",
    "install_exception_handlers",
]
