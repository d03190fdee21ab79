"""Exception-to-response mapping.

:func:`register_error_handlers` turns :class:`StorefrontSyncError` subclasses,
HTTP exceptions and request validation failures into the JSON envelope::

    {"success": false, "error": {"code", "message", "request_id", "details"}}

:class:`CatchAllErrorMiddleware` covers anything that escapes the routers.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException
from starlette.responses import JSONResponse

from storefront_sync.exceptions import (
    AdapterError,
    AuthenticationError,
    ConfigValidationError,
    NotFoundError,
    RequestValidationFailed,
    StorefrontSyncError,
    SyncBatchError,
)
from storefront_sync.middleware._asgi import Receive, Scope, Send, send_json
from storefront_sync.middleware.correlation import get_request_id

if TYPE_CHECKING:
    from fastapi import FastAPI
    from starlette.requests import Request

logger = logging.getLogger(__name__)

_STATUS_MAP: dict[type[StorefrontSyncError], int] = {
    ConfigValidationError: 400,
    RequestValidationFailed: 400,
    NotFoundError: 404,
    AuthenticationError: 401,
    AdapterError: 502,
    SyncBatchError: 500,
}

_CAMEL_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def error_code(cls: type[Exception]) -> str:
    """``NotFoundError`` -> ``NOT_FOUND``."""
    name = cls.__name__.removesuffix("Error")
    return _CAMEL_RE.sub("_", name).upper()


def error_body(
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    return {
        "success": False,
        "error": {
            "code": code,
            "message": message,
            "request_id": get_request_id(),
            "details": details or {},
        },
    }


class CatchAllErrorMiddleware:
    """Outermost guard returning a 500 envelope for unhandled exceptions."""

    def __init__(self, app: Any) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return
        try:
            await self.app(scope, receive, send)
        except Exception:
            logger.exception("Unhandled exception in ASGI application")
            await send_json(
                send,
                500,
                error_body("INTERNAL_SERVER_ERROR", "An unexpected error occurred."),
            )


# ======================================================================
# FastAPI exception handlers
# ======================================================================


async def handle_service_error(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, StorefrontSyncError)
    status = next(
        (_STATUS_MAP[cls] for cls in type(exc).__mro__ if cls in _STATUS_MAP),
        500,
    )
    if status >= 500:
        logger.error("%s: %s", type(exc).__name__, exc)
    return JSONResponse(
        status_code=status,
        content=error_body(error_code(type(exc)), str(exc), exc.details),
    )


async def handle_http_exception(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, HTTPException)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body("HTTP_ERROR", str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def handle_validation_error(request: Request, exc: Exception) -> JSONResponse:
    """Malformed request bodies and query params are client errors (400)."""
    assert isinstance(exc, RequestValidationError)
    return JSONResponse(
        status_code=400,
        content=error_body(
            "VALIDATION_ERROR",
            "Request validation failed.",
            {"errors": jsonable_encoder(exc.errors())},
        ),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontSyncError, handle_service_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
