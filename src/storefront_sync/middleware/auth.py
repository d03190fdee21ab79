"""Admin API-key authentication and the sync-trigger secret guard."""

from __future__ import annotations

import hmac
import logging
from typing import Any

from fastapi import Request

from storefront_sync.exceptions import AuthenticationError
from storefront_sync.middleware._asgi import Receive, Scope, Send, bearer_token, send_json
from storefront_sync.middleware.correlation import get_request_id

logger = logging.getLogger(__name__)

SYNC_TRIGGER_PATH = "/sync-trigger"

EXEMPT_PATHS: set[str] = {
    "/health",
    "/health/ready",
    "/docs",
    "/openapi.json",
    SYNC_TRIGGER_PATH,
}


class AdminAuthMiddleware:
    """Require ``Authorization: Bearer <api_key>`` on every admin route.

    Parameters
    ----------
    app:
        The wrapped ASGI application.
    api_key:
        Expected key. An empty key disables the check (local development).
    """

    def __init__(self, app: Any, api_key: str) -> None:
        self.app = app
        self.api_key = api_key

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if (
            scope["type"] != "http"
            or not self.api_key
            or scope.get("path", "/") in EXEMPT_PATHS
        ):
            await self.app(scope, receive, send)
            return

        if hmac.compare_digest(bearer_token(scope).encode(), self.api_key.encode()):
            await self.app(scope, receive, send)
            return

        await send_json(
            send,
            401,
            {
                "success": False,
                "error": {
                    "code": "AUTHENTICATION",
                    "message": "Invalid or missing API key.",
                    "request_id": get_request_id(),
                    "details": {},
                },
            },
        )


class CronSecretGuard:
    """FastAPI dependency protecting the sync trigger.

    Accepts ``Authorization: Bearer <secret>`` or ``X-Cron-Secret: <secret>``.
    The expected secret is read from ``app.state.settings.cron_secret``; when
    it is unset every request is rejected.
    """

    async def __call__(self, request: Request) -> None:
        expected: str = request.app.state.settings.cron_secret
        auth = request.headers.get("authorization", "")
        provided = auth.replace("Bearer ", "", 1) if auth else ""
        provided = provided or request.headers.get("x-cron-secret", "")

        if not expected or not provided:
            logger.warning("Sync trigger rejected: missing secret")
            raise AuthenticationError("Unauthorized")
        if not hmac.compare_digest(provided.encode(), expected.encode()):
            logger.warning("Sync trigger rejected: secret mismatch")
            raise AuthenticationError("Unauthorized")


require_cron_secret = CronSecretGuard()
