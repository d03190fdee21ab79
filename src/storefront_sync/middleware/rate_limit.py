"""Per-client token-bucket rate limiting for admin routes (pure ASGI)."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from typing import Any

from storefront_sync.middleware._asgi import Receive, Scope, Send, bearer_token, send_json
from storefront_sync.middleware.auth import EXEMPT_PATHS
from storefront_sync.middleware.correlation import get_request_id


@dataclass
class TokenBucket:
    """Bucket holding up to ``capacity`` tokens, refilled at ``rate`` per second."""

    capacity: int
    rate: float
    tokens: float = field(init=False)
    updated: float = field(init=False)

    def __post_init__(self) -> None:
        self.tokens = float(self.capacity)
        self.updated = time.monotonic()

    def take(self) -> bool:
        now = time.monotonic()
        self.tokens = min(self.capacity, self.tokens + (now - self.updated) * self.rate)
        self.updated = now
        if self.tokens < 1.0:
            return False
        self.tokens -= 1.0
        return True

    def seconds_until_next(self) -> float:
        return max(0.0, (1.0 - self.tokens) / self.rate)


def client_key(scope: Scope) -> str:
    """Bucket key: the bearer key when present, the client address otherwise."""
    token = bearer_token(scope)
    if token:
        return f"key:{token}"
    client = scope.get("client")
    return f"ip:{client[0] if client else 'unknown'}"


class RateLimitMiddleware:
    """Reply 429 with ``Retry-After`` once a client's bucket is empty.

    Parameters
    ----------
    app:
        The wrapped ASGI application.
    per_minute:
        Sustained request rate per client.
    burst:
        Bucket capacity.
    """

    def __init__(self, app: Any, per_minute: int, burst: int) -> None:
        self.app = app
        self.burst = burst
        self.rate = per_minute / 60.0
        self.buckets: dict[str, TokenBucket] = {}

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope.get("path", "/") in EXEMPT_PATHS:
            await self.app(scope, receive, send)
            return

        key = client_key(scope)
        bucket = self.buckets.setdefault(key, TokenBucket(capacity=self.burst, rate=self.rate))
        if bucket.take():
            await self.app(scope, receive, send)
            return

        wait = bucket.seconds_until_next()
        await send_json(
            send,
            429,
            {
                "success": False,
                "error": {
                    "code": "RATE_LIMIT_EXCEEDED",
                    "message": "Too many requests.",
                    "request_id": get_request_id(),
                    "details": {"retry_after_seconds": round(wait, 2)},
                },
            },
            extra_headers=[(b"retry-after", str(max(1, math.ceil(wait))).encode())],
        )
