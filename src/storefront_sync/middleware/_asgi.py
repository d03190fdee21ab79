"""Small helpers shared by the pure ASGI middlewares."""

from __future__ import annotations

import json
from typing import Any

Scope = dict[str, Any]
Receive = Any
Send = Any


def header_value(scope: Scope, name: bytes) -> str | None:
    """Return the first raw header called *name* (lower-case) or ``None``."""
    for key, val in scope.get("headers", []):
        if key.lower() == name:
            return val.decode("latin-1")
    return None


def bearer_token(scope: Scope) -> str:
    auth = header_value(scope, b"authorization")
    if auth and auth.lower().startswith("bearer "):
        return auth[7:]
    return ""


async def send_json(
    send: Send,
    status: int,
    payload: dict[str, Any],
    extra_headers: list[tuple[bytes, bytes]] | None = None,
) -> None:
    body = json.dumps(payload).encode()
    headers = [
        (b"content-type", b"application/json"),
        (b"content-length", str(len(body)).encode()),
        *(extra_headers or []),
    ]
    await send({"type": "http.response.start", "status": status, "headers": headers})
    await send({"type": "http.response.body", "body": body})
