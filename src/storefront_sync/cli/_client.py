"""Async HTTP client used by the CLI commands."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, TypeVar

import httpx

if TYPE_CHECKING:
    from collections.abc import Coroutine


class CliApiError(Exception):
    """The server could not be reached or answered with an error."""


class ApiClient:
    """Minimal wrapper over :class:`httpx.AsyncClient` for a running server.

    Parameters
    ----------
    base_url:
        Server root, e.g. ``http://localhost:9100``.
    headers:
        Sent with every request (bearer key or cron secret).
    timeout:
        Per-request timeout in seconds.
    """

    def __init__(self, base_url: str, headers: dict[str, str] | None = None, timeout: float = 30.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._headers = headers or {}
        self._timeout = timeout

    async def request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                headers=self._headers,
                timeout=httpx.Timeout(self._timeout),
            ) as client:
                response = await client.request(method, path, **kwargs)
        except httpx.ConnectError as exc:
            msg = f"Cannot connect to {self._base_url}"
            raise CliApiError(msg) from exc
        except httpx.TimeoutException as exc:
            msg = f"Request timed out after {self._timeout}s"
            raise CliApiError(msg) from exc

        if response.status_code == 401:
            msg = "Unauthorized. Check the API key or cron secret."
            raise CliApiError(msg)
        if response.status_code >= 400:
            msg = f"Server error {response.status_code}: {response.text}"
            raise CliApiError(msg)
        return response.json()


T = TypeVar("T")


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run *coro* to completion from a synchronous click command."""
    return asyncio.run(coro)
