"""Shared HTTP client for the notification backend."""

from __future__ import annotations

from typing import Any

import httpx

from notifier_portal.core.config import Settings, get_settings

_http_client: httpx.AsyncClient | None = None


def build_http_client(settings: Settings, **kwargs: Any) -> httpx.AsyncClient:
    """Create an HTTP client bound to the backend base URL."""
    return httpx.AsyncClient(
        base_url=settings.api_base_url,
        timeout=settings.request_timeout_seconds,
        headers={"Accept": "application/json"},
        **kwargs,
    )


async def get_http_client() -> httpx.AsyncClient:
    """FastAPI dependency that provides the process-wide backend client."""
    global _http_client  # noqa: PLW0603
    if _http_client is None or _http_client.is_closed:
        _http_client = build_http_client(get_settings())
    return _http_client


async def close_http_client() -> None:
    """Close the backend client and its connection pool."""
    global _http_client  # noqa: PLW0603
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None
