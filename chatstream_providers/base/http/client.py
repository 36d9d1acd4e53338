"""Per-adapter HTTP transport construction.

Purpose:
    Every adapter owns exactly one ``httpx.AsyncClient`` for its lifetime.
    The client is a connection pool with keep-alive, so concurrent streamed
    calls from one adapter share the pool while adapters never share clients.
    Timeouts derive exclusively from :func:`get_timeout_config` unless a
    ``TimeoutConfig`` is passed explicitly.

External dependencies:
    - ``httpx`` for the asynchronous HTTP client and URL parsing.

Lifecycle & cleanup:
    - The owning adapter closes its client via ``aclose()``; nothing here is
      cached at module level.
    - Tests inject an ``httpx.MockTransport`` through ``transport``.
"""

from __future__ import annotations

from typing import Optional

import httpx

from ..timeouts import TimeoutConfig, build_httpx_timeout, get_timeout_config

# Connection pool bounds for one adapter
MAX_CONNECTIONS = 20
MAX_KEEPALIVE_CONNECTIONS = 10
KEEPALIVE_EXPIRY_SECONDS = 30.0


def create_async_client(
    *,
    timeouts: Optional[TimeoutConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Return a new pooled ``httpx.AsyncClient`` for one adapter.

    Parameters:
        timeouts: Optional explicit timeout configuration; defaults to the
            process configuration from :func:`get_timeout_config`.
        transport: Optional transport override (tests use
            ``httpx.MockTransport``).

    Returns:
        A client exclusively owned by the caller.
    """
    cfg = timeouts or get_timeout_config()
    limits = httpx.Limits(
        max_connections=MAX_CONNECTIONS,
        max_keepalive_connections=MAX_KEEPALIVE_CONNECTIONS,
        keepalive_expiry=KEEPALIVE_EXPIRY_SECONDS,
    )
    return httpx.AsyncClient(timeout=build_httpx_timeout(cfg), limits=limits, transport=transport)


def build_endpoint(base_url: Optional[str], path: str) -> Optional[httpx.URL]:
    """Join ``base_url`` and ``path`` into an absolute http(s) URL.

    Returns ``None`` when the result is not a usable absolute URL (missing or
    unsupported scheme, missing host, or unparsable input).
    """
    if not base_url or not isinstance(base_url, str):
        return None
    raw = base_url.strip().rstrip("/") + "/" + path.lstrip("/")
    try:
        url = httpx.URL(raw)
    except (httpx.InvalidURL, TypeError, ValueError):
        return None
    if url.scheme not in ("http", "https") or not url.host:
        return None
    return url


__all__ = [
    "create_async_client",
    "build_endpoint",
    "MAX_CONNECTIONS",
    "MAX_KEEPALIVE_CONNECTIONS",
]
