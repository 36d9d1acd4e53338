"""Unified timeout configuration for streaming adapters.

Two bounds apply to every streamed completion:

request_timeout_seconds
    Bounded wait for connect and for each read, first byte included. A
    provider that hangs before sending headers, or stalls mid-stream, fails
    after this long. Default 30 seconds.

resource_timeout_seconds
    Bounded wait for the whole call, from connect to the last fragment. It
    defends against runaway generations. Default 300 seconds.

Either bound elapsing fails the stream with a generic ``network`` error, never
a provider error.

get_timeout_config()
    Returns a process-cached configuration. Environment overrides are parsed
    on first use, and again whenever the variables change:
        CHATSTREAM_TIMEOUT_REQUEST_SECONDS
        CHATSTREAM_TIMEOUT_RESOURCE_SECONDS
"""
from __future__ import annotations

from dataclasses import dataclass
import os

import httpx


REQUEST_TIMEOUT_ENV = "CHATSTREAM_TIMEOUT_REQUEST_SECONDS"
RESOURCE_TIMEOUT_ENV = "CHATSTREAM_TIMEOUT_RESOURCE_SECONDS"


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        request_timeout_seconds: Connect / first byte / idle read bound.
        resource_timeout_seconds: Total duration bound for one streamed call.
    """

    request_timeout_seconds: float = 30.0
    resource_timeout_seconds: float = 300.0


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Parse a positive float from the environment, falling back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig` instance."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join([os.getenv(REQUEST_TIMEOUT_ENV, ""), os.getenv(RESOURCE_TIMEOUT_ENV, "")])
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    _CACHED = TimeoutConfig(
        request_timeout_seconds=_parse_env_float(REQUEST_TIMEOUT_ENV, 30.0),
        resource_timeout_seconds=_parse_env_float(RESOURCE_TIMEOUT_ENV, 300.0),
    )
    _ENV_GUARD = guard
    return _CACHED


def build_httpx_timeout(cfg: TimeoutConfig) -> httpx.Timeout:
    """Translate a :class:`TimeoutConfig` into transport-level ``httpx.Timeout``.

    The request bound covers connect, read, write and pool acquisition. The
    resource bound is enforced around the whole call by the streaming adapter.
    """
    return httpx.Timeout(cfg.request_timeout_seconds)


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
    "build_httpx_timeout",
    "REQUEST_TIMEOUT_ENV",
    "RESOURCE_TIMEOUT_ENV",
]
