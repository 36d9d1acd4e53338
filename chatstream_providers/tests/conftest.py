"""Pytest configuration for the chatstream test suite.

Isolates every test from the developer's environment (credentials, config
file, ``.env``) and provides helpers for simulating provider servers with
``httpx.MockTransport``.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Iterable, List, Union

import httpx
import pytest

from chatstream_providers.config import reset_config_cache

_ISOLATED_ENV = (
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "OPENAI_BASE_URL",
    "ANTHROPIC_API_KEY",
    "ANTHROPIC_MODEL",
    "ANTHROPIC_BASE_URL",
    "GATEWAY_API_KEY",
    "GATEWAY_MODEL",
    "GATEWAY_BASE_URL",
    "GATEWAY_AUTH_SCHEME",
    "GITHUB_TOKEN",
    "CHATSTREAM_CONFIG_FILE",
    "CHATSTREAM_LOG_LEVEL",
    "CHATSTREAM_TIMEOUT_REQUEST_SECONDS",
    "CHATSTREAM_TIMEOUT_RESOURCE_SECONDS",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    """Clear provider env vars and point ``.env`` loading at a missing file."""
    for name in _ISOLATED_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "missing.env"))
    reset_config_cache()
    yield
    reset_config_cache()


class RecordingTransport(httpx.MockTransport):
    """``MockTransport`` that keeps every request it receives."""

    def __init__(self, responder: Callable[[httpx.Request], Any]) -> None:
        self.requests: List[httpx.Request] = []

        async def handler(request: httpx.Request):
            self.requests.append(request)
            result = responder(request)
            if not isinstance(result, httpx.Response):
                result = await result
            return result

        super().__init__(handler)

    @property
    def last_json(self) -> Any:
        return json.loads(self.requests[-1].content)


Frame = Union[dict, str]


def _sse(frames: Iterable[Frame]) -> bytes:
    lines = []
    for frame in frames:
        if isinstance(frame, dict):
            lines.append("data: " + json.dumps(frame))
        else:
            lines.append(frame)
        lines.append("")
    return ("\n".join(lines) + "\n").encode("utf-8")


@pytest.fixture()
def sse_body() -> Callable[..., bytes]:
    """Build an event-stream body; dict frames become ``data:`` lines, strings pass through."""

    def build(*frames: Frame) -> bytes:
        return _sse(frames)

    return build


@pytest.fixture()
def transport_for() -> Callable[..., RecordingTransport]:
    """Return a factory for recording transports.

    ``transport_for(body)`` answers every request with a 200 event stream;
    ``transport_for(responder=fn)`` delegates to ``fn(request)``.
    """

    def build(body: bytes | None = None, *, status: int = 200, responder=None) -> RecordingTransport:
        if responder is None:

            def responder(_request: httpx.Request) -> httpx.Response:
                return httpx.Response(
                    status,
                    content=body or b"",
                    headers={"content-type": "text/event-stream"},
                )

        return RecordingTransport(responder)

    return build


@pytest.fixture()
def log_events():
    """Capture structured events emitted through the ``chatstream`` logger."""
    records: List[logging.LogRecord] = []
    handler = logging.Handler()
    handler.emit = lambda record: records.append(record)  # type: ignore[assignment]
    logger = logging.getLogger("chatstream")
    logger.addHandler(handler)

    class _Events(list):
        def named(self, event: str) -> list:
            return [e for e in self.refresh() if e.get("event") == event]

        def refresh(self) -> "_Events":
            self[:] = []
            for record in records:
                try:
                    payload = json.loads(record.getMessage())
                except ValueError:
                    continue
                payload["_level"] = record.levelname
                self.append(payload)
            return self

        @property
        def raw_text(self) -> str:
            return "\n".join(r.getMessage() for r in records)

    try:
        yield _Events()
    finally:
        logger.removeHandler(handler)
