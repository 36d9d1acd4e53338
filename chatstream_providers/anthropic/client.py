"""AnthropicProvider adapter.

Streams completions from the Anthropic Messages API over raw HTTP server-sent
events (``POST {base}/v1/messages`` with ``stream: true``).

Key behaviors:
* The credential is captured once per call. An empty credential fails with
  ``invalid_credential`` before any request is built.
* The system prompt travels in the top-level ``system`` field, never as a
  message.
* ``list_models()`` returns the built-in catalog, and ``list_models(refresh=True)``
  queries ``GET {base}/v1/models``.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

import httpx

from ..base.cancellation import CancellationToken
from ..base.http import PreparedRequest
from ..base.models import ModelInfo
from ..base.provider_session import ProviderSession
from ..base.streaming import CompletionStream
from ..base.timeouts import TimeoutConfig
from ..config import get_provider_config
from ..config.catalog import catalog_models
from ..config.defaults import (
    ANTHROPIC_DEFAULT_MODEL,
    ANTHROPIC_MESSAGES_PATH,
    ANTHROPIC_MODELS_PATH,
)
from .helpers import build_headers, build_messages_payload, parse_models, translate_event


class AnthropicProvider:
    """Adapter for the Anthropic Messages API supporting streamed completions."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeouts: Optional[TimeoutConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        cfg = get_provider_config("anthropic")
        self._model = model or cfg.get("model") or ANTHROPIC_DEFAULT_MODEL
        self._session = ProviderSession(
            "anthropic",
            api_key=api_key if api_key is not None else cfg.get("api_key"),
            base_url=base_url or cfg.get("base_url"),
            timeouts=timeouts,
            transport=transport,
        )

    @property
    def provider_name(self) -> str:
        return "anthropic"

    @property
    def default_model(self) -> str:
        return self._model

    @property
    def has_credential(self) -> bool:
        return bool(self._session.credential)

    def update_credential(self, new_value: str) -> None:
        """Replace the API key for subsequent calls; in-flight calls are unaffected."""
        self._session.update_credential(new_value)

    def stream_completion(
        self,
        conversation: Iterable[Any],
        model: str,
        system_prompt: Optional[str] = None,
        *,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> CompletionStream:
        """Build the request and return a lazy stream of text fragments.

        Raises:
            ProviderError: ``invalid_credential``, ``invalid_url`` or
                ``invalid_request`` before any network I/O.
        """
        session = self._session
        api_key = session.require_credential(model)
        url = session.endpoint(ANTHROPIC_MESSAGES_PATH, model)
        body = session.serialize(lambda: build_messages_payload(conversation, model, system_prompt), model)
        request = PreparedRequest(url=url, body=body, headers=build_headers(api_key))
        return session.open_stream(request, translate_event, model=model, cancellation_token=cancellation_token)

    async def list_models(self, refresh: bool = False) -> List[ModelInfo]:
        """Return known models; ``refresh=True`` queries the listing endpoint."""
        if not refresh:
            return catalog_models("anthropic")
        api_key = self._session.require_credential()
        data = await self._session.get_json(ANTHROPIC_MODELS_PATH, build_headers(api_key, streaming=False))
        return parse_models(data)

    async def aclose(self) -> None:
        await self._session.aclose()

    async def __aenter__(self) -> "AnthropicProvider":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


__all__ = ["AnthropicProvider"]
