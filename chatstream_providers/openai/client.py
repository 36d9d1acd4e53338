"""OpenAIProvider adapter.

Streams completions from the OpenAI chat completions API over raw HTTP
server-sent events (``POST {base}/v1/chat/completions`` with ``stream: true``).
The system prompt is inlined as the leading ``system`` message. Fragments
come from ``choices[*].delta.content``.

``list_models()`` returns the built-in catalog, and
``list_models(refresh=True)`` queries ``GET {base}/v1/models``.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

import httpx

from ..base.cancellation import CancellationToken
from ..base.http import PreparedRequest
from ..base.models import ModelInfo
from ..base.openai_style import parse_model_listing, translate_chat_completion_chunk
from ..base.provider_session import ProviderSession
from ..base.streaming import CompletionStream
from ..base.timeouts import TimeoutConfig
from ..config import get_provider_config
from ..config.catalog import catalog_models
from ..config.defaults import OPENAI_CHAT_PATH, OPENAI_DEFAULT_MODEL, OPENAI_MODELS_PATH
from .helpers import build_headers, build_payload


class OpenAIProvider:
    """Adapter for the OpenAI chat completions API supporting streamed completions."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeouts: Optional[TimeoutConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        cfg = get_provider_config("openai")
        self._model = model or cfg.get("model") or OPENAI_DEFAULT_MODEL
        self._session = ProviderSession(
            "openai",
            api_key=api_key if api_key is not None else cfg.get("api_key"),
            base_url=base_url or cfg.get("base_url"),
            timeouts=timeouts,
            transport=transport,
        )

    @property
    def provider_name(self) -> str:
        return "openai"

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
        url = session.endpoint(OPENAI_CHAT_PATH, model)
        body = session.serialize(lambda: build_payload(conversation, model, system_prompt), model)
        request = PreparedRequest(url=url, body=body, headers=build_headers(api_key))
        return session.open_stream(
            request,
            translate_chat_completion_chunk,
            model=model,
            cancellation_token=cancellation_token,
        )

    async def list_models(self, refresh: bool = False) -> List[ModelInfo]:
        """Return known models; ``refresh=True`` queries the listing endpoint."""
        if not refresh:
            return catalog_models("openai")
        api_key = self._session.require_credential()
        data = await self._session.get_json(OPENAI_MODELS_PATH, build_headers(api_key, streaming=False))
        return parse_model_listing(data, "openai")

    async def aclose(self) -> None:
        await self._session.aclose()

    async def __aenter__(self) -> "OpenAIProvider":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


__all__ = ["OpenAIProvider"]
