"""GatewayProvider adapter for OpenAI-compatible inference gateways.

Targets ``https://models.inference.ai.azure.com`` (GitHub Models / Azure AI
inference) by default. The endpoint is ``POST {base}/chat/completions``, using
the same envelope and delta path as the OpenAI-style adapter with a smaller
``max_tokens`` ceiling and no temperature override.

Credential header:
    ``auth_scheme="bearer"`` (default) sends ``Authorization: Bearer <key>``.
    ``auth_scheme="api-key"`` sends the ``api-key`` header expected by Azure
    deployments. The scheme comes from the constructor, then
    ``GATEWAY_AUTH_SCHEME``, then the config file.

``list_models()`` returns the built-in catalog, and
``list_models(refresh=True)`` queries ``GET {base}/models``.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import httpx

from ..base.cancellation import CancellationToken
from ..base.constants import EVENT_STREAM_MEDIA_TYPE, GATEWAY_MAX_TOKENS, JSON_MEDIA_TYPE
from ..base.dto.payloads import ChatCompletionsPayload
from ..base.http import PreparedRequest
from ..base.models import ModelInfo
from ..base.openai_style import (
    build_chat_completions_payload,
    parse_model_listing,
    translate_chat_completion_chunk,
)
from ..base.provider_session import ProviderSession
from ..base.streaming import CompletionStream
from ..base.timeouts import TimeoutConfig
from ..config import get_provider_config
from ..config.catalog import catalog_models
from ..config.defaults import (
    GATEWAY_AUTH_SCHEMES,
    GATEWAY_CHAT_PATH,
    GATEWAY_DEFAULT_AUTH_SCHEME,
    GATEWAY_DEFAULT_MODEL,
    GATEWAY_MODELS_PATH,
)


def build_payload(
    conversation: Iterable[Any],
    model: str,
    system_prompt: Optional[str] = None,
) -> ChatCompletionsPayload:
    """Return the streaming envelope with the gateway token ceiling."""
    return build_chat_completions_payload(conversation, model, system_prompt, max_tokens=GATEWAY_MAX_TOKENS)


def build_headers(api_key: str, auth_scheme: str, *, streaming: bool = True) -> Dict[str, str]:
    """Return request headers for the configured credential scheme."""
    if auth_scheme == "api-key":
        headers = {"api-key": api_key}
    else:
        headers = {"authorization": f"Bearer {api_key}"}
    if streaming:
        headers["content-type"] = JSON_MEDIA_TYPE
        headers["accept"] = EVENT_STREAM_MEDIA_TYPE
    else:
        headers["accept"] = JSON_MEDIA_TYPE
    return headers


class GatewayProvider:
    """Adapter for an OpenAI-compatible gateway supporting streamed completions."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        auth_scheme: Optional[str] = None,
        timeouts: Optional[TimeoutConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        cfg = get_provider_config("gateway")
        scheme = (auth_scheme or cfg.get("auth_scheme") or GATEWAY_DEFAULT_AUTH_SCHEME).strip().lower()
        if scheme not in GATEWAY_AUTH_SCHEMES:
            raise ValueError(f"unsupported gateway auth scheme {scheme!r}; expected one of {GATEWAY_AUTH_SCHEMES}")
        self._auth_scheme = scheme
        self._model = model or cfg.get("model") or GATEWAY_DEFAULT_MODEL
        self._session = ProviderSession(
            "gateway",
            api_key=api_key if api_key is not None else cfg.get("api_key"),
            base_url=base_url or cfg.get("base_url"),
            timeouts=timeouts,
            transport=transport,
        )

    @property
    def provider_name(self) -> str:
        return "gateway"

    @property
    def default_model(self) -> str:
        return self._model

    @property
    def auth_scheme(self) -> str:
        return self._auth_scheme

    @property
    def has_credential(self) -> bool:
        return bool(self._session.credential)

    def update_credential(self, new_value: str) -> None:
        """Replace the token for subsequent calls; in-flight calls are unaffected."""
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
        url = session.endpoint(GATEWAY_CHAT_PATH, model)
        body = session.serialize(lambda: build_payload(conversation, model, system_prompt), model)
        request = PreparedRequest(url=url, body=body, headers=build_headers(api_key, self._auth_scheme))
        return session.open_stream(
            request,
            translate_chat_completion_chunk,
            model=model,
            cancellation_token=cancellation_token,
        )

    async def list_models(self, refresh: bool = False) -> List[ModelInfo]:
        """Return known models; ``refresh=True`` queries the listing endpoint."""
        if not refresh:
            return catalog_models("gateway")
        api_key = self._session.require_credential()
        headers = build_headers(api_key, self._auth_scheme, streaming=False)
        data = await self._session.get_json(GATEWAY_MODELS_PATH, headers)
        return parse_model_listing(data, "gateway")

    async def aclose(self) -> None:
        await self._session.aclose()

    async def __aenter__(self) -> "GatewayProvider":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


__all__ = ["GatewayProvider", "build_headers", "build_payload"]
