"""Unified streaming facade.

``ChatStreamFacade`` routes streamed completion requests to the adapter of
the currently selected provider. It holds only the adapter set and the
active selection; all protocol work lives in the adapters.

Semantics
---------
- Adapters are created lazily through :class:`ProviderFactory` the first
  time a provider is used, then reused (each owns its connection pool).
- No retries and no caching: errors from the adapter surface unchanged.
- ``apply_settings`` selects the provider and pushes every non-empty
  credential. ``model`` and ``system_message`` in the snapshot stay
  caller-side preferences and are not stored here.
"""

from __future__ import annotations

import contextlib
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..base.cancellation import CancellationToken
from ..base.factory import ProviderFactory
from ..base.interfaces import StreamingChatProvider
from ..base.logging import LogContext, get_logger, log_event
from ..base.models import ModelInfo, ProviderId
from ..base.streaming import CompletionStream
from ..config.defaults import DEFAULT_PROVIDER
from .settings import ProviderSettings


class ChatStreamFacade:
    """Single entry point over the OpenAI-style, Anthropic-style and gateway adapters.

    Parameters
    ----------
    provider:
        Initially selected provider (defaults to ``openai``).
    adapters:
        Pre-built adapters keyed by provider; missing ones are created on
        demand.
    adapter_options:
        Constructor kwargs per provider forwarded to the factory (for
        example ``{"gateway": {"auth_scheme": "api-key"}}``).
    """

    def __init__(
        self,
        provider: "ProviderId | str" = DEFAULT_PROVIDER,
        *,
        adapters: Optional[Mapping["ProviderId | str", StreamingChatProvider]] = None,
        adapter_options: Optional[Mapping["ProviderId | str", Mapping[str, Any]]] = None,
    ) -> None:
        self._active = ProviderId.parse(provider)
        self._adapters: Dict[ProviderId, StreamingChatProvider] = {
            ProviderId.parse(k): v for k, v in (adapters or {}).items()
        }
        self._options: Dict[ProviderId, Dict[str, Any]] = {
            ProviderId.parse(k): dict(v) for k, v in (adapter_options or {}).items()
        }
        self._logger: logging.Logger = get_logger("chatstream.facade")

    # Selection -------------------------------------------------------------
    @property
    def active_provider(self) -> ProviderId:
        return self._active

    def select_provider(self, provider: "ProviderId | str") -> ProviderId:
        """Route subsequent requests to ``provider``; in-flight streams are unaffected."""
        pid = ProviderId.parse(provider)
        if pid is not self._active:
            log_event(
                self._logger,
                "provider.selected",
                LogContext(provider=pid.value),
                previous=self._active.value,
            )
        self._active = pid
        return pid

    def adapter(self, provider: "ProviderId | str | None" = None) -> StreamingChatProvider:
        """Return (creating on first use) the adapter for ``provider`` or the active one."""
        pid = self._active if provider is None else ProviderId.parse(provider)
        existing = self._adapters.get(pid)
        if existing is not None:
            return existing
        if pid is ProviderId.OPENAI:
            adapter = ProviderFactory.create(ProviderId.OPENAI, **self._options.get(pid, {}))
        elif pid is ProviderId.ANTHROPIC:
            adapter = ProviderFactory.create(ProviderId.ANTHROPIC, **self._options.get(pid, {}))
        elif pid is ProviderId.GATEWAY:
            adapter = ProviderFactory.create(ProviderId.GATEWAY, **self._options.get(pid, {}))
        else:  # pragma: no cover - ProviderId is closed
            raise ValueError(f"unsupported provider {pid!r}")
        self._adapters[pid] = adapter
        return adapter

    # Streaming -------------------------------------------------------------
    def stream_completion(
        self,
        conversation: Iterable[Any],
        model: Optional[str] = None,
        system_prompt: Optional[str] = None,
        *,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> CompletionStream:
        """Start a streamed completion on the active provider.

        ``model=None`` uses the adapter's default model. Validation errors
        raise ``ProviderError`` synchronously; everything else surfaces from
        the returned stream.
        """
        target = self.adapter()
        return target.stream_completion(
            conversation,
            model or target.default_model,
            system_prompt,
            cancellation_token=cancellation_token,
        )

    # Credentials and settings ---------------------------------------------
    def update_credential(self, new_value: str, provider: "ProviderId | str | None" = None) -> None:
        """Replace the credential of ``provider`` (default: active provider)."""
        self.adapter(provider).update_credential(new_value)

    def apply_settings(self, settings: ProviderSettings) -> None:
        """Select ``settings.provider`` and push every credential it carries.

        An empty credential replaces the stored one, so the next call to that
        provider fails with ``invalid_credential``. Providers absent from
        ``settings.credentials`` keep their current credential.
        """
        for pid, value in settings.credentials.items():
            self.update_credential(value, pid)
        self.select_provider(settings.provider)

    # Models ----------------------------------------------------------------
    async def list_models(
        self,
        provider: "ProviderId | str | None" = None,
        refresh: bool = False,
    ) -> List[ModelInfo]:
        """Return the models for ``provider`` (default: active provider)."""
        target = self.adapter(provider)
        models = await target.list_models(refresh=refresh)
        log_event(
            self._logger,
            "models.list",
            LogContext(provider=target.provider_name),
            count=len(models),
            refresh=refresh,
        )
        return models

    # Lifecycle -------------------------------------------------------------
    async def aclose(self) -> None:
        """Close every adapter created or injected so far.

        A failing ``aclose`` does not stop the others; its error is re-raised
        after all adapters were closed.
        """
        adapters, self._adapters = list(self._adapters.values()), {}
        async with contextlib.AsyncExitStack() as stack:
            for item in adapters:
                stack.push_async_callback(item.aclose)

    async def __aenter__(self) -> "ChatStreamFacade":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


__all__ = ["ChatStreamFacade"]
