"""Provider Factory utilities.

Purpose
-------
Centralize creation of adapter instances implementing
``StreamingChatProvider``. Adapters are imported lazily using ``importlib``
so that importing the factory never pulls in every adapter module.

Timeout and fallback semantics
------------------------------
- No timeouts are introduced here. The factory performs no retries or
    fallbacks; it either returns an instance or raises a clear error.

Scope
-----
The provider set is closed: ``openai``, ``anthropic`` and ``gateway``.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Tuple, Type

from .models import ProviderId


class UnknownProviderError(Exception):
    """Raised when a provider cannot be resolved or initialized.

    Failure modes include:
    - The provider name is not registered in the factory mapping.
    - The provider module cannot be imported or the adapter class is missing.
    - The adapter constructor rejected its arguments.
    """


def create_provider(provider: "ProviderId | str", **kwargs: Any) -> Any:
    """Compatibility helper that delegates to :meth:`ProviderFactory.create`."""
    return ProviderFactory.create(provider, **kwargs)


class ProviderFactory:
    """Create provider adapters based on a canonical name (e.g., ``"openai"``)."""

    # Map provider identities to import paths and class names
    _PROVIDERS: Dict[ProviderId, Dict[str, str]] = {
        ProviderId.OPENAI: {"module": "chatstream_providers.openai.client", "class": "OpenAIProvider"},
        ProviderId.ANTHROPIC: {"module": "chatstream_providers.anthropic.client", "class": "AnthropicProvider"},
        ProviderId.GATEWAY: {"module": "chatstream_providers.gateway.client", "class": "GatewayProvider"},
    }

    @classmethod
    def create(cls, provider: "ProviderId | str", **kwargs: Any) -> Any:
        """Create a provider adapter instance.

        Parameters
        ----------
        provider:
            Provider identity or case-insensitive name (e.g., ``"openai"``).
        **kwargs:
            Adapter constructor kwargs (``api_key``, ``model``, ``base_url``,
            ``timeouts``, ``transport``; ``auth_scheme`` for the gateway).

        Raises
        ------
        UnknownProviderError
            If the provider is unknown, the adapter module fails to import,
            the adapter class is missing, or the constructor rejects the
            arguments.
        """
        try:
            pid = ProviderId.parse(provider)
        except ValueError as exc:
            raise UnknownProviderError(f"Unknown provider '{provider}'") from exc
        spec = cls._PROVIDERS[pid]
        module_path, class_name = spec["module"], spec["class"]

        try:
            mod = import_module(module_path)
        except ImportError as exc:  # pragma: no cover - import failure path
            raise UnknownProviderError(
                f"Failed to import module '{module_path}' for provider '{pid.value}': {exc}"
            ) from exc

        try:
            klass: Type = getattr(mod, class_name)
        except AttributeError as exc:  # pragma: no cover - registry typo
            raise UnknownProviderError(
                f"Adapter class '{class_name}' not found in '{module_path}' for provider '{pid.value}'"
            ) from exc

        try:
            return klass(**kwargs)
        except (TypeError, ValueError) as exc:
            raise UnknownProviderError(
                f"Invalid arguments for '{pid.value}' adapter constructor: {exc}"
            ) from exc

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        """Return the supported canonical provider names in deterministic order."""
        return tuple(pid.value for pid in cls._PROVIDERS)


__all__ = ["ProviderFactory", "UnknownProviderError", "create_provider"]
