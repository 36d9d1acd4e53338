"""chatstream_providers package

Unified streaming client for chat completion APIs.

Purpose:
    Provide a minimal, stable API for streaming assistant text from an
    OpenAI-style API, an Anthropic-style API or an OpenAI-compatible gateway
    through one contract. Callers either use an adapter directly
    (``create('anthropic').stream_completion(...)``) or route through
    :class:`ChatStreamFacade`.

Public API (re-exported):
    - Version: ``__version__``
    - Errors: :class:`ProviderError`, :class:`ErrorCode`
    - Domain: :class:`Message`, :class:`ProviderId`, :class:`ModelInfo`
    - Streaming: :class:`CompletionStream`, :func:`collect_text`,
      :class:`CancellationToken`
    - Factory: :func:`create`, :class:`ProviderFactory`
    - Facade: :class:`ChatStreamFacade`, :class:`ProviderSettings`
"""

from typing import Any

from .base.cancellation import CancellationToken
from .base.errors import ErrorCode, ProviderError
from .base.factory import ProviderFactory, UnknownProviderError
from .base.interfaces import ModelListingProvider, StreamingChatProvider
from .base.models import Message, ModelInfo, ProviderId
from .base.redaction import redact
from .base.streaming import CompletionStream, collect_text
from .service import ChatStreamFacade, ProviderSettings

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Errors
    "ProviderError",
    "ErrorCode",
    "UnknownProviderError",
    # Domain
    "Message",
    "ModelInfo",
    "ProviderId",
    # Streaming
    "CancellationToken",
    "CompletionStream",
    "collect_text",
    "redact",
    # Core helpers
    "create",
    "ProviderFactory",
    "StreamingChatProvider",
    "ModelListingProvider",
    # Facade
    "ChatStreamFacade",
    "ProviderSettings",
]


def create(provider_name: "ProviderId | str", **kwargs: Any) -> StreamingChatProvider:
    """Instantiate a provider adapter via :class:`ProviderFactory`.

    Parameters
    ----------
    provider_name:
        Canonical provider name (``"openai"``, ``"anthropic"`` or ``"gateway"``).
    **kwargs:
        Adapter constructor keyword arguments.

    Raises
    ------
    UnknownProviderError
        If the name is not a supported provider or the constructor rejects
        the arguments.
    """
    return ProviderFactory.create(provider_name, **kwargs)
