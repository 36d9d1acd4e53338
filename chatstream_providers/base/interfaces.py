"""
Provider-agnostic interfaces (Protocols) for the adapter layer.

Re-exports Protocols split into single-class modules under
``chatstream_providers.base.interfaces_parts``.
"""

from __future__ import annotations

from .interfaces_parts.model_listing_provider import ModelListingProvider
from .interfaces_parts.streaming_chat_provider import StreamingChatProvider

__all__ = [
    "ModelListingProvider",
    "StreamingChatProvider",
]
