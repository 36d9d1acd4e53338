"""Wire envelope DTOs for adapters."""

from .payloads import (
    AnthropicMessagesPayload,
    ChatCompletionsPayload,
    WireMessage,
    serialize_payload,
)

__all__ = [
    "AnthropicMessagesPayload",
    "ChatCompletionsPayload",
    "WireMessage",
    "serialize_payload",
]
