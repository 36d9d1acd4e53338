"""
Pydantic request envelopes for the supported wire protocols.

Purpose
-------
Adapters build one of these models from a normalized conversation and
serialize it with :func:`serialize_payload` before any network I/O. A
validation or serialization failure is a local error and adapters report it
as ``invalid_request``. It never counts as a network failure.

External dependencies: Pydantic only. No timeouts, no I/O.

Design
------
- ``AnthropicMessagesPayload`` keeps the system prompt outside the message
  list (top-level ``system``), omitted entirely when empty.
- ``ChatCompletionsPayload`` serves both the OpenAI-style API and the
  OpenAI-compatible gateway. The system prompt travels as a leading
  ``system`` message, and optional sampling fields are omitted when unset.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import ANTHROPIC_MAX_TOKENS


class WireMessage(BaseModel):
    """A single ``{"role", "content"}`` entry of a request envelope."""

    model_config = ConfigDict(extra="forbid")

    role: str = Field(min_length=1)
    content: str


class AnthropicMessagesPayload(BaseModel):
    """Body of ``POST /v1/messages`` with streaming enabled.

    Rules:
        - ``messages`` roles are ``user`` or ``assistant`` only.
        - ``system`` is serialized only when it is a non-empty string.
    """

    model_config = ConfigDict(extra="forbid")

    model: str
    messages: List[WireMessage]
    stream: bool = True
    max_tokens: int = Field(default=ANTHROPIC_MAX_TOKENS, gt=0)
    system: Optional[str] = None

    @field_validator("messages")
    @classmethod
    def _roles_are_conversational(cls, value: List[WireMessage]) -> List[WireMessage]:
        for m in value:
            if m.role not in ("user", "assistant"):
                raise ValueError(f"unsupported role for messages API: {m.role!r}")
        return value

    @field_validator("system")
    @classmethod
    def _drop_empty_system(cls, value: Optional[str]) -> Optional[str]:
        return value or None


class ChatCompletionsPayload(BaseModel):
    """Body of an OpenAI-compatible ``POST .../chat/completions`` call."""

    model_config = ConfigDict(extra="forbid")

    model: str
    messages: List[WireMessage]
    stream: bool = True
    max_tokens: Optional[int] = Field(default=None, gt=0)
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)


def serialize_payload(payload: BaseModel) -> bytes:
    """Serialize an envelope to compact UTF-8 JSON, omitting unset fields."""
    return payload.model_dump_json(exclude_none=True).encode("utf-8")


__all__ = [
    "WireMessage",
    "AnthropicMessagesPayload",
    "ChatCompletionsPayload",
    "serialize_payload",
]
