"""Shared helpers for OpenAI-compatible chat completion endpoints.

Both the OpenAI-style adapter and the gateway adapter speak this dialect:

* Envelope: ``{model, messages, stream: true, max_tokens?, temperature?}``.
  A non-empty system prompt is inlined as the leading ``system`` message.
* Frames: ``data: {"choices": [{"delta": {"content": "..."}}]}``, terminated by
  ``data: [DONE]``. Every choice's non-empty ``delta.content`` is emitted in
  order. Chunks without content (role announcements, ``finish_reason``-only
  chunks, usage chunks) are ignored.
* Model listing: ``{"data": [{"id": ...}]}`` or a bare list of
  ``{"id", "name"}`` entries.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from .dto.payloads import ChatCompletionsPayload, WireMessage
from .models import Message, ModelInfo
from .streaming.sse import IGNORE, FrameAction, dig, text_or_none
from .utils.messages import coerce_messages, to_provider_turns


def build_chat_completions_payload(
    conversation: Iterable[Any],
    model: str,
    system_prompt: Optional[str] = None,
    *,
    max_tokens: Optional[int] = None,
    temperature: Optional[float] = None,
) -> ChatCompletionsPayload:
    """Return the envelope for ``POST .../chat/completions`` with streaming enabled."""
    messages: List[Message] = coerce_messages(conversation)
    turns = to_provider_turns(messages)
    if system_prompt:
        turns.insert(0, {"role": "system", "content": system_prompt})
    return ChatCompletionsPayload(
        model=model,
        messages=[WireMessage(**t) for t in turns],
        max_tokens=max_tokens,
        temperature=temperature,
    )


def translate_chat_completion_chunk(payload: Dict[str, Any]) -> FrameAction:
    """Map one chat completion chunk to a frame action.

    Each choice's content becomes its own fragment, in choice order.
    """
    choices = dig(payload, "choices")
    if not isinstance(choices, list):
        return IGNORE
    parts = [text for choice in choices if (text := text_or_none(dig(choice, "delta", "content")))]
    if not parts:
        return IGNORE
    return FrameAction.emit(*parts)


def parse_model_listing(data: Any, provider: str) -> List[ModelInfo]:
    """Decode a models listing body into :class:`ModelInfo` entries."""
    items = data.get("data") if isinstance(data, dict) else data
    if not isinstance(items, list):
        return []
    models: List[ModelInfo] = []
    for item in items:
        model_id = text_or_none(dig(item, "id"))
        if model_id is None:
            continue
        name = text_or_none(dig(item, "name")) or model_id
        models.append(ModelInfo(id=model_id, name=name, provider=provider, owned_by=dig(item, "owned_by")))
    return models


__all__ = [
    "build_chat_completions_payload",
    "translate_chat_completion_chunk",
    "parse_model_listing",
]
