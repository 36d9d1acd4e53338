"""Anthropic Messages API request and event helpers.

Pure functions used by :class:`AnthropicProvider`:

* ``build_messages_payload``: the system prompt goes to the top-level
  ``system`` field (omitted when empty). Every role other than ``user``
  collapses to ``assistant``, because the messages list only accepts those
  two.
* ``build_headers``: ``x-api-key`` and ``anthropic-version`` from the
  credential snapshot.
* ``translate_event``: dispatches on the event ``type`` discriminator.

``translate_event`` handles these event types:

==========================  ==========================================
``message_start``           reset the accumulation buffer
``content_block_delta``     emit ``delta.text``
``message_delta``           emit ``delta.text`` when present
``message_stop``            end the stream successfully
anything else               ignored (``ping``, block start/stop, ...)
==========================  ==========================================
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from ..base.constants import (
    ANTHROPIC_API_VERSION,
    ANTHROPIC_MAX_TOKENS,
    EVENT_STREAM_MEDIA_TYPE,
    JSON_MEDIA_TYPE,
)
from ..base.dto.payloads import AnthropicMessagesPayload, WireMessage
from ..base.models import ModelInfo
from ..base.streaming.sse import IGNORE, RESET, STOP, FrameAction, dig, text_or_none
from ..base.utils.messages import coerce_messages, to_provider_turns


def build_messages_payload(
    conversation: Iterable[Any],
    model: str,
    system_prompt: Optional[str] = None,
    *,
    max_tokens: int = ANTHROPIC_MAX_TOKENS,
) -> AnthropicMessagesPayload:
    """Return the streaming envelope for ``POST /v1/messages``."""
    turns = to_provider_turns(coerce_messages(conversation), collapse_to_assistant=True)
    return AnthropicMessagesPayload(
        model=model,
        messages=[WireMessage(**t) for t in turns],
        max_tokens=max_tokens,
        system=system_prompt or None,
    )


def build_headers(
    api_key: str,
    *,
    api_version: str = ANTHROPIC_API_VERSION,
    streaming: bool = True,
) -> Dict[str, str]:
    """Return request headers carrying the credential snapshot."""
    headers = {"x-api-key": api_key, "anthropic-version": api_version}
    if streaming:
        headers["content-type"] = JSON_MEDIA_TYPE
        headers["accept"] = EVENT_STREAM_MEDIA_TYPE
    else:
        headers["accept"] = JSON_MEDIA_TYPE
    return headers


def translate_event(payload: Dict[str, Any]) -> FrameAction:
    """Map one Messages API stream event to a frame action."""
    event_type = dig(payload, "type")
    if event_type == "message_start":
        return RESET
    if event_type in ("content_block_delta", "message_delta"):
        text = text_or_none(dig(payload, "delta", "text"))
        return FrameAction.emit(text) if text else IGNORE
    if event_type == "message_stop":
        return STOP
    return IGNORE


def parse_models(data: Any) -> List[ModelInfo]:
    """Decode a ``/v1/models`` body.

    Accepts ``{"data": [{"id", "display_name"}]}`` and the older
    ``{"models": [{"model_id"}]}`` shape.
    """
    models: List[ModelInfo] = []
    items = dig(data, "data")
    if isinstance(items, list):
        for item in items:
            if model_id := text_or_none(dig(item, "id")):
                name = text_or_none(dig(item, "display_name")) or model_id
                models.append(ModelInfo(id=model_id, name=name, provider="anthropic"))
        return models
    items = dig(data, "models")
    if isinstance(items, list):
        for item in items:
            if model_id := text_or_none(dig(item, "model_id")):
                models.append(ModelInfo(id=model_id, name=model_id, provider="anthropic"))
    return models


__all__ = [
    "build_messages_payload",
    "build_headers",
    "translate_event",
    "parse_models",
]
