"""OpenAI chat completions request helpers.

The envelope and chunk translation are shared with the gateway adapter (see
``chatstream_providers.base.openai_style``). Only the credential header and
the sampling defaults are specific to the OpenAI-style API.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

from ..base.constants import (
    EVENT_STREAM_MEDIA_TYPE,
    JSON_MEDIA_TYPE,
    OPENAI_MAX_TOKENS,
    OPENAI_TEMPERATURE,
)
from ..base.dto.payloads import ChatCompletionsPayload
from ..base.openai_style import build_chat_completions_payload


def build_payload(
    conversation: Iterable[Any],
    model: str,
    system_prompt: Optional[str] = None,
) -> ChatCompletionsPayload:
    """Return the streaming envelope with OpenAI sampling defaults."""
    return build_chat_completions_payload(
        conversation,
        model,
        system_prompt,
        max_tokens=OPENAI_MAX_TOKENS,
        temperature=OPENAI_TEMPERATURE,
    )


def build_headers(api_key: str, *, streaming: bool = True) -> Dict[str, str]:
    """Return bearer-authenticated request headers."""
    headers = {"authorization": f"Bearer {api_key}"}
    if streaming:
        headers["content-type"] = JSON_MEDIA_TYPE
        headers["accept"] = EVENT_STREAM_MEDIA_TYPE
    else:
        headers["accept"] = JSON_MEDIA_TYPE
    return headers


__all__ = ["build_payload", "build_headers"]
