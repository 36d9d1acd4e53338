"""Base shared constants for provider adapters.

Central location to avoid scattering magic strings and default numbers.

Security
--------
This module contains only generic sentinel strings and numeric defaults.
There are no credentials or tokens embedded.
"""
from __future__ import annotations

# Server-sent events framing
SSE_DATA_PREFIX = "data: "
SSE_DONE_SENTINEL = "[DONE]"

# Replacement for sensitive values in diagnostic text
MASK_TOKEN = "[MASKED]"  # pragma: allowlist secret - redaction marker, not a secret

# Fragments buffered between producer and consumer before the producer waits
DEFAULT_STREAM_BUFFER = 64

# Cap on error-body bytes read for diagnostics after a non-200 status
ERROR_BODY_PREVIEW_BYTES = 2048

# Anthropic Messages API
ANTHROPIC_API_VERSION = "2023-06-01"
ANTHROPIC_MAX_TOKENS = 4096

# OpenAI chat completions
OPENAI_MAX_TOKENS = 4096
OPENAI_TEMPERATURE = 0.7

# OpenAI-compatible gateway
GATEWAY_MAX_TOKENS = 2048

EVENT_STREAM_MEDIA_TYPE = "text/event-stream"
JSON_MEDIA_TYPE = "application/json"

__all__ = [
    "SSE_DATA_PREFIX",
    "SSE_DONE_SENTINEL",
    "MASK_TOKEN",
    "DEFAULT_STREAM_BUFFER",
    "ERROR_BODY_PREVIEW_BYTES",
    "ANTHROPIC_API_VERSION",
    "ANTHROPIC_MAX_TOKENS",
    "OPENAI_MAX_TOKENS",
    "OPENAI_TEMPERATURE",
    "GATEWAY_MAX_TOKENS",
    "EVENT_STREAM_MEDIA_TYPE",
    "JSON_MEDIA_TYPE",
]
