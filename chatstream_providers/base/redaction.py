"""Sensitive-data redaction for diagnostic text.

Request bodies and headers are logged at DEBUG level to make provider
failures debuggable. Before anything reaches a log handler, the values of
credential-bearing fields and of the system prompt are replaced with
``[MASKED]``. The JSON around them is left untouched, so the redacted text
still shows the request's shape.

These helpers are applied to log text only. Payloads sent over the network are
never passed through them.
"""
from __future__ import annotations

import json
import re
from typing import Any, Mapping

from .constants import MASK_TOKEN


SENSITIVE_FIELDS = ("system", "x-api-key", "api-key", "authorization")

# "<field>" <ws> : <ws> "<json string value, escapes allowed>"
_SENSITIVE_VALUE = re.compile(
    r'("(?:' + "|".join(re.escape(f) for f in SENSITIVE_FIELDS) + r')"\s*:\s*)"(?:[^"\\]|\\.)*"',
    re.IGNORECASE,
)
_REPLACEMENT = r'\1"' + MASK_TOKEN + '"'


def redact(text: Any) -> Any:
    """Mask system prompts and credential values inside JSON-shaped text.

    The function is pure and idempotent. Text without a sensitive field is
    returned unchanged, and so is any input that is not a non-empty string.
    It never raises.
    """
    if not isinstance(text, str) or not text:
        return text
    return _SENSITIVE_VALUE.sub(_REPLACEMENT, text)


def redact_headers(headers: Mapping[str, str]) -> str:
    """Render request headers as JSON with credential values masked."""
    safe = {}
    for name, value in headers.items():
        lowered = name.lower()
        if lowered in SENSITIVE_FIELDS:
            safe[name] = MASK_TOKEN
        else:
            safe[name] = value
    return json.dumps(safe, ensure_ascii=False)


def mask_credential(value: str | None) -> str:
    """Return a display-safe rendition of a credential.

    Keys longer than eight characters keep their first and last four
    characters (``sk-a...***...wxyz``); shorter or empty keys become ``***``.
    """
    if not value or len(value) <= 8:
        return "***"
    return f"{value[:4]}...***...{value[-4:]}"


__all__ = ["SENSITIVE_FIELDS", "redact", "redact_headers", "mask_credential"]
