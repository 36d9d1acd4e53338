"""Immutable description of one outgoing streaming request.

Built synchronously by an adapter (credential snapshot, endpoint and
serialized body) and handed to the streaming producer. It is never rebuilt,
so a credential rotated after construction cannot leak into this request.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

import httpx

from ..redaction import redact, redact_headers


@dataclass(frozen=True)
class PreparedRequest:
    """Method, URL, headers and body of one call."""

    url: httpx.URL
    body: bytes
    headers: Dict[str, str] = field(default_factory=dict)
    method: str = "POST"

    def diagnostic(self) -> Dict[str, str]:
        """Redacted, log-safe view of the request."""
        return {
            "method": self.method,
            "url": str(self.url),
            "headers": redact_headers(self.headers),
            "body": redact(self.body.decode("utf-8", errors="replace")),
        }


__all__ = ["PreparedRequest"]
