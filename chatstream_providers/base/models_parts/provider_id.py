"""
Closed set of provider identities.

A `ProviderId` determines base endpoint, credential header, request envelope,
event framing and status mapping for an adapter. Values double as factory
keys and logger suffixes.
"""
from __future__ import annotations

from enum import Enum


class ProviderId(str, Enum):
    """Supported provider identities."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GATEWAY = "gateway"

    @classmethod
    def parse(cls, value: "ProviderId | str") -> "ProviderId":
        """Coerce a case-insensitive name (or an existing member) to a member.

        Raises ``ValueError`` for unknown names.
        """
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


__all__ = ["ProviderId"]
