"""Structured logging context object for adapters.

This module defines :class:`LogContext`, a dataclass carrying the fields
shared by every event of one streamed completion (provider, model, a
per-stream identifier and extra metadata). ``to_dict`` merges ``extra`` and
prunes ``None`` values for clean structured output.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Structured context for streaming log events."""

    provider: Optional[str] = None
    model: Optional[str] = None
    stream_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra", {}) or {}
        data.update({k: v for k, v in extra.items() if v is not None})
        return {k: v for k, v in data.items() if v is not None}


__all__ = ["LogContext"]
