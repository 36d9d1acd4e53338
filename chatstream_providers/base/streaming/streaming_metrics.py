"""Streaming metrics data structures.

Collected by the read loop and attached to the terminal log event of every
streamed completion.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


@dataclass
class StreamMetrics:
    """Collected metrics for a single streamed completion.

    Attributes:
        emitted: Number of text fragments handed to the consumer.
        chars: Total characters across emitted fragments.
        skipped_frames: Malformed or untranslatable frames that were skipped.
        time_to_first_token_ms: Latency from call start to the first fragment.
        total_duration_ms: Latency from call start to the terminal outcome.
        status_code: HTTP status received, when headers arrived.
    """

    emitted: int = 0
    chars: int = 0
    skipped_frames: int = 0
    time_to_first_token_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None
    status_code: Optional[int] = None

    def record_fragment(self, text: str, elapsed_ms: float) -> None:
        """Account for one emitted fragment."""
        if self.time_to_first_token_ms is None:
            self.time_to_first_token_ms = elapsed_ms
        self.emitted += 1
        self.chars += len(text)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["StreamMetrics"]
