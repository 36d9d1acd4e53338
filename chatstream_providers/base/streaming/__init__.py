"""Streaming package for the adapter layer.

Exposes frame decoding, the shared read loop, the consumer-facing stream and
its metrics under a single namespace.
"""

from .sse import (
    FrameAction,
    FrameKind,
    IGNORE,
    LineKind,
    RESET,
    SSEFrame,
    STOP,
    Translator,
    decode_line,
    dig,
    text_or_none,
)
from .streaming_metrics import StreamMetrics
from .streaming_adapter import SSEStreamingAdapter
from .completion_stream import CompletionStream, collect_text, iter_text

__all__ = [
    "FrameAction",
    "FrameKind",
    "IGNORE",
    "LineKind",
    "RESET",
    "SSEFrame",
    "STOP",
    "Translator",
    "decode_line",
    "dig",
    "text_or_none",
    "StreamMetrics",
    "SSEStreamingAdapter",
    "CompletionStream",
    "collect_text",
    "iter_text",
]
