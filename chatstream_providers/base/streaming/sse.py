"""Server-sent event line decoding.

Provider responses arrive as newline-delimited frames. Only lines that start
with ``"data: "`` carry meaning; empty lines, ``event:`` lines and keep-alive
comments are ignored. After the prefix is stripped, a payload equal to
``[DONE]`` ends the stream and is never parsed as JSON. Any other payload must
decode to a JSON object; anything else is reported as malformed so the caller
can log it and move on.

Provider translators map a decoded object to a :class:`FrameAction`. Every
field access is treated as fallible via :func:`dig`.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from ..constants import SSE_DATA_PREFIX, SSE_DONE_SENTINEL


class LineKind(str, Enum):
    """Classification of one raw line of the event stream."""

    IGNORED = "ignored"
    DONE = "done"
    PAYLOAD = "payload"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class SSEFrame:
    """A decoded line: its kind, the JSON object (payload lines) or the raw data."""

    kind: LineKind
    payload: Optional[Dict[str, Any]] = None
    data: Optional[str] = None


_IGNORED = SSEFrame(LineKind.IGNORED)
_DONE = SSEFrame(LineKind.DONE)


def decode_line(line: str) -> SSEFrame:
    """Decode one line (without its trailing newline) of an event stream."""
    if not line or not line.startswith(SSE_DATA_PREFIX):
        return _IGNORED
    data = line[len(SSE_DATA_PREFIX):]
    if data.strip() == SSE_DONE_SENTINEL:
        return _DONE
    try:
        payload = json.loads(data)
    except ValueError:
        return SSEFrame(LineKind.MALFORMED, data=data)
    if not isinstance(payload, dict):
        return SSEFrame(LineKind.MALFORMED, data=data)
    return SSEFrame(LineKind.PAYLOAD, payload=payload, data=data)


class FrameKind(str, Enum):
    """What a translated frame asks the read loop to do."""

    TEXT = "text"
    RESET = "reset"
    STOP = "stop"
    IGNORE = "ignore"


@dataclass(frozen=True)
class FrameAction:
    """Result of translating one JSON frame.

    ``fragments`` holds the text pieces of a ``TEXT`` action, each emitted
    separately and in order.
    """

    kind: FrameKind
    fragments: Tuple[str, ...] = ()

    @classmethod
    def emit(cls, *fragments: str) -> "FrameAction":
        return cls(FrameKind.TEXT, tuple(f for f in fragments if f))


RESET = FrameAction(FrameKind.RESET)
STOP = FrameAction(FrameKind.STOP)
IGNORE = FrameAction(FrameKind.IGNORE)

Translator = Callable[[Dict[str, Any]], FrameAction]


def dig(obj: Any, *path: Any) -> Any:
    """Walk ``path`` through nested mappings/sequences, returning ``None`` on any miss.

    String path elements index mappings; integer elements index lists.
    """
    cur = obj
    for key in path:
        if isinstance(key, int):
            if not isinstance(cur, list) or not -len(cur) <= key < len(cur):
                return None
            cur = cur[key]
        else:
            if not isinstance(cur, Mapping):
                return None
            cur = cur.get(key)
        if cur is None:
            return None
    return cur


def text_or_none(value: Any) -> Optional[str]:
    """Return ``value`` when it is a non-empty string, else ``None``."""
    return value if isinstance(value, str) and value else None


__all__ = [
    "LineKind",
    "SSEFrame",
    "decode_line",
    "FrameKind",
    "FrameAction",
    "RESET",
    "STOP",
    "IGNORE",
    "Translator",
    "dig",
    "text_or_none",
]
