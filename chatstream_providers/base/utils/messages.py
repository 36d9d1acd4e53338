"""Conversation normalization helpers shared across adapters.

Helpers here are side-effect free and operate on provider-agnostic input.
"""
from __future__ import annotations

from typing import Any, Iterable, List, Mapping

from ..models import Message


def coerce_messages(items: Iterable[Any] | None) -> List[Message]:
    """Return a list of :class:`Message` preserving caller order.

    Accepts ``Message`` instances or ``{"role": ..., "content": ...}``
    mappings (the shape conversation stores usually persist). Missing roles
    normalize to ``"user"`` and missing content to ``""``.

    Raises:
        TypeError: an item is neither a ``Message`` nor a mapping. Adapters
            report this as an ``invalid_request`` error.
    """
    if items is None:
        return []
    out: List[Message] = []
    for item in items:
        if isinstance(item, Message):
            out.append(item)
        elif isinstance(item, Mapping):
            out.append(Message(role=item.get("role"), content=item.get("content")))
        else:
            raise TypeError(f"unsupported conversation item: {type(item).__name__}")
    return out


def to_provider_turns(messages: Iterable[Message], *, collapse_to_assistant: bool = False) -> List[dict]:
    """Render messages as ``{"role", "content"}`` dicts for a wire envelope.

    When ``collapse_to_assistant`` is set, every role other than ``"user"``
    becomes ``"assistant"``.
    """
    turns: List[dict] = []
    for m in messages:
        role = m.role
        if collapse_to_assistant and role != "user":
            role = "assistant"
        turns.append({"role": role, "content": m.content})
    return turns


__all__ = ["coerce_messages", "to_provider_turns"]
