"""
Conversation turn DTO used as adapter input.

Defines the `Message` dataclass and the `Role` literal. A conversation is an
ordered list of messages, oldest first. Role normalization is the only
validation applied to caller input.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional


Role = Literal["system", "user", "assistant"]

DEFAULT_ROLE = "user"


def normalize_role(role: Optional[str]) -> str:
    """Return a trimmed lower-case role, defaulting empty values to ``"user"``."""
    if role is None:
        return DEFAULT_ROLE
    value = str(role).strip().lower()
    return value or DEFAULT_ROLE


@dataclass(frozen=True)
class Message:
    """A single conversation turn.

    Attributes:
        role: Author role. Empty roles normalize to ``"user"`` on construction.
        content: Plain text of the turn (``None`` becomes ``""``).
    """

    role: str
    content: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "role", normalize_role(self.role))
        object.__setattr__(self, "content", "" if self.content is None else str(self.content))

    def to_dict(self) -> dict:
        return {"role": self.role, "content": self.content}


__all__ = ["Message", "Role", "normalize_role", "DEFAULT_ROLE"]
