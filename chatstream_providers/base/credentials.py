"""Single-writer credential holder shared by an adapter and its callers.

The credential is the only adapter field that changes after construction.
Writers replace the whole string under a lock, and readers take a snapshot
reference. Because ``str`` is immutable, a reader sees either the old value
or the new one and never a mix. Streams capture the snapshot once, when they
are created. Rotating the credential therefore affects the next call and
leaves in-flight calls alone.
"""
from __future__ import annotations

from threading import Lock
from typing import Optional


class CredentialCell:
    """Atomic-replace holder for one credential string."""

    def __init__(self, value: Optional[str] = None) -> None:
        self._lock = Lock()
        self._value = (value or "").strip()

    def get(self) -> str:
        """Return the current credential (empty string when unset)."""
        return self._value

    def set(self, value: Optional[str]) -> str:
        """Replace the credential and return the previous value."""
        new_value = (value or "").strip()
        with self._lock:
            previous = self._value
            self._value = new_value
        return previous

    def __bool__(self) -> bool:
        return bool(self._value)

    def __repr__(self) -> str:  # pragma: no cover - never expose the secret
        return f"CredentialCell(set={bool(self._value)})"


__all__ = ["CredentialCell"]
