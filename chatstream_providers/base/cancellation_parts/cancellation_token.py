"""Cooperative cancellation token implementation.

Exposes the ``CancellationToken`` class used across adapters to terminate a
streamed completion early, either by polling or through registered callbacks
that fire once when the token is cancelled (from any thread).
"""

from __future__ import annotations

from threading import Lock
from typing import Callable, List, Optional

from .state import State
from .cancelled_error import CancelledError


class CancellationToken:
    """Cancellation flag shared between a caller and the streams it starts.

    ``cancel`` may be called from any thread. Cancelling a token cancels all
    of its children, never its parent.
    """

    def __init__(self, *, parent: "CancellationToken | None" = None) -> None:
        self._state = State()
        self._lock = Lock()
        self._children: List[CancellationToken] = []
        self._parent: Optional[CancellationToken] = None
        if parent is not None:
            parent.link_child(self)

    @property
    def cancelled(self) -> bool:
        return self._state.cancelled

    @property
    def reason(self) -> str | None:
        return self._state.reason

    def cancel(self, reason: str | None = None) -> None:
        """Mark the token cancelled once; later calls are no-ops."""
        with self._lock:
            if self._state.cancelled:
                return
            self._state.cancelled = True
            self._state.reason = reason
            children = list(self._children)
            callbacks = list(self._state.callbacks)
            self._state.callbacks.clear()
        for callback in callbacks:
            callback(reason)
        for child in children:
            child.cancel(reason)

    def add_callback(self, callback: Callable[[Optional[str]], None]) -> None:
        """Register ``callback(reason)`` to run once on cancellation.

        Runs immediately (in the caller's thread) when the token is already
        cancelled; otherwise runs in the thread that calls :meth:`cancel`.
        """
        with self._lock:
            if not self._state.cancelled:
                self._state.callbacks.append(callback)
                return
            reason = self._state.reason
        callback(reason)

    def remove_callback(self, callback: Callable[[Optional[str]], None]) -> None:
        """Unregister a callback previously passed to :meth:`add_callback`."""
        with self._lock:
            if callback in self._state.callbacks:
                self._state.callbacks.remove(callback)

    def link_child(self, token: "CancellationToken") -> "CancellationToken":
        """Attach ``token`` below this one; it is cancelled at once if this token already is."""
        token._parent = self
        with self._lock:
            self._children.append(token)
            should_cancel = self._state.cancelled
            reason = self._state.reason
        if should_cancel:
            token.cancel(reason)
        return token

    def unlink_child(self, token: "CancellationToken") -> None:
        """Stop cascading to ``token``; unknown tokens are ignored."""
        with self._lock:
            if token in self._children:
                self._children.remove(token)
        if token._parent is self:
            token._parent = None

    def detach(self) -> None:
        """Unlink this token from its parent, if any."""
        parent = self._parent
        if parent is not None:
            parent.unlink_child(self)

    def raise_if_cancelled(self) -> None:
        """Raise :class:`CancelledError` carrying the cancel reason."""
        if self._state.cancelled:
            raise CancelledError(self._state.reason or "operation cancelled")

    def child(self) -> "CancellationToken":
        """Return a new linked child token."""
        return CancellationToken(parent=self)


__all__ = ["CancellationToken"]
