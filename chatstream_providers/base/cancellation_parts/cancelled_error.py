"""Cancellation error type.

Defines the ``CancelledError`` raised by ``CancellationToken.raise_if_cancelled``.
Streaming code converts it into a ``ProviderError`` with the ``cancelled`` code
before it reaches callers.
"""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when an operation observes a cooperative cancellation request.

    Distinct from :class:`asyncio.CancelledError` so that a token cancelled
    from another thread can be told apart from task cancellation.
    """

__all__ = ["CancelledError"]
