"""Cooperative cancellation primitives (public API facade).

Purpose
-------
Expose provider-agnostic cancellation constructs via the canonical
``chatstream_providers.base.cancellation`` import path while the concrete
implementations live under ``cancellation_parts``.

Notes
-----
- ``CancellationToken`` signals cancellation to a running stream from any
  thread; ``CompletionStream.cancel`` uses one internally.
- ``CancelledError`` is raised by code that polls a cancelled token. It never
  escapes the package; streams surface a ``ProviderError`` instead.
"""

from .cancellation_parts.cancelled_error import CancelledError
from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken", "CancelledError"]
