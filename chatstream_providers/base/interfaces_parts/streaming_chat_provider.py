"""StreamingChatProvider Protocol (single-class module).

The capability every adapter implements identically in shape, letting the
facade stay provider-blind.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Optional, Protocol, runtime_checkable

from ..cancellation import CancellationToken

if TYPE_CHECKING:
    from ..streaming.completion_stream import CompletionStream


@runtime_checkable
class StreamingChatProvider(Protocol):
    """Streamed chat completion with a rotatable credential."""

    @property
    def provider_name(self) -> str:
        ...

    @property
    def default_model(self) -> str:
        ...

    def update_credential(self, new_value: str) -> None:
        """Atomically replace the credential used by subsequent calls."""
        ...

    def stream_completion(
        self,
        conversation: Iterable[Any],
        model: str,
        system_prompt: Optional[str] = None,
        *,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> "CompletionStream":
        """Validate and build the request, returning a lazy stream of fragments.

        Local failures (empty credential, bad URL, unserializable request)
        raise ``ProviderError`` here, before any network I/O.
        """
        ...

    async def aclose(self) -> None:
        """Release the adapter's transport."""
        ...
