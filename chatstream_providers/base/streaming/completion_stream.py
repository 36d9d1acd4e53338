"""CompletionStream: the consumer-facing side of a streamed completion.

One producer task (``SSEStreamingAdapter.run``) writes fragments into a
bounded ``asyncio.Queue``. The caller iterates the stream with
``async for``. The producer starts lazily on the first ``__anext__``, so a
stream that is cancelled or closed before iteration never opens a
connection.

Terminal semantics:
  * Fragments arrive in decode order. Fragments queued before a failure are
    delivered before the failure, and partial output is never retracted.
  * Exactly one terminal signal is delivered: ``StopAsyncIteration`` on
    success, or a single :class:`ProviderError`. Every ``__anext__`` after
    that ends iteration.
  * ``cancel()`` (or cancelling the token passed at creation, from any
    thread) drops queued fragments. The next ``__anext__`` raises
    ``ProviderError(code=cancelled)`` once.
  * When the consuming task itself is cancelled while waiting for a
    fragment, the producer is cancelled too, the outcome is recorded as
    ``cancelled`` and ``asyncio.CancelledError`` propagates.

A full queue blocks the producer, and the resource timeout bounds that wait.
Use ``async with stream:`` (or :func:`collect_text`) so an abandoned stream
releases its connection and unlinks its token from the caller's token.
"""
from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import AsyncIterator, NoReturn, Optional

from ..cancellation import CancellationToken
from ..constants import DEFAULT_STREAM_BUFFER
from ..errors import ErrorCode, ProviderError, classify_exception
from ..logging import normalized_log_event
from .streaming_adapter import SSEStreamingAdapter
from .streaming_metrics import StreamMetrics


class CompletionStream:
    """Lazy, single-use async iterator of text fragments."""

    def __init__(
        self,
        adapter: SSEStreamingAdapter,
        *,
        logger: logging.Logger,
        buffer_size: int = DEFAULT_STREAM_BUFFER,
    ) -> None:
        self._adapter = adapter
        self._logger = logger
        self._token: CancellationToken = adapter.cancellation_token
        self._buffer_size = max(1, buffer_size)
        self._queue: Optional[asyncio.Queue[str]] = None
        self._producer: Optional[asyncio.Task[None]] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._error: Optional[ProviderError] = None
        self._finished = False

    # Iteration -----------------------------------------------------------
    def __aiter__(self) -> "CompletionStream":
        return self

    async def __anext__(self) -> str:
        if self._finished:
            raise StopAsyncIteration
        if self._producer is None:
            if self._token.cancelled:
                self._log_cancelled_before_start()
                self._deliver(self._cancelled_error())
            self._start()
        assert self._queue is not None and self._producer is not None  # nosec B101 - set by _start
        while True:
            if self._token.cancelled:
                await self._stop_producer()
                self._deliver(self._cancelled_error())
            if not self._queue.empty():
                return self._queue.get_nowait()
            if self._producer.done():
                self._deliver(self._producer_outcome())
            getter = asyncio.ensure_future(self._queue.get())
            try:
                done, _ = await asyncio.wait({getter, self._producer}, return_when=asyncio.FIRST_COMPLETED)
            except asyncio.CancelledError:
                getter.cancel()
                self._consumer_cancelled()
                raise
            if getter in done and not self._token.cancelled:
                return getter.result()
            # A getter that already won the race leaves its item queued; drop it
            getter.cancel()

    async def __aenter__(self) -> "CompletionStream":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # Control -------------------------------------------------------------
    def cancel(self, reason: Optional[str] = None) -> None:
        """Request cancellation; the next ``__anext__`` raises ``cancelled`` once.

        Safe to call repeatedly, before iteration starts, after completion and
        from other threads.
        """
        if self._finished:
            return
        self._token.cancel(reason or "cancelled by caller")

    async def aclose(self) -> None:
        """Stop the producer (if running) and mark the stream finished silently."""
        if self._finished:
            return
        if self._producer is not None and not self._producer.done():
            self._token.cancel("stream closed")
            await self._stop_producer()
            self._error = self._cancelled_error()
        elif self._producer is not None:
            outcome = self._producer_outcome()
            self._error = outcome
        self._finished = True
        self._release()

    # Introspection -------------------------------------------------------
    @property
    def finished(self) -> bool:  # noqa: D401 - short property
        """Whether the terminal signal has been delivered (or the stream closed)."""
        return self._finished

    @property
    def error(self) -> Optional[ProviderError]:  # noqa: D401 - short property
        """Terminal error, if the stream ended with one."""
        return self._error

    @property
    def metrics(self) -> StreamMetrics:
        return self._adapter.metrics

    @property
    def provider_name(self) -> str:
        return self._adapter.provider_name

    @property
    def model(self) -> Optional[str]:
        return self._adapter.model

    # Internals -----------------------------------------------------------
    def _start(self) -> None:
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue(maxsize=self._buffer_size)
        self._producer = self._loop.create_task(self._adapter.run(self._queue.put))
        self._producer.add_done_callback(self._on_producer_done)
        self._token.add_callback(self._on_token_cancelled)

    def _on_token_cancelled(self, _reason: Optional[str]) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        with contextlib.suppress(RuntimeError):
            loop.call_soon_threadsafe(self._cancel_producer)

    def _cancel_producer(self) -> None:
        if self._producer is not None and not self._producer.done():
            self._producer.cancel()

    @staticmethod
    def _on_producer_done(task: asyncio.Task) -> None:
        # Mark the exception retrieved; the outcome is read by _producer_outcome
        if not task.cancelled():
            task.exception()

    async def _stop_producer(self) -> None:
        producer = self._producer
        if producer is None:
            return
        if not producer.done():
            producer.cancel()
            await asyncio.wait({producer})
        if self._queue is not None:
            while not self._queue.empty():
                self._queue.get_nowait()

    def _consumer_cancelled(self) -> None:
        self._token.cancel("consumer task cancelled")
        self._cancel_producer()
        self._error = self._cancelled_error()
        self._finished = True
        self._release()

    def _producer_outcome(self) -> Optional[ProviderError]:
        producer = self._producer
        if producer is None or producer.cancelled():
            return self._cancelled_error()
        exc = producer.exception()
        if exc is None:
            return None
        if isinstance(exc, ProviderError):
            return exc
        code = classify_exception(exc, cancelled=self._token.cancelled)
        return ProviderError(
            code=code,
            message=f"{type(exc).__name__}: {exc}",
            provider=self.provider_name,
            model=self.model,
            raw=exc,
        )

    def _cancelled_error(self) -> ProviderError:
        return ProviderError(
            code=ErrorCode.CANCELLED,
            message=self._token.reason or "stream cancelled",
            provider=self.provider_name,
            model=self.model,
        )

    def _deliver(self, outcome: Optional[ProviderError]) -> NoReturn:
        self._finished = True
        self._error = outcome
        self._release()
        if outcome is None:
            raise StopAsyncIteration
        raise outcome

    def _release(self) -> None:
        self._token.remove_callback(self._on_token_cancelled)
        # The caller's token must not keep finished streams alive
        self._token.detach()

    def _log_cancelled_before_start(self) -> None:
        normalized_log_event(
            self._logger,
            "stream.cancelled",
            self._adapter.ctx,
            phase="start",
            attempt=0,
            error_code=ErrorCode.CANCELLED.value,
            emitted=False,
            reason=self._token.reason,
        )

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return (
            f"CompletionStream(provider={self.provider_name!r}, model={self.model!r}, "
            f"finished={self._finished}, error={self._error.code.value if self._error else None})"
        )


async def collect_text(stream: CompletionStream) -> str:
    """Drain ``stream`` and return the concatenated text.

    The terminal :class:`ProviderError`, if any, propagates to the caller.
    """
    parts = []
    async with stream:
        async for fragment in stream:
            parts.append(fragment)
    return "".join(parts)


async def iter_text(stream: CompletionStream) -> AsyncIterator[str]:
    """Yield fragments from ``stream`` and always close it afterwards."""
    async with stream:
        async for fragment in stream:
            yield fragment


__all__ = ["CompletionStream", "collect_text", "iter_text"]
