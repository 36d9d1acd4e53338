"""Streaming read loop shared by every provider adapter.

``SSEStreamingAdapter.run`` is the producer side of a streamed completion. It
performs these steps in order:

1. Observe cooperative cancellation before connecting.
2. Open the POST through the adapter's ``httpx.AsyncClient``.
3. Map the HTTP status before reading any body byte. A non-200 status fails
   immediately. The error body is read afterwards, best effort, and only for
   redacted diagnostics.
4. Decode the body line by line. Cancellation is observed before each line.
   Malformed frames are logged and skipped, and the provider translator turns
   each JSON object into a :class:`FrameAction`.
5. Terminate on the ``[DONE]`` sentinel, an end-of-message event or the end of
   input. All three count as success.

Every failure leaves ``run`` as a :class:`ProviderError`. The only exception
is ``asyncio.CancelledError``, which is re-raised after logging so that task
cancellation semantics are preserved. The whole call runs under the resource
timeout. Per-read waits are bounded by the transport timeout.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, List, Optional

import httpx

from ..cancellation import CancellationToken, CancelledError
from ..constants import ERROR_BODY_PREVIEW_BYTES
from ..errors import ErrorCode, ProviderError, classify_exception, error_for_status
from ..http.request import PreparedRequest
from ..logging import LogContext, log_event, normalized_log_event
from ..redaction import redact
from ..timeouts import TimeoutConfig
from .sse import FrameKind, LineKind, Translator, decode_line
from .streaming_metrics import StreamMetrics

Emit = Callable[[str], Awaitable[None]]


class SSEStreamingAdapter:
    """Encapsulates the provider streaming loop for one call."""

    def __init__(
        self,
        *,
        client: httpx.AsyncClient,
        request: PreparedRequest,
        translator: Translator,
        ctx: LogContext,
        logger: logging.Logger,
        timeouts: TimeoutConfig,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> None:
        self._client = client
        self._request = request
        self._translator = translator
        self.ctx = ctx
        self._logger = logger
        self._timeouts = timeouts
        self._token = cancellation_token or CancellationToken()
        self.metrics = StreamMetrics()
        # Diagnostic accumulation; reset on start-of-message events, never emitted whole
        self._buffer: List[str] = []
        self._t0: Optional[float] = None

    @property
    def provider_name(self) -> str:
        return self.ctx.provider or "-"

    @property
    def model(self) -> Optional[str]:
        return self.ctx.model

    @property
    def cancellation_token(self) -> CancellationToken:
        return self._token

    @property
    def accumulated_text(self) -> str:
        """Text decoded since the last start-of-message event (diagnostics only)."""
        return "".join(self._buffer)

    async def run(self, emit: Emit) -> None:
        """Execute the streaming lifecycle, pushing each fragment through ``emit``."""
        self._t0 = time.perf_counter()
        resource = self._timeouts.resource_timeout_seconds
        try:
            self._token.raise_if_cancelled()
            async with asyncio.timeout(resource):
                await self._stream(emit)
        except asyncio.CancelledError:
            self._finalize_cancelled(self._token.reason or "task cancelled")
            raise
        except CancelledError as exc:
            err = self._error(ErrorCode.CANCELLED, str(exc) or "stream cancelled", exc)
            self._finalize_cancelled(err.message)
            raise err from exc
        except ProviderError as err:
            self._finalize_error(err)
            raise
        except TimeoutError as exc:
            code = classify_exception(exc, cancelled=self._token.cancelled)
            err = self._error(code, f"stream exceeded {resource}s", exc)
            self._finalize_error(err)
            raise err from exc
        except Exception as exc:  # noqa: BLE001 - every transport failure maps into the taxonomy
            code = classify_exception(exc, cancelled=self._token.cancelled)
            err = self._error(code, f"{type(exc).__name__}: {exc}", exc)
            if code is ErrorCode.CANCELLED:
                self._finalize_cancelled(err.message)
            else:
                self._finalize_error(err)
            raise err from exc
        self._finalize_success()

    async def _stream(self, emit: Emit) -> None:
        req = self._request
        log_event(self._logger, "stream.request", self.ctx, level=logging.DEBUG, **req.diagnostic())
        normalized_log_event(self._logger, "stream.start", self.ctx, phase="start", attempt=1)
        async with self._client.stream(req.method, req.url, headers=req.headers, content=req.body) as response:
            status = response.status_code
            self.metrics.status_code = status
            if status != 200:
                err = error_for_status(status, provider=self.provider_name, model=self.model)
                detail = await self._read_error_preview(response)
                if detail:
                    err.message = f"{err.message}: {detail}"
                raise err
            await self._consume(response, emit)

    async def _consume(self, response: httpx.Response, emit: Emit) -> None:
        async for line in response.aiter_lines():
            self._token.raise_if_cancelled()
            frame = decode_line(line)
            if frame.kind is LineKind.IGNORED:
                continue
            if frame.kind is LineKind.DONE:
                return
            if frame.kind is LineKind.MALFORMED:
                self._skip_frame(frame.data, "invalid_json")
                continue
            try:
                action = self._translator(frame.payload)
            except (AttributeError, KeyError, IndexError, TypeError, ValueError) as exc:
                self._skip_frame(frame.data, f"translate_failed: {type(exc).__name__}")
                continue
            if action.kind is FrameKind.TEXT:
                for fragment in action.fragments:
                    self._buffer.append(fragment)
                    self.metrics.record_fragment(fragment, self._elapsed_ms())
                    await emit(fragment)
            elif action.kind is FrameKind.RESET:
                self._buffer.clear()
            elif action.kind is FrameKind.STOP:
                return
            else:
                log_event(
                    self._logger,
                    "stream.event_ignored",
                    self.ctx,
                    level=logging.DEBUG,
                    type=frame.payload.get("type") if frame.payload else None,
                )

    async def _read_error_preview(self, response: httpx.Response) -> Optional[str]:
        """Read at most ``ERROR_BODY_PREVIEW_BYTES`` of an error body, redacted."""
        chunks: List[bytes] = []
        size = 0
        try:
            async for chunk in response.aiter_bytes():
                chunks.append(chunk)
                size += len(chunk)
                if size >= ERROR_BODY_PREVIEW_BYTES:
                    break
        except httpx.HTTPError as exc:
            log_event(self._logger, "stream.error_body", self.ctx, level=logging.DEBUG, read_error=type(exc).__name__)
            return None
        text = b"".join(chunks)[:ERROR_BODY_PREVIEW_BYTES].decode("utf-8", errors="replace").strip()
        if not text:
            return None
        detail = redact(text)
        log_event(
            self._logger,
            "stream.error_body",
            self.ctx,
            level=logging.WARNING,
            status=response.status_code,
            body=detail,
        )
        return detail

    def _skip_frame(self, data: Optional[str], reason: str) -> None:
        self.metrics.skipped_frames += 1
        log_event(
            self._logger,
            "stream.decode_error",
            self.ctx,
            level=logging.WARNING,
            reason=reason,
            frame=redact((data or "")[:200]),
        )

    def _elapsed_ms(self) -> float:
        start = self._t0 if self._t0 is not None else time.perf_counter()
        return (time.perf_counter() - start) * 1000.0

    def _error(self, code: ErrorCode, message: str, raw: Optional[BaseException] = None) -> ProviderError:
        return ProviderError(
            code=code,
            message=message,
            provider=self.provider_name,
            model=self.model,
            raw=raw,
        )

    def _finish_metrics(self) -> None:
        self.metrics.total_duration_ms = self._elapsed_ms()

    def _metrics_fields(self) -> dict:
        fields = self.metrics.to_dict()
        fields["fragments"] = fields.pop("emitted")
        return fields

    def _finalize_success(self) -> None:
        self._finish_metrics()
        normalized_log_event(
            self._logger,
            "stream.end",
            self.ctx,
            phase="finalize",
            attempt=1,
            emitted=self.metrics.emitted > 0,
            **self._metrics_fields(),
        )

    def _finalize_error(self, err: ProviderError) -> None:
        self._finish_metrics()
        normalized_log_event(
            self._logger,
            "stream.error",
            self.ctx,
            phase="finalize",
            attempt=1,
            error_code=err.code.value,
            emitted=self.metrics.emitted > 0,
            level=logging.WARNING,
            message=err.message,
            **self._metrics_fields(),
        )

    def _finalize_cancelled(self, reason: str) -> None:
        self._finish_metrics()
        normalized_log_event(
            self._logger,
            "stream.cancelled",
            self.ctx,
            phase="finalize",
            attempt=1,
            error_code=ErrorCode.CANCELLED.value,
            emitted=self.metrics.emitted > 0,
            reason=reason,
            **self._metrics_fields(),
        )


__all__ = ["SSEStreamingAdapter", "Emit"]
