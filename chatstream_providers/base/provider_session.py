"""Per-adapter plumbing shared by all provider adapters.

``ProviderSession`` holds what an adapter instance owns:

* its exclusive ``httpx.AsyncClient`` (connection pool),
* its rotatable credential (:class:`CredentialCell`),
* its timeout configuration and child logger.

It provides the pre-network validation steps in the order every adapter
applies them: credential snapshot, endpoint, then envelope serialization.
Each step raises a classified :class:`ProviderError` before any I/O happens.
Adapters compose a session rather than inheriting from a common base, so
provider dispatch stays a closed switch in the facade.
"""
from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Callable, Mapping, Optional

import httpx
from pydantic import BaseModel, ValidationError

from .cancellation import CancellationToken
from .credentials import CredentialCell
from .dto.payloads import serialize_payload
from .errors import ErrorCode, ProviderError, classify_exception, error_for_status
from .http import PreparedRequest, build_endpoint, create_async_client
from .logging import LogContext, get_logger, log_event
from .redaction import mask_credential, redact
from .streaming import CompletionStream, SSEStreamingAdapter, Translator
from .timeouts import TimeoutConfig, get_timeout_config


class ProviderSession:
    """Transport, credential and diagnostics owned by one adapter instance."""

    def __init__(
        self,
        provider: str,
        *,
        api_key: Optional[str],
        base_url: Optional[str],
        timeouts: Optional[TimeoutConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.provider = provider
        self.base_url = base_url
        self.timeouts = timeouts or get_timeout_config()
        self.credential = CredentialCell(api_key)
        self.client = create_async_client(timeouts=self.timeouts, transport=transport)
        self.logger: logging.Logger = get_logger(f"chatstream.{provider}")

    # Credential ------------------------------------------------------------
    def update_credential(self, new_value: Optional[str]) -> None:
        """Atomically replace the credential; in-flight streams keep their snapshot."""
        previous = self.credential.set(new_value)
        log_event(
            self.logger,
            "credential.update",
            LogContext(provider=self.provider),
            previous=mask_credential(previous),
            current=mask_credential(self.credential.get()),
        )

    def require_credential(self, model: Optional[str] = None) -> str:
        """Return a snapshot of the credential or raise ``invalid_credential``."""
        key = self.credential.get()
        if not key:
            raise self.error(ErrorCode.INVALID_CREDENTIAL, "API key is missing", model)
        return key

    # Request construction --------------------------------------------------
    def endpoint(self, path: str, model: Optional[str] = None) -> httpx.URL:
        """Return ``base_url`` + ``path`` or raise ``invalid_url``."""
        url = build_endpoint(self.base_url, path)
        if url is None:
            raise self.error(ErrorCode.INVALID_URL, f"invalid endpoint: {self.base_url!r} + {path!r}", model)
        return url

    def serialize(self, build: Callable[[], BaseModel], model: Optional[str] = None) -> bytes:
        """Build and serialize an envelope, mapping failures to ``invalid_request``."""
        try:
            return serialize_payload(build())
        except (ValidationError, TypeError, ValueError) as exc:
            raise self.error(
                ErrorCode.INVALID_REQUEST,
                f"Failed to serialize request: {exc}",
                model,
                raw=exc,
            ) from exc

    def open_stream(
        self,
        request: PreparedRequest,
        translator: Translator,
        *,
        model: str,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> CompletionStream:
        """Wrap a prepared request in a lazy :class:`CompletionStream`.

        The stream gets a child of ``cancellation_token`` so cancelling the
        caller's token stops the stream while stopping the stream leaves the
        caller's token untouched.
        """
        token = cancellation_token.child() if cancellation_token is not None else CancellationToken()
        ctx = LogContext(provider=self.provider, model=model, stream_id=uuid.uuid4().hex[:12])
        adapter = SSEStreamingAdapter(
            client=self.client,
            request=request,
            translator=translator,
            ctx=ctx,
            logger=self.logger,
            timeouts=self.timeouts,
            cancellation_token=token,
        )
        return CompletionStream(adapter, logger=self.logger)

    # Non-streaming helpers -------------------------------------------------
    async def get_json(self, path: str, headers: Mapping[str, str]) -> Any:
        """GET ``path`` and decode JSON, mapping every failure into the taxonomy."""
        url = self.endpoint(path)
        ctx = LogContext(provider=self.provider)
        try:
            response = await self.client.get(url, headers=dict(headers))
        except httpx.HTTPError as exc:
            code = classify_exception(exc)
            raise self.error(code, f"{type(exc).__name__}: {exc}", raw=exc) from exc
        if response.status_code != 200:
            detail = redact(response.text[:500]) if response.text else None
            log_event(self.logger, "models.error", ctx, level=logging.WARNING, status=response.status_code, body=detail)
            raise error_for_status(response.status_code, provider=self.provider, detail=detail)
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise self.error(ErrorCode.INVALID_RESPONSE, "response body is not valid JSON", raw=exc) from exc

    # Misc ------------------------------------------------------------------
    def error(
        self,
        code: ErrorCode,
        message: str,
        model: Optional[str] = None,
        *,
        raw: Optional[BaseException] = None,
    ) -> ProviderError:
        return ProviderError(code=code, message=message, provider=self.provider, model=model, raw=raw)

    async def aclose(self) -> None:
        await self.client.aclose()


__all__ = ["ProviderSession"]
