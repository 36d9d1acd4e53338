"""
Structured provider error exception type.

Every failure leaving an adapter operation is a `ProviderError` carrying one
normalized `ErrorCode`, so callers branch on a single taxonomy regardless of
which service produced the failure.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


_RETRYABLE = frozenset({ErrorCode.RATE_LIMIT, ErrorCode.SERVER_ERROR, ErrorCode.NETWORK})


@dataclass
class ProviderError(Exception):
    """Represents a structured provider error with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Diagnostic message suitable for logging.
        provider: Provider key where the error originated (e.g., ``"openai"``).
        model: Optional model name associated with the failure.
        status_code: HTTP status for status-derived errors (server errors
            always carry it).
        raw: Optional original exception for diagnostics.
    """

    code: ErrorCode
    message: str
    provider: str
    model: Optional[str] = None
    status_code: Optional[int] = None
    raw: Optional[BaseException] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        """Return a compact string combining provider, model, code, and message."""
        return f"{self.provider}:{self.model or '-'} {self.code.value}: {self.message}"

    @property
    def retryable(self) -> bool:
        """Hint for caller-side retry policies; the core itself never retries."""
        return self.code in _RETRYABLE

    @property
    def user_message(self) -> str:
        """Human-readable reason suitable for display in a user interface."""
        code = self.code
        if code is ErrorCode.INVALID_CREDENTIAL:
            return "Invalid API key"
        if code is ErrorCode.INVALID_URL:
            return "Invalid URL"
        if code is ErrorCode.INVALID_REQUEST:
            return f"Invalid request: {self.message}"
        if code is ErrorCode.INVALID_RESPONSE:
            return "Invalid response from server"
        if code is ErrorCode.RATE_LIMIT:
            return "Rate limit exceeded. Please try again later"
        if code is ErrorCode.SERVER_ERROR:
            return f"Server error (code: {self.status_code})"
        if code is ErrorCode.CANCELLED:
            return "Request cancelled"
        return f"Network error: {self.message}"


__all__ = ["ProviderError"]
