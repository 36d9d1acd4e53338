"""
Error classification helpers mapping statuses and exceptions to ErrorCode.

Status mapping is applied to the response headers before any body bytes are
consumed. Exception mapping folds transport failures into ``NETWORK`` unless
the operation was cancelled, in which case cancellation wins.
"""
from __future__ import annotations

import asyncio
from typing import Dict, Optional

import httpx

from ..cancellation_parts.cancelled_error import CancelledError
from .error_code import ErrorCode
from .provider_error import ProviderError


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.INVALID_REQUEST,
    401: ErrorCode.INVALID_CREDENTIAL,
    429: ErrorCode.RATE_LIMIT,
}


def classify_status(status: int) -> Optional[ErrorCode]:
    """Map an HTTP status to an :class:`ErrorCode` (``None`` for 200).

    400, 401 and 429 map to their dedicated codes; 5xx and every other
    non-200 status map to ``SERVER_ERROR``.
    """
    if status == 200:
        return None
    return _HTTP_STATUS_MAP.get(status, ErrorCode.SERVER_ERROR)


def error_for_status(
    status: int,
    *,
    provider: str,
    model: Optional[str] = None,
    detail: Optional[str] = None,
) -> ProviderError:
    """Build the :class:`ProviderError` for a non-200 HTTP status."""
    code = classify_status(status)
    if code is None:
        raise ValueError("status 200 is not an error")
    message = f"HTTP {status}"
    if detail:
        message = f"{message}: {detail}"
    return ProviderError(
        code=code,
        message=message,
        provider=provider,
        model=model,
        status_code=status,
    )


def classify_exception(exc: BaseException, *, cancelled: bool = False) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. ProviderError passthrough.
        2. Cancellation (asyncio or cooperative token), or any failure that
           happened while the caller had requested cancellation.
        3. Undecodable response bytes map to ``INVALID_RESPONSE``.
        4. Everything else is a transport failure (``NETWORK``).
    """
    if isinstance(exc, ProviderError):
        return exc.code
    if cancelled or isinstance(exc, (asyncio.CancelledError, CancelledError)):
        return ErrorCode.CANCELLED
    if isinstance(exc, httpx.DecodingError):
        return ErrorCode.INVALID_RESPONSE
    return ErrorCode.NETWORK


__all__ = [
    "classify_status",
    "error_for_status",
    "classify_exception",
    "_HTTP_STATUS_MAP",
]
