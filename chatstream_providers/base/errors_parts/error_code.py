"""
Normalized streaming error codes (taxonomy).

Defines the closed `ErrorCode` enumeration surfaced by every provider adapter.
Values are lowercase snake_case and are considered a stable public contract
for logging and for callers that branch on failure categories. Adding a new
provider never adds a code.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    INVALID_CREDENTIAL = "invalid_credential"
    INVALID_URL = "invalid_url"
    INVALID_REQUEST = "invalid_request"
    INVALID_RESPONSE = "invalid_response"
    RATE_LIMIT = "rate_limit"
    SERVER_ERROR = "server_error"
    NETWORK = "network"
    CANCELLED = "cancelled"


__all__ = ["ErrorCode"]
