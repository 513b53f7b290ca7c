"""
Normalized error codes for routing, dispatch and provider failures.

Values are lowercase snake_case and form a stable contract for logs and for
the HTTP status mapping in the service layer.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated failure categories."""

    INVALID_MODEL = "invalid_model"
    NO_CONTENT = "no_content"
    TRANSPORT = "transport"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    VALIDATION = "validation"
    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    NOT_FOUND = "not_found"
    SERVER_ERROR = "server_error"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
