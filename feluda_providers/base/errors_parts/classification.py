"""
Map arbitrary SDK exceptions to :class:`ErrorCode` values.

Classification only picks the code; callers keep ``str(exc)`` as the message.
"""
from __future__ import annotations

import asyncio
from typing import Dict, Optional

from .error_code import ErrorCode
from .provider_error import ProviderError


def _extract_status(exc: BaseException) -> Optional[int]:
    """Pull an HTTP status from ``status_code``, ``status`` or ``response.status_code``."""
    for attr in ("status_code", "status"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.TRANSPORT,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
}


_MESSAGE_PATTERNS = (
    (ErrorCode.TIMEOUT, ("timeout", "timed out")),
    (ErrorCode.AUTH, ("api key", "unauthorized", "forbidden")),
    (ErrorCode.RATE_LIMIT, ("rate limit", "too many requests")),
    (ErrorCode.UNAVAILABLE, ("unavailable", "overloaded")),
    (ErrorCode.TRANSPORT, ("connection", "network")),
)


def _heuristic_from_message(msg: str) -> Optional[ErrorCode]:
    for code, patterns in _MESSAGE_PATTERNS:
        if any(p in msg for p in patterns):
            return code
    return None


def classify_exception(exc: BaseException) -> ErrorCode:
    """Classify an exception into an :class:`ErrorCode`.

    Precedence: ProviderError passthrough, timeout types, HTTP status,
    message heuristics, then ``TRANSPORT`` as the fallback for any other
    upstream failure.
    """
    if isinstance(exc, ProviderError):
        return exc.code
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError)):
        return ErrorCode.TIMEOUT
    status = _extract_status(exc)
    if status is not None and status in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status]
    code = _heuristic_from_message(str(exc).lower())
    return code if code is not None else ErrorCode.TRANSPORT


def as_provider_error(
    exc: BaseException, *, provider: Optional[str] = None, model: Optional[str] = None
) -> ProviderError:
    """Wrap ``exc`` in an upstream :class:`ProviderError`, keeping its message untouched."""
    if isinstance(exc, ProviderError):
        return exc
    return ProviderError(
        code=classify_exception(exc),
        message=str(exc),
        provider=provider,
        model=model,
        raw=exc,
        upstream=True,
    )


__all__ = ["classify_exception", "as_provider_error", "_extract_status", "_HTTP_STATUS_MAP"]
