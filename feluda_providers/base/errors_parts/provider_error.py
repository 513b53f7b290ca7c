"""
Structured error raised by the registry, dispatcher and provider clients.

``message`` is surfaced to HTTP callers verbatim, so upstream messages are
stored here unmodified.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass
class ProviderError(Exception):
    """A failure with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` for the failure.
        message: Message shown to the caller (upstream text when forwarded).
        provider: Provider key where the error originated, if any.
        model: Model id associated with the failure.
        raw: Original exception for diagnostics.
        upstream: Set when the error wraps a provider or SDK failure; such
            errors are served as HTTP 500 whatever their ``code``.
    """

    code: ErrorCode
    message: str
    provider: Optional[str] = None
    model: Optional[str] = None
    raw: Optional[BaseException] = None
    upstream: bool = False

    def __str__(self) -> str:
        return self.message

    def describe(self) -> str:
        """Compact form for logs: ``provider:model code: message``."""
        return f"{self.provider or '-'}:{self.model or '-'} {self.code.value}: {self.message}"


__all__ = ["ProviderError"]
