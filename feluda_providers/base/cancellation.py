"""Cooperative cancellation for streamed generations.

``CancellationToken`` is polled between stream chunks; the service layer
cancels it when the HTTP client disconnects.
"""
from __future__ import annotations

from threading import Lock
from typing import Optional


class CancellationToken:
    """Thread-safe, one-shot cancellation flag. The first reason given sticks."""

    def __init__(self) -> None:
        self._cancelled = False
        self._reason: Optional[str] = None
        self._lock = Lock()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str | None = None) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            self._reason = reason

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self._cancelled}, reason={self._reason!r})"


__all__ = ["CancellationToken"]
