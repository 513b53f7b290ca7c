"""
Client protocols the dispatcher relies on.

Bindings carry a client behind either a blocking or a streaming handle; the
dispatcher never looks past these two shapes.
"""
from __future__ import annotations

from typing import Any, Iterable, Optional, Protocol, runtime_checkable

from .models import ProviderCall


@runtime_checkable
class BlockingClient(Protocol):
    """Performs one request and returns the raw provider response."""

    provider_name: str

    def complete(self, call: ProviderCall) -> Any: ...


@runtime_checkable
class StreamingClient(Protocol):
    """Opens a provider stream and translates its chunks to text deltas."""

    provider_name: str

    def open_stream(self, call: ProviderCall) -> Iterable[Any]: ...

    def translate_chunk(self, chunk: Any) -> Optional[str]: ...


__all__ = ["BlockingClient", "StreamingClient"]
