"""
Dispatch results: a complete text or a lazy stream of chunks.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Union


@dataclass(frozen=True)
class StreamChunk:
    """One step of a streamed generation.

    Attributes:
        delta: Text added by this step (may be empty).
        accumulated: Concatenation of every delta so far, this one included.
        done: True only on the final chunk of a stream.
        error: Upstream error message carried by a terminal chunk.
    """

    delta: str
    accumulated: str
    done: bool = False
    error: Optional[str] = None

    def to_wire(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"text": self.delta, "accumulated": self.accumulated, "done": self.done}
        if self.error is not None:
            payload["error"] = self.error
        return payload


@dataclass(frozen=True)
class CompleteResult:
    text: str


@dataclass(frozen=True)
class StreamResult:
    """A lazy, finite, single-pass iterator of :class:`StreamChunk`.

    The provider call starts when iteration starts. Closing the iterator
    closes the upstream stream.
    """

    chunks: Iterator[StreamChunk]

    def close(self) -> None:
        close = getattr(self.chunks, "close", None)
        if callable(close):
            close()


GenerationResult = Union[CompleteResult, StreamResult]


__all__ = ["StreamChunk", "CompleteResult", "StreamResult", "GenerationResult"]
