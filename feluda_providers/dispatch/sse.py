"""Server-sent event framing for ``StreamChunk`` sequences."""

from __future__ import annotations

import json
from typing import Iterable, Iterator

from ..base.models import StreamChunk

SSE_MEDIA_TYPE = "text/event-stream"
SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


def encode_sse(chunk: StreamChunk) -> str:
    """``data: {"text": ..., "accumulated": ..., "done": ...}\\n\\n``"""
    return f"data: {json.dumps(chunk.to_wire(), ensure_ascii=False)}\n\n"


def iter_sse(chunks: Iterable[StreamChunk]) -> Iterator[str]:
    for chunk in chunks:
        yield encode_sse(chunk)


def decode_sse(payload: str) -> list[dict]:
    """Parse an SSE body back into wire dicts."""
    events = []
    for block in payload.split("\n\n"):
        block = block.strip()
        if block.startswith("data: "):
            events.append(json.loads(block[len("data: "):]))
    return events


__all__ = ["SSE_MEDIA_TYPE", "SSE_HEADERS", "encode_sse", "iter_sse", "decode_sse"]
