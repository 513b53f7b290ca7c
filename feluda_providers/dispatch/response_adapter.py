"""Provider response shapes -> text, and provider streams -> ``StreamChunk``s.

``unwrap_text`` accepts every envelope the clients return:
    - a plain string (Gemini, after joining its stream)
    - a chat-completion envelope, SDK objects or dicts
      (``choices[0].message.content``)
    - any object exposing ``.text``
    - a mapping with ``text`` or ``result``

``accumulate_stream`` drives one provider stream lazily. The upstream call
starts on the first ``next()``; every exit path (exhaustion, error,
cancellation, consumer ``close()``) closes the upstream stream.
"""

from __future__ import annotations

import contextlib
import logging
from typing import Any, Callable, Iterable, Iterator, Mapping, Optional

from ..base.cancellation import CancellationToken
from ..base.errors import classify_exception, no_content
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import StreamChunk


def _get(obj: Any, key: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(key)
    return getattr(obj, key, None)


def _choice_content(raw: Any) -> Any:
    choices = _get(raw, "choices")
    if not choices:
        return None
    message = _get(choices[0], "message")
    return None if message is None else _get(message, "content")


def extract_text(raw: Any) -> Optional[str]:
    """Best-effort text extraction; ``None`` when the shape carries no text."""
    if raw is None:
        return None
    if isinstance(raw, str):
        return raw
    content = _choice_content(raw)
    if isinstance(content, str):
        return content
    if isinstance(raw, Mapping):
        for key in ("text", "result"):
            if isinstance(raw.get(key), str):
                return raw[key]
        return None
    text = getattr(raw, "text", None)
    return text if isinstance(text, str) else None


def unwrap_text(raw: Any, *, provider: Optional[str] = None, model: Optional[str] = None) -> str:
    """Return the response text or raise ``NO_CONTENT`` when it is empty or missing."""
    text = extract_text(raw)
    if not text:
        raise no_content(provider=provider, model=model)
    return text


def _close_quietly(stream: Any) -> None:
    close = getattr(stream, "close", None)
    if callable(close):
        # upstream close failures must not mask the stream outcome
        with contextlib.suppress(Exception):
            close()


def accumulate_stream(
    starter: Callable[[], Iterable[Any]],
    translator: Callable[[Any], Optional[str]],
    *,
    cancellation_token: Optional[CancellationToken] = None,
    logger: Optional[logging.Logger] = None,
    ctx: Optional[LogContext] = None,
    on_finish: Optional[Callable[[str], None]] = None,
) -> Iterator[StreamChunk]:
    """Yield one chunk per provider chunk, then a terminal ``done`` chunk.

    Parameters:
        starter: Opens the provider stream; called on first iteration.
        translator: Maps a provider chunk to its text delta (``None`` -> "").
        cancellation_token: Polled before each chunk; a cancelled token ends
            the stream silently.
        logger: Destination for ``stream.*`` events.
        ctx: Provider/model context for log events.
        on_finish: Called with the full text after a successful stream.

    A provider error (on start or mid-stream) ends the sequence with a
    ``done`` chunk carrying ``error`` and the text accumulated so far.
    """
    log = logger or get_logger("stream")
    accumulated = ""
    emitted = 0
    stream: Any = None
    normalized_log_event(log, "stream.start", ctx, phase="start")
    try:
        stream = starter()
        for raw in stream:
            if cancellation_token is not None and cancellation_token.cancelled:
                normalized_log_event(
                    log,
                    "stream.cancelled",
                    ctx,
                    phase="cancelled",
                    emitted=emitted > 0,
                    emitted_count=emitted,
                    reason=cancellation_token.reason,
                )
                return
            delta = translator(raw) or ""
            accumulated += delta
            emitted += 1
            yield StreamChunk(delta=delta, accumulated=accumulated)
    except Exception as exc:
        normalized_log_event(
            log,
            "stream.error",
            ctx,
            phase="error",
            level=logging.ERROR,
            error_code=classify_exception(exc).value,
            emitted=emitted > 0,
            emitted_count=emitted,
            error=str(exc),
        )
        stream_error: Optional[str] = str(exc)
    else:
        stream_error = None
    finally:
        if stream is not None:
            _close_quietly(stream)

    if stream_error is not None:
        yield StreamChunk(delta="", accumulated=accumulated, done=True, error=stream_error)
        return

    normalized_log_event(
        log,
        "stream.end",
        ctx,
        phase="finalize",
        emitted=emitted > 0,
        emitted_count=emitted,
        chars=len(accumulated),
    )
    if on_finish is not None:
        on_finish(accumulated)
    yield StreamChunk(delta="", accumulated=accumulated, done=True)


__all__ = ["extract_text", "unwrap_text", "accumulate_stream"]
