"""Lively: a history-aware Gemini chat that reports search grounding.

The caller's prompt is wrapped in a request for a researched, current answer
and sent as the next turn after the caller's history on ``gemini-1.5-pro``.
Grounding metadata of the first candidate is flattened into search queries,
sources and supports.

When that turn fails, the bare prompt is sent once to ``gemini-pro`` without
history; the answer then carries ``grounding: None`` and
``metadata.fallback: True``. A failure of the fallback is surfaced as the
upstream error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from ..base.errors import ProviderError, as_provider_error, no_content
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..config.defaults import (
    GEMINI_SAFETY_SETTINGS,
    LIVELY_FALLBACK_MODEL,
    LIVELY_GENERATION_CONFIG,
    LIVELY_MODEL,
)
from .client import GeminiClient


def grounded_prompt(prompt: str) -> str:
    return (
        f"Please provide a well-researched and up-to-date response to: {prompt}\n\n"
        "Include relevant facts and current information in your response."
    )


def _field(obj: Any, name: str) -> Any:
    # SDK protos expose attributes; fakes and JSON payloads may be mappings
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


@dataclass(frozen=True)
class GroundingSource:
    url: Optional[str]
    title: Optional[str]


@dataclass(frozen=True)
class GroundingSupport:
    text: Optional[str]
    confidence: float
    source_indices: List[int]


@dataclass(frozen=True)
class Grounding:
    search_queries: List[str] = field(default_factory=list)
    sources: List[GroundingSource] = field(default_factory=list)
    supports: List[GroundingSupport] = field(default_factory=list)

    def to_wire(self) -> Dict[str, Any]:
        return {
            "searchQueries": list(self.search_queries),
            "sources": [{"url": s.url, "title": s.title} for s in self.sources],
            "supports": [
                {"text": s.text, "confidence": s.confidence, "sourceIndices": list(s.source_indices)}
                for s in self.supports
            ],
        }


def extract_grounding(response: Any) -> Grounding:
    """Read ``candidates[0].grounding_metadata``; missing pieces become empty lists."""
    candidates = _field(response, "candidates") or []
    meta = _field(candidates[0], "grounding_metadata") if candidates else None
    if meta is None:
        return Grounding()
    sources = []
    for chunk in _field(meta, "grounding_chunks") or []:
        web = _field(chunk, "web")
        sources.append(GroundingSource(url=_field(web, "uri"), title=_field(web, "title")))
    supports = []
    for support in _field(meta, "grounding_supports") or []:
        scores = [float(s) for s in _field(support, "confidence_scores") or []]
        supports.append(
            GroundingSupport(
                text=_field(_field(support, "segment"), "text"),
                confidence=max(scores or [0.0]),
                source_indices=[int(i) for i in _field(support, "grounding_chunk_indices") or []],
            )
        )
    return Grounding(
        search_queries=[str(q) for q in _field(meta, "web_search_queries") or []],
        sources=sources,
        supports=supports,
    )


@dataclass(frozen=True)
class LivelyResult:
    result: str
    model: str
    timestamp: str
    grounding: Optional[Grounding] = None
    fallback: bool = False

    def to_wire(self) -> Dict[str, Any]:
        metadata: Dict[str, Any] = {"model": self.model}
        if self.fallback:
            metadata["fallback"] = True
        metadata["timestamp"] = self.timestamp
        return {
            "result": self.result,
            "grounding": self.grounding.to_wire() if self.grounding is not None else None,
            "metadata": metadata,
        }


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LivelyChat:
    """Grounded chat turn with a single fallback.

    Parameters:
        client: Gemini client; defaults to a fresh :class:`GeminiClient`.
        clock: Returns the aware datetime stamped on each answer.
        logger: Destination for ``lively.*`` events.
    """

    def __init__(
        self,
        client: Optional[GeminiClient] = None,
        *,
        clock: Callable[[], datetime] = _utc_now,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._client = client or GeminiClient()
        self._clock = clock
        self._logger = logger or get_logger("lively")

    def _timestamp(self) -> str:
        return self._clock().isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def _text(self, response: Any, model: str) -> str:
        text = self._client.translate_chunk(response)
        if not text:
            raise no_content("google", model)
        return text

    def respond(self, prompt: str, history: Optional[Sequence[Dict[str, Any]]] = None) -> LivelyResult:
        """Answer ``prompt`` after ``history`` (Gemini ``{role, parts}`` turns).

        Raises:
            ProviderError: ``AUTH`` without a Google key; otherwise the
                upstream failure of the fallback call.
        """
        self._client.sdk()
        ctx = LogContext(provider="google", model=LIVELY_MODEL)
        normalized_log_event(self._logger, "lively.start", ctx, phase="start", turns=len(history or ()))
        try:
            response = self._client.send_chat_message(
                LIVELY_MODEL,
                history or (),
                grounded_prompt(prompt),
                generation_config=dict(LIVELY_GENERATION_CONFIG),
                safety_settings=GEMINI_SAFETY_SETTINGS,
            )
            text = self._text(response, LIVELY_MODEL)
        except Exception as exc:  # noqa: BLE001 - any failure of the grounded turn falls back
            err = as_provider_error(exc, provider="google", model=LIVELY_MODEL)
            normalized_log_event(
                self._logger,
                "lively.fallback",
                ctx,
                phase="error",
                level=logging.WARNING,
                error_code=err.code.value,
                error=err.message,
                fallback_model=LIVELY_FALLBACK_MODEL,
            )
            return self._fallback(prompt)
        grounding = extract_grounding(response)
        normalized_log_event(
            self._logger,
            "lively.end",
            ctx,
            phase="finalize",
            emitted=True,
            chars=len(text),
            sources=len(grounding.sources),
        )
        return LivelyResult(result=text, model=LIVELY_MODEL, timestamp=self._timestamp(), grounding=grounding)

    def _fallback(self, prompt: str) -> LivelyResult:
        ctx = LogContext(provider="google", model=LIVELY_FALLBACK_MODEL)
        try:
            response = self._client.generate_once(
                LIVELY_FALLBACK_MODEL, prompt, safety_settings=GEMINI_SAFETY_SETTINGS
            )
            text = self._text(response, LIVELY_FALLBACK_MODEL)
        except ProviderError as err:
            self._log_error(ctx, err)
            raise
        except Exception as exc:
            err = as_provider_error(exc, provider="google", model=LIVELY_FALLBACK_MODEL)
            self._log_error(ctx, err)
            raise err from exc
        normalized_log_event(self._logger, "lively.end", ctx, phase="finalize", emitted=True, fallback=True)
        return LivelyResult(result=text, model=LIVELY_FALLBACK_MODEL, timestamp=self._timestamp(), fallback=True)

    def _log_error(self, ctx: LogContext, err: ProviderError) -> None:
        normalized_log_event(
            self._logger,
            "lively.error",
            ctx,
            phase="error",
            level=logging.ERROR,
            error_code=err.code.value,
            error=err.message,
        )


__all__ = [
    "Grounding",
    "GroundingSource",
    "GroundingSupport",
    "LivelyChat",
    "LivelyResult",
    "extract_grounding",
    "grounded_prompt",
]
