"""
Gemini: get models

Static listing; Gemini exposes the same two models to every client.
``fetch_models`` and ``fallback_models`` return the same entries so the
catalog loader treats Gemini like the live providers.
"""

from __future__ import annotations

from typing import List

from ..base.models import ModelCatalogEntry
from ..config.defaults import GEMINI_DEFAULT_MODEL, GEMINI_PRO_MODEL, MODEL_MAX_TOKENS

PROVIDER = "Google"

_SAMPLING = {"temperature": 0.7, "topP": 0.4}


def fallback_models() -> List[ModelCatalogEntry]:
    return [
        ModelCatalogEntry(
            id=GEMINI_PRO_MODEL,
            display_name="Gemini 1.5 Pro",
            provider=PROVIDER,
            max_tokens=MODEL_MAX_TOKENS[GEMINI_PRO_MODEL],
            extra={
                "description": "Most capable Gemini model for highly complex tasks",
                "inputTokenLimit": 1_000_000,
                "outputTokenLimit": 1_000_000,
                **_SAMPLING,
            },
        ),
        ModelCatalogEntry(
            id=GEMINI_DEFAULT_MODEL,
            display_name="Gemini 1.5 Flash",
            provider=PROVIDER,
            max_tokens=MODEL_MAX_TOKENS[GEMINI_DEFAULT_MODEL],
            extra={
                "description": "Optimized for faster response times",
                "inputTokenLimit": 128_000,
                "outputTokenLimit": 128_000,
                **_SAMPLING,
            },
        ),
    ]


def fetch_models() -> List[ModelCatalogEntry]:
    return fallback_models()


__all__ = ["PROVIDER", "fetch_models", "fallback_models"]
