"""
Groq: get models

Behavior
- Lists models through Groq's OpenAI-compatible ``/models`` endpoint.
- Keeps only the preferred vision models, in preferred order, with derived
  display names.
- ``fallback_models`` is served by the catalog when the call fails or
  nothing preferred is listed.
"""

from __future__ import annotations

from typing import Any, List, Optional

from ..base.models import ModelCatalogEntry
from ..config.defaults import GROQ_ALIAS_MODEL
from .client import GroqClient

PROVIDER = "Groq"

PREFERRED_MODELS = (
    "llama-3.2-90b-vision-preview",
    "llama-3.2-11b-vision-preview",
)

# Preview models are capped at 8,192 output tokens.
GROQ_MAX_TOKENS = 8192


def display_name(model_id: str) -> str:
    """``llama-3.2-90b-vision-preview`` -> ``Llama 3.2-90b Vision``."""
    return (
        model_id.replace("llama-", "Llama ", 1)
        .replace("-vision-preview", " Vision", 1)
        .replace("-versatile", " Versatile", 1)
    )


def _entry(model_id: str, name: Optional[str] = None) -> ModelCatalogEntry:
    return ModelCatalogEntry(
        id=model_id,
        display_name=name or display_name(model_id),
        provider=PROVIDER,
        max_tokens=GROQ_MAX_TOKENS,
    )


def fallback_models() -> List[ModelCatalogEntry]:
    return [_entry(GROQ_ALIAS_MODEL, "Llama 3.2 90B Vision")]


def _model_id(item: Any) -> Optional[str]:
    return item.get("id") if isinstance(item, dict) else getattr(item, "id", None)


def fetch_models(client: Optional[GroqClient] = None) -> List[ModelCatalogEntry]:
    listed = {_model_id(m) for m in (client or GroqClient()).list_models()}
    return [_entry(mid) for mid in PREFERRED_MODELS if mid in listed]


__all__ = ["PROVIDER", "PREFERRED_MODELS", "display_name", "fetch_models", "fallback_models"]
