"""
OpenRouter: get models

Behavior
- ``GET {base_url}/models`` via ``requests`` with the attribution headers.
- Keeps free (``:free``) models that are not deprecated.
- ``maxTokens`` is the advertised context length (8192 when absent);
  ``contextWindow`` and ``pricing`` are passed through.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from ..base.models import ModelCatalogEntry
from ..base.timeouts import get_timeout_config
from ..config import get_provider_config
from ..config.defaults import DEFAULT_MAX_TOKENS, FELUDA_APP_TITLE, HERMES_STREAMING_MODEL, OPENROUTER_DEFAULT_BASE_URL

PROVIDER = "OpenRouter"


def fallback_models() -> List[ModelCatalogEntry]:
    return [
        ModelCatalogEntry(
            id=HERMES_STREAMING_MODEL,
            display_name="Hermes 3 405B",
            provider=PROVIDER,
            max_tokens=DEFAULT_MAX_TOKENS,
        ),
        ModelCatalogEntry(
            id="meta-llama/llama-3.1-70b-instruct:free",
            display_name="Llama 3.1 70B",
            provider=PROVIDER,
            max_tokens=DEFAULT_MAX_TOKENS,
        ),
    ]


def _headers(cfg: Dict[str, Any]) -> Dict[str, str]:
    headers = {"Accept": "application/json", "X-Title": cfg.get("title") or FELUDA_APP_TITLE}
    if api_key := cfg.get("api_key"):
        headers["Authorization"] = f"Bearer {api_key}"
    if referer := cfg.get("referer"):
        headers["HTTP-Referer"] = referer
    return headers


def _fetch_raw(session: Optional[requests.Session] = None) -> List[Dict[str, Any]]:
    cfg = get_provider_config("openrouter")
    url = (cfg.get("base_url") or OPENROUTER_DEFAULT_BASE_URL).rstrip("/") + "/models"
    http = session or requests
    resp = http.get(url, headers=_headers(cfg), timeout=get_timeout_config().catalog_timeout_seconds)
    resp.raise_for_status()
    data = resp.json()
    raw = data.get("data", []) if isinstance(data, dict) else data
    return [it for it in raw or [] if isinstance(it, dict)]


def _display_name(item: Dict[str, Any]) -> str:
    if item.get("name"):
        return str(item["name"])
    return str(item["id"]).rsplit("/", 1)[-1].replace(":free", "")


def to_entries(items: List[Dict[str, Any]]) -> List[ModelCatalogEntry]:
    out: List[ModelCatalogEntry] = []
    for it in items:
        mid = str(it.get("id") or "")
        if not mid.endswith(":free") or "deprecated" in mid:
            continue
        context = it.get("context_length")
        out.append(
            ModelCatalogEntry(
                id=mid,
                display_name=_display_name(it),
                provider=PROVIDER,
                max_tokens=int(context or DEFAULT_MAX_TOKENS),
                extra={"contextWindow": context, "pricing": it.get("pricing")},
            )
        )
    return out


def fetch_models(session: Optional[requests.Session] = None) -> List[ModelCatalogEntry]:
    return to_entries(_fetch_raw(session))


__all__ = ["PROVIDER", "fetch_models", "fallback_models", "to_entries"]
