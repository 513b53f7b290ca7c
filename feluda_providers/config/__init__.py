"""Unified configuration layer for providers.

Goals
-----
* Centralize defaults (base URLs, default models, attribution headers).
* Merge sources in a predictable order:
    1. Built-in defaults
    2. Optional external config file (JSON or YAML) pointed to by
       ``FELUDA_PROVIDERS_CONFIG_FILE``
    3. Environment variables (``<PROVIDER>_API_KEY``, ``<PROVIDER>_BASE_URL``,
       ``<PROVIDER>_MODEL`` plus the credential aliases in ``config.env``)
    4. In-code overrides passed to the helper
* Provide a single call site: ``get_provider_config(provider)``.

External Config File
--------------------
```
openrouter:
  base_url: https://openrouter.ai/api/v1
  referer: https://feluda.example.app
groq:
  api_key: gsk_...
```

Public API
----------
* get_provider_config(provider: str, overrides: dict | None = None) -> dict
* reset_config_cache() -> None (tests)
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from .defaults import (
    FELUDA_APP_TITLE,
    GEMINI_DEFAULT_MODEL,
    GITHUB_DEFAULT_BASE_URL,
    GROQ_DEFAULT_BASE_URL,
    MISTRAL_DEFAULT_BASE_URL,
    OPENROUTER_DEFAULT_BASE_URL,
    TOGETHER_DEFAULT_BASE_URL,
    XAI_DEFAULT_BASE_URL,
)
from .env import is_placeholder, resolve_provider_key


DEFAULTS: Dict[str, Dict[str, Any]] = {
    "google": {"model": GEMINI_DEFAULT_MODEL},
    "openrouter": {
        "base_url": OPENROUTER_DEFAULT_BASE_URL,
        "title": FELUDA_APP_TITLE,
    },
    "together": {"base_url": TOGETHER_DEFAULT_BASE_URL},
    "groq": {"base_url": GROQ_DEFAULT_BASE_URL},
    "github": {"base_url": GITHUB_DEFAULT_BASE_URL},
    "mistral": {"base_url": MISTRAL_DEFAULT_BASE_URL},
    "xai": {"base_url": XAI_DEFAULT_BASE_URL},
}


ENV_FIELD_MAP = {
    "model": "MODEL",
    "base_url": "BASE_URL",
}


_FILE_CACHE: Optional[Dict[str, Any]] = None
_DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    """Load a ``.env`` file once per process without clobbering real values."""
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    load_dotenv(os.getenv("DOTENV_FILE", ".env"), override=False)
    _DOTENV_LOADED = True


def _load_external_config() -> Dict[str, Any]:
    global _FILE_CACHE
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv("FELUDA_PROVIDERS_CONFIG_FILE")
    if not path or not Path(path).exists():
        _FILE_CACHE = {}
        return _FILE_CACHE
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        data = yaml.safe_load(text) or {}
    _FILE_CACHE = data if isinstance(data, dict) else {}
    return _FILE_CACHE


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = provider.upper()
    for field, suffix in ENV_FIELD_MAP.items():
        val = os.getenv(f"{prefix}_{suffix}")
        if val is not None:
            out[field] = val
    key, _env_name = resolve_provider_key(provider)
    if key:
        out["api_key"] = key
    referer = os.getenv("NEXT_PUBLIC_APP_URL") or os.getenv("FELUDA_APP_URL")
    if provider == "openrouter" and referer:
        out["referer"] = referer
    return out


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for a provider.

    Merge order (later wins): defaults -> external config -> env vars -> overrides.
    Placeholder credentials from any source are dropped.
    """
    _load_dotenv_once()
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = {}
    cfg |= DEFAULTS.get(name, {})
    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= file_cfg
    cfg |= _env_overrides(name)
    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}
    if is_placeholder(cfg.get("api_key")):
        cfg.pop("api_key", None)
    return cfg


def reset_config_cache() -> None:
    """Forget the cached external config file (used by tests)."""
    global _FILE_CACHE
    _FILE_CACHE = None


__all__ = ["DEFAULTS", "get_provider_config", "reset_config_cache"]
