"""feluda_providers.config.env
===========================

Centralized environment variable mapping and helpers for provider credentials.

Purpose
-------
- Single source of truth mapping provider identifiers to the environment
  variable names holding their credentials (canonical and aliases).
- Small lookup helpers used by the config layer and the provider clients.

Design Notes
------------
- Canonical mapping lives in ``ENV_MAP``. Providers that historically read
  more than one variable list them in ``ENV_ALIASES`` with the canonical name
  first to establish precedence.

Failure Modes
-------------
- Helpers return ``None`` when a provider is unknown or nothing is set; they
  never raise. Callers decide how a missing credential surfaces.
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

# Canonical provider -> env var mapping
ENV_MAP: Dict[str, str] = {
    "google": "GEMINI_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
    "together": "TOGETHER_API_KEY",
    "groq": "GROQ_API_KEY",
    "github": "GITHUB_AI_TOKEN",
    "mistral": "MISTRAL_API_KEY",
    "xai": "XAI_API_KEY",
}


# Provider -> ordered tuple of acceptable env var names (canonical first)
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "google": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    "openrouter": ("OPENROUTER_API_KEY", "OPEN_ROUTER_API_KEY"),
    "github": ("GITHUB_AI_TOKEN", "GITHUB_TOKEN"),
}


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the value looks like a placeholder/test credential.

    Heuristics: contains 'placeholder', 'changeme', 'example', or starts with
    'test_' (case-insensitive, surrounding spaces ignored).
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return (
        "placeholder" in v
        or "changeme" in v
        or "example" in v
        or v.startswith("test_")
    )


def get_env_var_name(provider: str) -> Optional[str]:
    """Return the canonical environment variable name for a provider."""
    return ENV_MAP.get(provider.lower()) if provider else None


def get_env_var_candidates(provider: str) -> Iterable[str]:
    """Yield acceptable environment variable names for a provider.

    The canonical name is yielded first, followed by any aliases.
    """
    p = (provider or "").lower()
    canonical = ENV_MAP.get(p)
    if canonical:
        yield canonical
    for alias in ENV_ALIASES.get(p, ()):
        if alias != canonical:
            yield alias


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """Resolve an API key for a provider from the process environment.

    Returns
    -------
    Tuple[Optional[str], Optional[str]]
        ``(value, env_var_used)`` for the first non-empty, non-placeholder
        candidate; ``(None, None)`` when nothing usable is set.
    """
    for name in get_env_var_candidates(provider):
        val = os.environ.get(name)
        if val and not is_placeholder(val):
            return val, name
    return None, None


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "is_placeholder",
    "get_env_var_name",
    "get_env_var_candidates",
    "resolve_provider_key",
]
