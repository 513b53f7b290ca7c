"""Ordered routing rules mapping model ids to binding names.

Rules are evaluated top to bottom and the first match wins. Order matters:
``together/meta-llama/...`` must hit the Together rule before the generic
``vendor/model`` OpenRouter rule, and the Hermes literal must hit the
streaming rule before either.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Tuple

from ..config.defaults import (
    GITHUB_MODEL_ALIAS,
    GITHUB_UNDERLYING_MODEL,
    GROQ_ALIAS_MODEL,
    HERMES_STREAMING_MODEL,
    MISTRAL_MODELS,
    XAI_ALIAS_MODEL,
)

TOGETHER_PREFIX = "together/"


def _identity(model_id: str) -> str:
    return model_id


@dataclass(frozen=True)
class RoutingRule:
    """One ``predicate -> binding`` entry.

    Attributes:
        name: Short label used in logs and tests.
        matches: Predicate over the raw model id.
        binding: Key into the binding table.
        rewrite: Maps the raw id to the upstream model name.
    """

    name: str
    matches: Callable[[str], bool]
    binding: str
    rewrite: Callable[[str], str] = _identity


DEFAULT_RULES: Tuple[RoutingRule, ...] = (
    RoutingRule(
        name="hermes_stream",
        matches=lambda m: m == HERMES_STREAMING_MODEL,
        binding="openrouter_stream",
    ),
    RoutingRule(
        name="gemini",
        matches=lambda m: m.startswith("gemini-"),
        binding="google",
    ),
    RoutingRule(
        name="together",
        matches=lambda m: m.startswith(TOGETHER_PREFIX),
        binding="together",
        rewrite=lambda m: m[len(TOGETHER_PREFIX):],
    ),
    RoutingRule(
        name="openrouter",
        matches=lambda m: "/" in m and not m.startswith("llama-"),
        binding="openrouter",
    ),
    RoutingRule(
        name="groq",
        matches=lambda m: m.startswith("llama-") or m == "groq",
        binding="groq",
        rewrite=lambda m: GROQ_ALIAS_MODEL if m == "groq" else m,
    ),
    RoutingRule(
        name="github",
        matches=lambda m: m == GITHUB_MODEL_ALIAS,
        binding="github",
        rewrite=lambda m: GITHUB_UNDERLYING_MODEL,
    ),
    RoutingRule(
        name="mistral",
        matches=lambda m: m in MISTRAL_MODELS,
        binding="mistral",
    ),
    RoutingRule(
        name="xai",
        matches=lambda m: m == "xai",
        binding="xai",
        rewrite=lambda m: XAI_ALIAS_MODEL,
    ),
)


__all__ = ["RoutingRule", "DEFAULT_RULES", "TOGETHER_PREFIX"]
