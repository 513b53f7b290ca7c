"""Request normalization: ``GenerationRequest`` + binding -> ``ProviderCall``.

Pure; no I/O and no logging. Options left as ``None`` are filled from the
model token table (``max_tokens``) or the binding's sampling defaults
(``temperature``, ``top_p``). Explicit zeros are kept.
"""

from __future__ import annotations

from typing import Mapping, Optional, TypeVar

from ..base.models import GenerationRequest, ProviderCall
from ..config.defaults import DEFAULT_MAX_TOKENS, MODEL_MAX_TOKENS
from ..routing.bindings import ProviderBinding

T = TypeVar("T")


def _pick(value: Optional[T], default: T) -> T:
    return default if value is None else value


def default_max_tokens(model_id: str, table: Mapping[str, int] = MODEL_MAX_TOKENS) -> int:
    """Token ceiling for a model id (exact match) or the global fallback."""
    return table.get(model_id, DEFAULT_MAX_TOKENS)


def normalize(request: GenerationRequest, binding: ProviderBinding) -> ProviderCall:
    opts = request.options
    defaults = binding.default_options
    return ProviderCall(
        model=binding.upstream_model or request.model_id,
        prompt=request.prompt,
        max_tokens=int(_pick(opts.max_tokens, default_max_tokens(request.model_id))),
        temperature=float(_pick(opts.temperature, defaults["temperature"])),
        top_p=float(_pick(opts.top_p, defaults["top_p"])),
        stream=binding.supports_streaming,
    )


__all__ = ["normalize", "default_max_tokens"]
