"""Unified error taxonomy public surface.

Re-exports the one-class-per-file implementations under
``feluda_providers.base.errors_parts``.
"""

from __future__ import annotations

from .constants import INVALID_MODEL_MESSAGE, NO_CONTENT_MESSAGE
from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import ProviderError
from .errors_parts.classification import as_provider_error, classify_exception


def invalid_model(model_id: str) -> ProviderError:
    return ProviderError(ErrorCode.INVALID_MODEL, INVALID_MODEL_MESSAGE, model=model_id)


def no_content(provider: str | None = None, model: str | None = None) -> ProviderError:
    return ProviderError(ErrorCode.NO_CONTENT, NO_CONTENT_MESSAGE, provider=provider, model=model)


__all__ = [
    "ErrorCode",
    "ProviderError",
    "as_provider_error",
    "classify_exception",
    "invalid_model",
    "no_content",
]
