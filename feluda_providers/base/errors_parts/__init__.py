"""Errors parts package public surface.

Prefer importing from ``feluda_providers.base.errors`` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import ProviderError
from .classification import as_provider_error, classify_exception

__all__ = ["ErrorCode", "ProviderError", "as_provider_error", "classify_exception"]
