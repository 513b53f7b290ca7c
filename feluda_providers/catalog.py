"""Model catalog loader.

Purpose
-------
Resolve a provider slug (``gemini``, ``groq``, ``openrouter``) to its
``get_<provider>_models`` module, imported lazily with ``importlib``, and
return its listing.

Fallback semantics
------------------
A catalog request never fails because of the upstream: any exception from
``fetch_models`` or an empty listing is logged as ``catalog.fallback`` and
the module's static ``fallback_models`` are returned instead. Only an
unknown slug is an error.
"""

from __future__ import annotations

import logging
from importlib import import_module
from types import ModuleType
from typing import Any, Dict, List, Optional

from .base.errors import ErrorCode, ProviderError, classify_exception
from .base.logging import LogContext, get_logger, normalized_log_event
from .base.models import ModelCatalogEntry

_CATALOG_MODULES: Dict[str, str] = {
    "gemini": "feluda_providers.gemini.get_gemini_models",
    "groq": "feluda_providers.groq.get_groq_models",
    "openrouter": "feluda_providers.openrouter.get_openrouter_models",
}


def supported_providers() -> List[str]:
    return sorted(_CATALOG_MODULES)


def _load(provider: str) -> ModuleType:
    key = (provider or "").strip().lower()
    if key not in _CATALOG_MODULES:
        raise ProviderError(
            code=ErrorCode.NOT_FOUND,
            message=f"Unknown provider '{provider}'. Supported: {', '.join(supported_providers())}",
            provider=key or None,
        )
    return import_module(_CATALOG_MODULES[key])


def list_models(
    provider: str,
    *,
    logger: Optional[logging.Logger] = None,
    **fetch_kwargs: Any,
) -> List[ModelCatalogEntry]:
    """Return the provider's model listing, degrading to its static fallback.

    ``fetch_kwargs`` are forwarded to the module's ``fetch_models`` (tests
    pass fake clients or sessions).

    Raises:
        ProviderError: ``NOT_FOUND`` for an unknown provider slug.
    """
    module = _load(provider)
    log = logger or get_logger("catalog")
    ctx = LogContext(provider=provider)
    try:
        entries = list(module.fetch_models(**fetch_kwargs))
    except Exception as exc:
        normalized_log_event(
            log,
            "catalog.fallback",
            ctx,
            phase="fetch",
            level=logging.WARNING,
            error_code=classify_exception(exc).value,
            error=str(exc),
        )
        return module.fallback_models()
    if not entries:
        normalized_log_event(log, "catalog.fallback", ctx, phase="fetch", level=logging.WARNING, reason="empty")
        return module.fallback_models()
    normalized_log_event(log, "catalog.end", ctx, phase="finalize", count=len(entries))
    return entries


__all__ = ["list_models", "supported_providers"]
