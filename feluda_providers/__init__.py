"""feluda_providers package

Model routing and dispatch for FeludaAI.

Purpose:
    Turn ``(model_id, prompt, options)`` into exactly one call against the
    provider bound to that model id, and hand back either the full text or a
    stream of accumulated chunks.

Public API (re-exported):
    - Version: ``__version__``
    - Exceptions: :class:`ProviderError`, :class:`ErrorCode`
    - Requests/results: :class:`GenerationRequest`, :class:`GenerationOptions`,
      :class:`CompleteResult`, :class:`StreamResult`, :class:`StreamChunk`
    - Routing and dispatch: :class:`ProviderRegistry`, :class:`Dispatcher`,
      :func:`generate`
"""

from typing import Optional

from .base.cancellation import CancellationToken
from .base.errors import ErrorCode, ProviderError
from .base.models import (
    CompleteResult,
    GenerationOptions,
    GenerationRequest,
    GenerationResult,
    StreamChunk,
    StreamResult,
)
from .dispatch import Dispatcher
from .routing import ProviderRegistry, get_registry

__version__ = "0.1.0"


def generate(
    model_id: str,
    prompt: str,
    options: Optional[GenerationOptions] = None,
    *,
    cancellation_token: Optional[CancellationToken] = None,
) -> GenerationResult:
    """Dispatch one prompt through the process-wide registry."""
    request = GenerationRequest(model_id=model_id, prompt=prompt, options=options or GenerationOptions())
    return Dispatcher().dispatch(request, cancellation_token=cancellation_token)


__all__ = [
    "__version__",
    "ErrorCode",
    "ProviderError",
    "CancellationToken",
    "GenerationOptions",
    "GenerationRequest",
    "GenerationResult",
    "CompleteResult",
    "StreamResult",
    "StreamChunk",
    "ProviderRegistry",
    "get_registry",
    "Dispatcher",
    "generate",
]
