"""Models parts package public surface.

Prefer importing from ``feluda_providers.base.models``.
"""

from .provider_kind import ProviderKind
from .generation_request import GenerationOptions, GenerationRequest
from .provider_call import ProviderCall
from .generation_result import CompleteResult, GenerationResult, StreamChunk, StreamResult
from .model_catalog_entry import ModelCatalogEntry

__all__ = [
    "ProviderKind",
    "GenerationOptions",
    "GenerationRequest",
    "ProviderCall",
    "StreamChunk",
    "CompleteResult",
    "StreamResult",
    "GenerationResult",
    "ModelCatalogEntry",
]
