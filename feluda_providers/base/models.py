"""
Provider-agnostic domain models (DTOs) public surface.

Re-exports the one-class-per-file implementations under
``feluda_providers.base.models_parts``.
"""

from .models_parts.provider_kind import ProviderKind
from .models_parts.generation_request import GenerationOptions, GenerationRequest
from .models_parts.provider_call import ProviderCall
from .models_parts.generation_result import CompleteResult, GenerationResult, StreamChunk, StreamResult
from .models_parts.model_catalog_entry import ModelCatalogEntry

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
