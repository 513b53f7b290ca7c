"""Together AI provider package (chat and image generation)."""

from .client import TogetherClient
from .images import TogetherImageClient, enhance_prompt

__all__ = ["TogetherClient", "TogetherImageClient", "enhance_prompt"]
