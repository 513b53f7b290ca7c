"""xAI provider package."""

from .client import XAIClient

__all__ = ["XAIClient"]
