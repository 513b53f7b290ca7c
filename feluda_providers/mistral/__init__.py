"""Mistral provider package."""

from .client import MistralClient

__all__ = ["MistralClient"]
