"""Groq provider package."""

from .client import GroqClient

__all__ = ["GroqClient"]
