"""Groq client over Groq's OpenAI-compatible endpoint."""

from __future__ import annotations

from ..base.openai_style import BaseOpenAIStyleClient


class GroqClient(BaseOpenAIStyleClient):
    provider_name = "groq"


__all__ = ["GroqClient"]
