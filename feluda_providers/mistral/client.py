"""Mistral client using Mistral's OpenAI-compatible ``/v1/chat/completions``."""

from __future__ import annotations

from ..base.openai_style import BaseOpenAIStyleClient


class MistralClient(BaseOpenAIStyleClient):
    provider_name = "mistral"


__all__ = ["MistralClient"]
