"""xAI (Grok) client."""

from __future__ import annotations

from ..base.openai_style import BaseOpenAIStyleClient


class XAIClient(BaseOpenAIStyleClient):
    provider_name = "xai"


__all__ = ["XAIClient"]
