"""Together AI client.

Model ids arrive as ``together/<vendor>/<model>``; the registry strips the
``together/`` prefix before the call reaches this client.
"""

from __future__ import annotations

from ..base.openai_style import BaseOpenAIStyleClient


class TogetherClient(BaseOpenAIStyleClient):
    provider_name = "together"


__all__ = ["TogetherClient"]
