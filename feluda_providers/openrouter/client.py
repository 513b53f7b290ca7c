"""OpenRouter client (OpenAI-compatible Chat Completions).

Serves two bindings: the blocking binding for ``vendor/model`` ids and the
forced-streaming binding for the free Hermes model. Every request carries
the attribution headers OpenRouter uses for app rankings.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..base.openai_style import BaseOpenAIStyleClient
from ..config.defaults import FELUDA_APP_TITLE


class OpenRouterClient(BaseOpenAIStyleClient):
    provider_name = "openrouter"

    def _default_headers(self, cfg: Dict[str, Any]) -> Optional[Dict[str, str]]:
        headers = {"X-Title": cfg.get("title") or FELUDA_APP_TITLE}
        if referer := cfg.get("referer"):
            headers["HTTP-Referer"] = referer
        return headers


__all__ = ["OpenRouterClient"]
