"""Reusable base for OpenAI-compatible provider clients.

OpenRouter, Together, Groq, the GitHub models endpoint, Mistral and xAI all
speak the Chat Completions protocol, so each concrete client only names its
provider (and optionally adds headers); this base owns SDK construction,
parameter mapping and chunk translation.

SDK construction:
- Deferred until the first call and guarded by a lock, so building the
  registry at import time never needs credentials.
- ``max_retries=0``: the SDK must not retry on our behalf.
- Missing credentials raise ``ProviderError(AUTH, "missing_api_key")``.
"""

from __future__ import annotations

import threading
from typing import Any, Dict, Iterable, List, Optional

from openai import OpenAI

from ..config import get_provider_config
from .constants import MISSING_API_KEY_ERROR
from .errors import ErrorCode, ProviderError
from .logging import get_logger
from .models import ProviderCall
from .timeouts import get_timeout_config


class BaseOpenAIStyleClient:
    """Chat Completions client bound to one provider's endpoint.

    Subclasses set ``provider_name`` and may override ``_default_headers``.

    Parameters:
        api_key: Explicit key; otherwise resolved via ``get_provider_config``.
        base_url: Explicit endpoint; otherwise resolved the same way.
        sdk_client: Pre-built SDK client (tests inject fakes here).
    """

    provider_name: str = ""

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        sdk_client: Any | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._client = sdk_client
        self._lock = threading.Lock()
        self._logger = get_logger(f"providers.{self.provider_name}")

    # ----- SDK lifecycle -----

    def _default_headers(self, cfg: Dict[str, Any]) -> Optional[Dict[str, str]]:
        return None

    def _make_client(self) -> Any:
        cfg = get_provider_config(self.provider_name)
        api_key = self._api_key or cfg.get("api_key")
        if not api_key:
            raise ProviderError(
                code=ErrorCode.AUTH,
                message=MISSING_API_KEY_ERROR,
                provider=self.provider_name,
            )
        return OpenAI(
            api_key=api_key,
            base_url=self._base_url or cfg.get("base_url"),
            max_retries=0,
            timeout=get_timeout_config().http_timeout_seconds,
            default_headers=self._default_headers(cfg),
        )

    def sdk(self) -> Any:
        """Return the SDK client, creating it on first use."""
        if self._client is not None:
            return self._client
        with self._lock:
            if self._client is None:
                self._client = self._make_client()
        return self._client

    # ----- Calls -----

    @staticmethod
    def _params(call: ProviderCall) -> Dict[str, Any]:
        return {
            "model": call.model,
            "messages": call.messages(),
            "max_tokens": call.max_tokens,
            "temperature": call.temperature,
            "top_p": call.top_p,
        }

    def complete(self, call: ProviderCall) -> Any:
        """Perform one non-streaming completion and return the raw envelope."""
        return self.sdk().chat.completions.create(**self._params(call))

    def open_stream(self, call: ProviderCall) -> Iterable[Any]:
        """Start a streaming completion; the SDK stream is returned unread."""
        return self.sdk().chat.completions.create(**self._params(call), stream=True)

    @staticmethod
    def translate_chunk(chunk: Any) -> Optional[str]:
        """Extract ``choices[0].delta.content`` from an SDK or dict chunk."""
        choices = chunk.get("choices") if isinstance(chunk, dict) else getattr(chunk, "choices", None)
        if not choices:
            return None
        first = choices[0]
        delta = first.get("delta") if isinstance(first, dict) else getattr(first, "delta", None)
        if delta is None:
            return None
        content = delta.get("content") if isinstance(delta, dict) else getattr(delta, "content", None)
        return content if isinstance(content, str) else None

    def list_models(self) -> List[Any]:
        """Return the provider's ``/models`` listing as SDK objects."""
        return list(self.sdk().models.list())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(provider={self.provider_name!r})"


__all__ = ["BaseOpenAIStyleClient"]
