"""Gemini client.

Uses google-generativeai (``GenerativeModel.generate_content``). Generation
always streams from the SDK; ``complete`` drains the stream and joins the
text, which keeps long Gemini answers from tripping the SDK's single-response
timeout.

The same client backs file analysis: ``upload_file`` / ``delete_file`` wrap
the SDK's file API and ``generate_from_parts`` runs a prompt over uploaded
files. ``send_chat_message`` and ``generate_once`` serve the Lively chat
with non-streamed calls.
"""

from __future__ import annotations

import threading
from typing import Any, Dict, Iterable, List, Optional, Sequence

import google.generativeai as genai

from ..base.constants import MISSING_API_KEY_ERROR
from ..base.errors import ErrorCode, ProviderError
from ..base.logging import get_logger
from ..base.models import ProviderCall
from ..config import get_provider_config


class GeminiClient:
    """Thin wrapper over the ``google.generativeai`` module.

    Parameters:
        api_key: Explicit key; otherwise resolved via ``get_provider_config``.
        sdk: Module-like object exposing ``configure``, ``GenerativeModel``,
            ``upload_file`` and ``delete_file``. Defaults to the real SDK;
            tests pass a fake.
    """

    provider_name = "google"

    def __init__(self, *, api_key: Optional[str] = None, sdk: Any | None = None) -> None:
        self._api_key = api_key
        self._sdk = sdk or genai
        self._configured = False
        self._lock = threading.Lock()
        self._logger = get_logger("providers.gemini")

    def sdk(self) -> Any:
        """Return the SDK module, configuring credentials on first use."""
        if self._configured:
            return self._sdk
        with self._lock:
            if not self._configured:
                api_key = self._api_key or get_provider_config(self.provider_name).get("api_key")
                if not api_key:
                    raise ProviderError(
                        code=ErrorCode.AUTH,
                        message=MISSING_API_KEY_ERROR,
                        provider=self.provider_name,
                    )
                self._sdk.configure(api_key=api_key)
                self._configured = True
        return self._sdk

    def _model(self, name: str, system_instruction: Optional[str] = None, **settings: Any) -> Any:
        if system_instruction:
            settings["system_instruction"] = system_instruction
        return self.sdk().GenerativeModel(name, **settings)

    @staticmethod
    def _generation_config(call: ProviderCall) -> Dict[str, Any]:
        return {
            "max_output_tokens": call.max_tokens,
            "temperature": call.temperature,
            "top_p": call.top_p,
        }

    # ----- text generation -----

    def open_stream(self, call: ProviderCall) -> Iterable[Any]:
        model = self._model(call.model)
        return model.generate_content(
            call.prompt,
            generation_config=self._generation_config(call),
            stream=True,
        )

    @staticmethod
    def translate_chunk(chunk: Any) -> Optional[str]:
        """Return the chunk's text, or ``None`` for chunks without text parts."""
        try:
            text = chunk.text
        except ValueError:
            # raised by the SDK for chunks that carry no text parts
            return None
        return text if isinstance(text, str) else None

    def complete(self, call: ProviderCall) -> str:
        """Stream the generation and return the concatenated text."""
        pieces: List[str] = []
        for chunk in self.open_stream(call):
            if text := self.translate_chunk(chunk):
                pieces.append(text)
        return "".join(pieces)

    # ----- file API -----

    def upload_file(self, path: str, *, mime_type: str, display_name: str) -> Any:
        return self.sdk().upload_file(path=path, mime_type=mime_type, display_name=display_name)

    def delete_file(self, name: str) -> None:
        self.sdk().delete_file(name)

    def generate_from_parts(
        self,
        model: str,
        parts: List[Any],
        *,
        generation_config: Dict[str, Any],
        system_instruction: Optional[str] = None,
    ) -> str:
        """Generate over a list of parts (uploaded files and text) and join the stream."""
        response = self._model(model, system_instruction).generate_content(
            parts,
            generation_config=generation_config,
            stream=True,
        )
        return "".join(t for t in (self.translate_chunk(c) for c in response) if t)

    # ----- chat -----

    def send_chat_message(
        self,
        model: str,
        history: Sequence[Dict[str, Any]],
        message: str,
        *,
        generation_config: Dict[str, Any],
        safety_settings: Sequence[Dict[str, Any]],
    ) -> Any:
        """Send ``message`` as the next turn after ``history``; returns the SDK response."""
        chat = self._model(
            model,
            generation_config=generation_config,
            safety_settings=list(safety_settings),
        ).start_chat(history=list(history))
        return chat.send_message(message)

    def generate_once(self, model: str, prompt: str, *, safety_settings: Sequence[Dict[str, Any]]) -> Any:
        return self._model(model, safety_settings=list(safety_settings)).generate_content(prompt)

    def __repr__(self) -> str:
        return "GeminiClient(provider='google')"


__all__ = ["GeminiClient"]
