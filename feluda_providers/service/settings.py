"""Client settings: the selected model and default sampling options.

Settings are an explicit value handed to each request builder; the dispatch
core never reads them from storage. ``load_settings`` / ``save_settings``
map them onto the settings repository.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..base.models import GenerationOptions, GenerationRequest
from ..config.defaults import GEMINI_DEFAULT_MODEL
from ..persistence.interfaces.repos import ISettingsRepo


class OptionsBody(BaseModel):
    """Wire form of generation options (camelCase aliases accepted)."""

    model_config = ConfigDict(populate_by_name=True)

    max_tokens: Optional[int] = Field(default=None, alias="maxTokens", ge=1)
    temperature: Optional[float] = Field(default=None, ge=0)
    top_p: Optional[float] = Field(default=None, alias="topP", ge=0, le=1)

    def to_options(self) -> GenerationOptions:
        return GenerationOptions(max_tokens=self.max_tokens, temperature=self.temperature, top_p=self.top_p)


class ClientSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    selected_model: str = Field(default=GEMINI_DEFAULT_MODEL, alias="selectedModel")
    options: OptionsBody = Field(default_factory=OptionsBody)

    def to_request(self, prompt: str, *, model: Optional[str] = None) -> GenerationRequest:
        """Build a request for ``prompt`` using these settings (``model`` overrides)."""
        return GenerationRequest(
            model_id=model or self.selected_model,
            prompt=prompt,
            options=self.options.to_options(),
        )

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


def load_settings(repo: ISettingsRepo) -> ClientSettings:
    return ClientSettings.model_validate(repo.get_settings().values or {})


def save_settings(repo: ISettingsRepo, settings: ClientSettings) -> ClientSettings:
    repo.set_settings(settings.to_wire())
    return settings


__all__ = ["OptionsBody", "ClientSettings", "load_settings", "save_settings"]
