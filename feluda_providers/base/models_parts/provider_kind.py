"""
Provider families a model id can be routed to.
"""
from __future__ import annotations

from enum import Enum


class ProviderKind(str, Enum):
    GOOGLE = "google"
    GROQ = "groq"
    OPENROUTER = "openrouter"
    TOGETHER = "together"
    MISTRAL = "mistral"
    XAI = "xai"
    GITHUB = "github"


__all__ = ["ProviderKind"]
