"""GitHub Models client (Azure-hosted OpenAI-compatible inference).

Authenticates with a GitHub token (``GITHUB_AI_TOKEN``).
"""

from __future__ import annotations

from ..base.openai_style import BaseOpenAIStyleClient


class GitHubModelsClient(BaseOpenAIStyleClient):
    provider_name = "github"


__all__ = ["GitHubModelsClient"]
