"""GitHub Models provider package."""

from .client import GitHubModelsClient

__all__ = ["GitHubModelsClient"]
