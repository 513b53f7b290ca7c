"""
Normalized outbound call shape handed to provider clients.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List


@dataclass(frozen=True)
class ProviderCall:
    """Fully resolved parameters for exactly one provider call.

    ``model`` is the upstream model name (after alias and prefix rewriting),
    not the id the client sent.
    """

    model: str
    prompt: str
    max_tokens: int
    temperature: float
    top_p: float
    stream: bool = False

    def messages(self) -> List[Dict[str, str]]:
        """OpenAI-style message list: the prompt as a single user turn."""
        return [{"role": "user", "content": self.prompt}]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["ProviderCall"]
