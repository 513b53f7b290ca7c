"""
ModelCatalogEntry DTO for provider model listings.

Recomputed on every catalog request; never persisted.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class ModelCatalogEntry:
    """A single model listing entry.

    Attributes:
        id: Model identifier accepted by ``/api/generate``.
        display_name: Human-friendly name.
        provider: Provider key owning this model.
        max_tokens: Token ceiling advertised to clients.
        extra: Provider-specific metadata (description, contextWindow,
            pricing, sampling hints) merged into the wire form.
    """

    id: str
    display_name: str
    provider: str
    max_tokens: int
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_wire(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "name": self.display_name,
            "maxTokens": self.max_tokens,
            "provider": self.provider,
        }
        for key, value in self.extra.items():
            if value is not None:
                payload.setdefault(key, value)
        return payload


__all__ = ["ModelCatalogEntry"]
