"""
Inbound generation request DTOs.

``GenerationOptions`` fields left as ``None`` are "not provided" and get
filled from the model token table or the provider's sampling defaults. A
value of ``0`` is a real value and is kept.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class GenerationOptions:
    """Caller-supplied sampling options.

    Attributes:
        max_tokens: Upper bound on generated tokens (wire name ``maxTokens``).
        temperature: Sampling temperature.
        top_p: Nucleus sampling mass (wire name ``topP``).
    """

    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None

    @classmethod
    def from_wire(cls, data: Optional[Mapping[str, Any]]) -> "GenerationOptions":
        """Build from the camelCase wire shape, ignoring unknown keys."""
        if not data:
            return cls()
        return cls(
            max_tokens=data.get("maxTokens", data.get("max_tokens")),
            temperature=data.get("temperature"),
            top_p=data.get("topP", data.get("top_p")),
        )

    def to_wire(self) -> Dict[str, Any]:
        out = {"maxTokens": self.max_tokens, "temperature": self.temperature, "topP": self.top_p}
        return {k: v for k, v in out.items() if v is not None}


@dataclass(frozen=True)
class GenerationRequest:
    """A single text-generation request.

    Attributes:
        model_id: Model identifier as chosen by the client; routing key.
        prompt: Prompt text.
        options: Optional sampling overrides.
        stream: Advisory hint from the client. Routing alone decides whether
            the response streams.
    """

    model_id: str
    prompt: str
    options: GenerationOptions = field(default_factory=GenerationOptions)
    stream: Optional[bool] = None


__all__ = ["GenerationOptions", "GenerationRequest"]
