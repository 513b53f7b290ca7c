"""Provider bindings and the handles that carry their clients.

A binding is immutable and built once per process. ``ProviderRegistry.resolve``
hands out copies that differ only in ``upstream_model``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from ..base.interfaces import BlockingClient, StreamingClient
from ..base.models import ProviderKind
from ..config.defaults import PROVIDER_MAX_CONTEXT_TOKENS, SAMPLING_DEFAULTS
from ..gemini.client import GeminiClient
from ..github.client import GitHubModelsClient
from ..groq.client import GroqClient
from ..mistral.client import MistralClient
from ..openrouter.client import OpenRouterClient
from ..together.client import TogetherClient
from ..xai.client import XAIClient


@dataclass(frozen=True)
class StreamingHandle:
    """The binding always answers with a chunk stream."""

    client: StreamingClient


@dataclass(frozen=True)
class BlockingHandle:
    """The binding performs one call and answers with the full text."""

    client: BlockingClient


ProviderHandle = Union[StreamingHandle, BlockingHandle]


@dataclass(frozen=True)
class ProviderBinding:
    """Where and how a model id is served.

    Attributes:
        key: Binding name (``openrouter_stream``, ``groq`` ...), also the key
            of its sampling defaults.
        provider: Provider family.
        handle: Client wrapped in its calling convention.
        default_options: Read-only ``temperature`` / ``top_p`` defaults.
        max_context_tokens: Advertised context window.
        upstream_model: Model name sent upstream; set by ``resolve``.
    """

    key: str
    provider: ProviderKind
    handle: ProviderHandle
    default_options: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))
    max_context_tokens: int = 8192
    upstream_model: Optional[str] = None

    @property
    def supports_streaming(self) -> bool:
        """True when calls through this binding answer with a chunk stream."""
        return isinstance(self.handle, StreamingHandle)


@dataclass
class ProviderClients:
    """One client per provider; shared by every binding that targets it."""

    google: Any = field(default_factory=GeminiClient)
    openrouter: Any = field(default_factory=OpenRouterClient)
    together: Any = field(default_factory=TogetherClient)
    groq: Any = field(default_factory=GroqClient)
    github: Any = field(default_factory=GitHubModelsClient)
    mistral: Any = field(default_factory=MistralClient)
    xai: Any = field(default_factory=XAIClient)


def _binding(key: str, provider: ProviderKind, handle: ProviderHandle) -> ProviderBinding:
    temperature, top_p = SAMPLING_DEFAULTS[key]
    return ProviderBinding(
        key=key,
        provider=provider,
        handle=handle,
        default_options=MappingProxyType({"temperature": temperature, "top_p": top_p}),
        max_context_tokens=PROVIDER_MAX_CONTEXT_TOKENS.get(provider.value, 8192),
    )


def build_default_bindings(clients: Optional[ProviderClients] = None) -> Mapping[str, ProviderBinding]:
    """Build the base binding table keyed by binding name."""
    c = clients or ProviderClients()
    table: Dict[str, ProviderBinding] = {
        "openrouter_stream": _binding("openrouter_stream", ProviderKind.OPENROUTER, StreamingHandle(c.openrouter)),
        "openrouter": _binding("openrouter", ProviderKind.OPENROUTER, BlockingHandle(c.openrouter)),
        "google": _binding("google", ProviderKind.GOOGLE, BlockingHandle(c.google)),
        "together": _binding("together", ProviderKind.TOGETHER, BlockingHandle(c.together)),
        "groq": _binding("groq", ProviderKind.GROQ, BlockingHandle(c.groq)),
        "github": _binding("github", ProviderKind.GITHUB, BlockingHandle(c.github)),
        "mistral": _binding("mistral", ProviderKind.MISTRAL, BlockingHandle(c.mistral)),
        "xai": _binding("xai", ProviderKind.XAI, BlockingHandle(c.xai)),
    }
    return MappingProxyType(table)


__all__ = [
    "StreamingHandle",
    "BlockingHandle",
    "ProviderHandle",
    "ProviderBinding",
    "ProviderClients",
    "build_default_bindings",
]
