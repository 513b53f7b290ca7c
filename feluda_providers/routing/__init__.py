"""Model routing: ordered rules over immutable provider bindings."""

from .bindings import (
    BlockingHandle,
    ProviderBinding,
    ProviderClients,
    ProviderHandle,
    StreamingHandle,
    build_default_bindings,
)
from .registry import ProviderRegistry, get_registry
from .rules import DEFAULT_RULES, RoutingRule

__all__ = [
    "BlockingHandle",
    "StreamingHandle",
    "ProviderHandle",
    "ProviderBinding",
    "ProviderClients",
    "build_default_bindings",
    "ProviderRegistry",
    "get_registry",
    "RoutingRule",
    "DEFAULT_RULES",
]
