"""Model id -> provider binding resolution.

``ProviderRegistry.resolve`` is a pure function of the model id: the base
binding table is read-only and each call returns an equal copy carrying the
rewritten upstream model name. Unknown ids raise ``INVALID_MODEL``; no
provider is contacted.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Mapping, Optional, Sequence, Tuple

from ..base.errors import invalid_model
from .bindings import ProviderBinding, ProviderClients, build_default_bindings
from .rules import DEFAULT_RULES, RoutingRule


class ProviderRegistry:
    """Ordered rule table over a fixed set of bindings.

    Parameters:
        bindings: Binding table keyed by name; defaults to real SDK clients.
        rules: Ordered rules; defaults to :data:`DEFAULT_RULES`.
    """

    def __init__(
        self,
        bindings: Optional[Mapping[str, ProviderBinding]] = None,
        rules: Sequence[RoutingRule] = DEFAULT_RULES,
    ) -> None:
        self._bindings = bindings if bindings is not None else build_default_bindings()
        self._rules: Tuple[RoutingRule, ...] = tuple(rules)
        missing = {r.binding for r in self._rules} - set(self._bindings)
        if missing:
            raise ValueError(f"rules reference unknown bindings: {sorted(missing)}")

    @classmethod
    def with_clients(cls, clients: ProviderClients) -> "ProviderRegistry":
        return cls(bindings=build_default_bindings(clients))

    @property
    def rules(self) -> Tuple[RoutingRule, ...]:
        return self._rules

    @property
    def bindings(self) -> Mapping[str, ProviderBinding]:
        return self._bindings

    def match(self, model_id: str) -> Optional[RoutingRule]:
        """Return the first rule whose predicate accepts ``model_id``."""
        if not isinstance(model_id, str) or not model_id:
            return None
        return next((rule for rule in self._rules if rule.matches(model_id)), None)

    def resolve(self, model_id: str) -> ProviderBinding:
        rule = self.match(model_id)
        if rule is None:
            raise invalid_model(model_id)
        return replace(self._bindings[rule.binding], upstream_model=rule.rewrite(model_id))


_DEFAULT_REGISTRY: Optional[ProviderRegistry] = None


def get_registry() -> ProviderRegistry:
    """Process-wide registry built on first use."""
    global _DEFAULT_REGISTRY  # noqa: PLW0603
    if _DEFAULT_REGISTRY is None:
        _DEFAULT_REGISTRY = ProviderRegistry()
    return _DEFAULT_REGISTRY


__all__ = ["ProviderRegistry", "get_registry"]
