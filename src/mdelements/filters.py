"""Which nodes make it into the output, and what happens to the rest.

Type filtering is static (an allowed-type set fixed per policy); the optional
`allow_node` predicate is dynamic and sees the node's final props and
children. A disallowed leaf is dropped. A disallowed container is either
dropped with its whole subtree, or unwrapped: its children are kept and spliced
into its parent in place of the container.
"""

from __future__ import annotations

from collections.abc import Callable, Collection
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .errors import ConfigurationError
from .nodes import TYPES, NodeType, resolve_type

if TYPE_CHECKING:
    from .producers import Producer


@dataclass(frozen=True, slots=True)
class NodeCandidate:
    """What an `allow_node` predicate gets to look at."""

    type: NodeType | str
    producer: Producer
    props: dict[str, Any]
    children: list[Any]


AllowNode = Callable[[NodeCandidate], Any]


def _normalize_types(name: str, value: Collection[str] | None) -> frozenset[NodeType | str] | None:
    if value is None:
        return None
    if isinstance(value, (str, bytes)) or not isinstance(value, Collection):
        raise ConfigurationError(f"`{name}` must be a list of node types")
    return frozenset(resolve_type(t) for t in value)


@dataclass(frozen=True, slots=True)
class FilterConfig:
    allowed: frozenset[NodeType | str]
    allow_node: AllowNode | None = None
    unwrap_disallowed: bool = False

    @classmethod
    def build(
        cls,
        *,
        allowed_types: Collection[str] | None = None,
        disallowed_types: Collection[str] | None = None,
        allow_node: AllowNode | None = None,
        unwrap_disallowed: bool = False,
    ) -> FilterConfig:
        if allowed_types is not None and disallowed_types is not None:
            raise ConfigurationError("Only one of `allowed_types` and `disallowed_types` should be defined")

        allowed = _normalize_types("allowed_types", allowed_types)
        disallowed = _normalize_types("disallowed_types", disallowed_types)

        if allow_node is not None and not callable(allow_node):
            raise ConfigurationError("`allow_node` must be a function")

        if allowed is None:
            allowed = frozenset(TYPES)
        if disallowed:
            allowed = allowed - disallowed

        return cls(allowed=allowed, allow_node=allow_node, unwrap_disallowed=bool(unwrap_disallowed))

    def allows_type(self, node_type: NodeType | str) -> bool:
        return node_type in self.allowed

    def allows_candidate(self, candidate: NodeCandidate) -> bool:
        if self.allow_node is None:
            return True
        return bool(self.allow_node(candidate))

    @property
    def may_unwrap_late(self) -> bool:
        """True when a container can be unwrapped after its children are produced."""
        return self.unwrap_disallowed and self.allow_node is not None
