"""Render policy: the options that shape a render.

A RenderPolicy is validated and normalized once, when it is constructed, so
any misconfiguration surfaces before rendering starts. The same policy can be
shared by any number of renders.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Mapping
from dataclasses import dataclass, field
from typing import Any

from .errors import ConfigurationError
from .filters import AllowNode, FilterConfig
from .nodes import NodeType
from .producers import Producer, build_registry
from .uri import UriTransformer, uri_transformer

logger = logging.getLogger(__name__)

# Soft break value that selects an explicit break element instead of literal text.
SOFT_BREAK_ELEMENT = "br"


@dataclass(frozen=True, slots=True)
class RenderPolicy:
    """Options for `render()`.

    - `allowed_types` / `disallowed_types`: at most one of them; restricts
      which node types are rendered.
    - `allow_node`: optional predicate called with a NodeCandidate; a falsy
      result disallows the node.
    - `unwrap_disallowed`: keep the children of disallowed containers
      instead of dropping the whole subtree.
    - `source_pos`: add a `data-sourcepos` prop to nodes that have a position.
    - `escape_html` / `skip_html`: render embedded HTML as visible text, or
      leave it out entirely. With neither, the markup is trusted.
    - `soft_break`: text used for soft line breaks, or "br" for a break element.
    - `renderers`: per-type producer overrides; None removes a producer.
    - `transform_link_uri` / `transform_image_uri`: URI rewriting for links
      and images; None disables it.
    """

    allowed_types: Collection[str] | None = None
    disallowed_types: Collection[str] | None = None
    allow_node: AllowNode | None = None
    unwrap_disallowed: bool = False
    source_pos: bool = False
    escape_html: bool = False
    skip_html: bool = False
    soft_break: str = "\n"
    renderers: Mapping[Any, Producer | None] | None = None
    transform_link_uri: UriTransformer | None = uri_transformer
    transform_image_uri: UriTransformer | None = uri_transformer

    # Derived in __post_init__.
    filters: FilterConfig = field(init=False, repr=False, compare=False)
    producers: Mapping[NodeType | str, Producer] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        filters = FilterConfig.build(
            allowed_types=self.allowed_types,
            disallowed_types=self.disallowed_types,
            allow_node=self.allow_node,
            unwrap_disallowed=self.unwrap_disallowed,
        )
        object.__setattr__(self, "filters", filters)

        if not isinstance(self.soft_break, str):
            raise ConfigurationError("`soft_break` must be a string")

        for name in ("transform_link_uri", "transform_image_uri"):
            value = getattr(self, name)
            if value is not None and not callable(value):
                raise ConfigurationError(f"`{name}` must be a function or None")

        if self.renderers is not None and not isinstance(self.renderers, Mapping):
            raise ConfigurationError("`renderers` must be an object mapping node types to renderers")

        object.__setattr__(self, "producers", build_registry(self.renderers, filters.allowed))

        for name in ("unwrap_disallowed", "source_pos", "escape_html", "skip_html"):
            object.__setattr__(self, name, bool(getattr(self, name)))

        logger.debug(
            "Built render policy: %d allowed types, predicate=%s, unwrap=%s",
            len(filters.allowed),
            filters.allow_node is not None,
            filters.unwrap_disallowed,
        )

    @property
    def soft_break_is_element(self) -> bool:
        return self.soft_break == SOFT_BREAK_ELEMENT


DEFAULT_POLICY: RenderPolicy = RenderPolicy()
