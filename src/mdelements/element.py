"""The generic element construction primitive.

`element(tag, props, children)` builds one immutable output node. A `key`
entry in `props` is lifted out into `Element.key`: it identifies the element
among its siblings and is never rendered as an attribute.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Union

# Prop holding trusted markup to inject verbatim instead of rendering children.
RAW_HTML_PROP = "raw_html"

Child = Union["Element", str]


@dataclass(frozen=True, slots=True)
class Element:
    tag: str
    props: Mapping[str, Any] = field(default_factory=dict)
    children: tuple[Child, ...] = ()
    key: str | int | None = None

    def to_text(self) -> str:
        """Concatenated text of all descendant strings."""
        parts: list[str] = []
        for child in self.children:
            if isinstance(child, Element):
                parts.append(child.to_text())
            else:
                parts.append(child)
        return "".join(parts)

    def __repr__(self) -> str:
        return f"Element(<{self.tag}>, key={self.key!r}, children={len(self.children)})"


def element(tag: str, props: Mapping[str, Any] | None = None, children: Iterable[Child] | Child = ()) -> Element:
    """Build an Element.

    `children` may be a single child or an iterable of children; None entries
    are dropped.
    """
    if not tag:
        raise ValueError("Empty tag passed to element()")

    attrs = dict(props) if props else {}
    key = attrs.pop("key", None)
    attrs.pop("children", None)

    if isinstance(children, (str, Element)):
        kids: tuple[Child, ...] = (children,)
    else:
        kids = tuple(c for c in children if c is not None)
    return Element(tag, attrs, kids, key)
