"""Per-type producers: what each node type turns into.

A producer is one of:

- a tag name: the node becomes `element(tag, attrs, children)`, where `attrs`
  and `children` come from `tag_attrs()` and `tag_children()`
- a callable `(props) -> Element | str | None`; `props` includes `children`
- PASSTHROUGH: the node contributes its literal text (or, for soft breaks, the
  configured break) directly to its parent

Function producers receive semantic props (e.g. `level`, `ordered`,
`language`); tag producers only ever get props that are valid attributes.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any, Final, Union

from .element import RAW_HTML_PROP, Element, element
from .errors import ConfigurationError
from .nodes import HTML_TYPES, NodeType, resolve_type


class _Passthrough:
    __slots__ = ()

    def __repr__(self) -> str:
        return "PASSTHROUGH"


PASSTHROUGH: Final = _Passthrough()

ProducerFunc = Callable[[dict[str, Any]], Union[Element, str, None]]
Producer = Union[str, ProducerFunc, _Passthrough]

PASSTHROUGH_TYPES: frozenset[NodeType] = frozenset({NodeType.TEXT, NodeType.SOFTBREAK})

# Props every element may carry regardless of its type.
CORE_PROPS: tuple[str, ...] = ("key", "data-sourcepos")


def core_props(props: Mapping[str, Any]) -> dict[str, Any]:
    return {name: props[name] for name in CORE_PROPS if name in props}


def tag_attrs(node_type: NodeType | str, props: Mapping[str, Any]) -> dict[str, Any]:
    """Attributes a tag producer renders for `node_type`, derived from its semantic props."""
    attrs = core_props(props)
    if node_type is NodeType.LINK:
        attrs["href"] = props.get("href")
        attrs["title"] = props.get("title")
    elif node_type is NodeType.IMAGE:
        attrs["src"] = props.get("src")
        attrs["title"] = props.get("title")
        attrs["alt"] = props.get("alt")
    elif node_type is NodeType.LIST:
        start = props.get("start")
        if start is not None and start != 1:
            attrs["start"] = str(start)
    elif node_type is NodeType.CODE_BLOCK:
        if props.get("language"):
            attrs["class"] = f"language-{props['language']}"
    elif node_type in HTML_TYPES and not props.get("escape_html"):
        attrs[RAW_HTML_PROP] = props.get("literal", "")
    return {name: value for name, value in attrs.items() if value is not None}


def tag_children(node_type: NodeType | str, props: Mapping[str, Any], children: list[Any]) -> list[Any]:
    """Children a tag producer renders: the literal for code and escaped html, else `children`."""
    if node_type is NodeType.CODE or node_type is NodeType.CODE_BLOCK:
        return [props.get("literal", "")]
    if node_type in HTML_TYPES:
        return [props.get("literal", "")] if props.get("escape_html") else []
    return children


def heading(props: dict[str, Any]) -> Element:
    return element(f"h{props['level']}", core_props(props), props["children"])


def list_(props: dict[str, Any]) -> Element:
    tag = "ol" if props.get("ordered") else "ul"
    return element(tag, tag_attrs(NodeType.LIST, props), props["children"])


def inline_code(props: dict[str, Any]) -> Element:
    return element("code", core_props(props), [props["literal"]])


def code_block(props: dict[str, Any]) -> Element:
    code = element("code", tag_attrs(NodeType.CODE_BLOCK, {"language": props.get("language")}), [props["literal"]])
    return element("pre", core_props(props), [code])


def html(props: dict[str, Any]) -> Element:
    # skip_html is applied by the renderer before any producer runs.
    node_type = NodeType.HTML_BLOCK if props.get("is_block") else NodeType.HTML_INLINE
    tag = "div" if props.get("is_block") else "span"
    return element(tag, tag_attrs(node_type, props), tag_children(node_type, props, []))


DEFAULT_PRODUCERS: Mapping[NodeType, Producer] = MappingProxyType(
    {
        NodeType.TEXT: PASSTHROUGH,
        NodeType.SOFTBREAK: PASSTHROUGH,
        NodeType.PARAGRAPH: "p",
        NodeType.HEADING: heading,
        NodeType.HARDBREAK: "br",
        NodeType.EMPH: "em",
        NodeType.STRONG: "strong",
        NodeType.LINK: "a",
        NodeType.IMAGE: "img",
        NodeType.CODE: inline_code,
        NodeType.CODE_BLOCK: code_block,
        NodeType.BLOCK_QUOTE: "blockquote",
        NodeType.LIST: list_,
        NodeType.ITEM: "li",
        NodeType.THEMATIC_BREAK: "hr",
        NodeType.HTML_INLINE: html,
        NodeType.HTML_BLOCK: html,
    }
)


def _is_producer(value: object) -> bool:
    if value is PASSTHROUGH:
        return True
    if isinstance(value, str):
        return bool(value)
    return callable(value)


def build_registry(
    overrides: Mapping[Any, Producer | None] | None,
    allowed: frozenset[NodeType | str],
) -> dict[NodeType | str, Producer]:
    """Merge caller overrides into the default producers.

    A None override removes the producer. Removing a producer the allowed
    types still need is a ConfigurationError (pass-through types fall back to
    PASSTHROUGH instead).
    """
    registry: dict[NodeType | str, Producer] = dict(DEFAULT_PRODUCERS)
    if not overrides:
        return registry

    for raw_type, producer in overrides.items():
        node_type = resolve_type(raw_type)
        if producer is None:
            if node_type in PASSTHROUGH_TYPES:
                registry[node_type] = PASSTHROUGH
                continue
            if node_type in allowed:
                raise ConfigurationError(f'Renderer for type "{node_type}" removed, but the type is allowed')
            registry.pop(node_type, None)
            continue
        if not _is_producer(producer):
            raise ConfigurationError(
                f'Invalid renderer for type "{node_type}": expected a tag name or a function, '
                f"got {type(producer).__name__}"
            )
        registry[node_type] = producer
    return registry
