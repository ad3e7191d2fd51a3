"""Static markup serialization for rendered elements."""

# ruff: noqa: PERF401

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .element import RAW_HTML_PROP, Element

VOID_ELEMENTS: frozenset[str] = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)


def _escape_text(text: str | None) -> str:
    if not text:
        return ""
    return str(text).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _escape_attr_value(value: str) -> str:
    return value.replace("&", "&amp;").replace('"', "&quot;").replace("<", "&lt;")


def _attr_items(props: Mapping[str, Any]) -> Iterable[tuple[str, str | None]]:
    for name, value in props.items():
        if name == RAW_HTML_PROP or value is None or value is False:
            continue
        if value is True:
            yield name, None
            continue
        if not isinstance(value, (str, int, float)):
            # Structured props (callbacks, objects) have no markup form.
            continue
        yield name, str(value)


def serialize_start_tag(name: str, props: Mapping[str, Any] | None, *, is_void: bool = False) -> str:
    parts: list[str] = ["<", name]
    for key, value in _attr_items(props or {}):
        if value is None:
            parts.extend([" ", key])
            continue
        parts.extend([" ", key, '="', _escape_attr_value(value), '"'])
    parts.append("/>" if is_void else ">")
    return "".join(parts)


def serialize_end_tag(name: str) -> str:
    return f"</{name}>"


def _node_to_html(node: Element | str | None) -> str:
    if node is None:
        return ""
    if isinstance(node, str):
        return _escape_text(node)

    name = node.tag
    if name in VOID_ELEMENTS:
        return serialize_start_tag(name, node.props, is_void=True)

    open_tag = serialize_start_tag(name, node.props)
    raw = node.props.get(RAW_HTML_PROP)
    if raw is not None:
        inner = str(raw)
    else:
        inner = "".join(_node_to_html(child) for child in node.children)
    return f"{open_tag}{inner}{serialize_end_tag(name)}"


def to_html(nodes: Element | str | Iterable[Element | str]) -> str:
    """Serialize an element, a string, or a list of them to markup.

    Text is escaped; a `raw_html` prop is emitted verbatim in place of children.
    """
    if isinstance(nodes, (Element, str)):
        return _node_to_html(nodes)
    parts: list[str] = []
    for node in nodes:
        parts.append(_node_to_html(node))
    return "".join(parts)


def to_test_format(nodes: Element | str | Iterable[Element | str], indent: int = 0) -> str:
    """Indented tree dump ('| ' prefixed lines), handy for comparing structure in tests."""
    if isinstance(nodes, (Element, str)):
        nodes = [nodes]
    lines: list[str] = []
    for node in nodes:
        _node_to_test_format(node, indent, lines)
    return "\n".join(lines)


def _node_to_test_format(node: Element | str, indent: int, lines: list[str]) -> None:
    pad = " " * indent
    if isinstance(node, str):
        lines.append(f'| {pad}"{node}"')
        return
    lines.append(f"| {pad}<{node.tag}>")
    for name, value in sorted(node.props.items()):
        lines.append(f'| {pad}  {name}="{value}"')
    for child in node.children:
        _node_to_test_format(child, indent + 2, lines)
