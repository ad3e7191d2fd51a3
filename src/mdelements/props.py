"""Props computed for each node before its producer runs."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .keys import sourcepos_string
from .nodes import NodeType

if TYPE_CHECKING:
    from .policy import RenderPolicy


def code_language(info: str | None) -> str | None:
    """First whitespace-delimited word of a code block's info string."""
    words = (info or "").split()
    return words[0] if words else None


def build_props(node: Any, node_type: NodeType | str, key: str | int, policy: RenderPolicy) -> dict[str, Any]:
    props: dict[str, Any] = {"key": key}

    if policy.source_pos:
        pos = sourcepos_string(node)
        if pos is not None:
            props["data-sourcepos"] = pos

    if node_type is NodeType.TEXT:
        props["literal"] = node.literal or ""
    elif node_type is NodeType.HTML_INLINE or node_type is NodeType.HTML_BLOCK:
        props["is_block"] = node_type is NodeType.HTML_BLOCK
        props["escape_html"] = policy.escape_html
        props["skip_html"] = policy.skip_html
        props["literal"] = node.literal or ""
    elif node_type is NodeType.CODE_BLOCK:
        props["language"] = code_language(node.info)
        props["literal"] = node.literal or ""
    elif node_type is NodeType.CODE:
        props["literal"] = node.literal or ""
        props["inline"] = True
    elif node_type is NodeType.HEADING:
        props["level"] = node.level
    elif node_type is NodeType.LINK:
        href = node.destination or ""
        if policy.transform_link_uri is not None:
            href = policy.transform_link_uri(href)
        props["href"] = href
        if node.title:
            props["title"] = node.title
    elif node_type is NodeType.IMAGE:
        src = node.destination or ""
        if policy.transform_image_uri is not None:
            src = policy.transform_image_uri(src)
        props["src"] = src
        if node.title:
            props["title"] = node.title
    elif node_type is NodeType.LIST:
        ordered = node.list_type == "ordered"
        props["start"] = node.list_start if ordered else None
        props["ordered"] = ordered
        props["tight"] = bool(node.list_tight)
    elif node_type is NodeType.SOFTBREAK:
        props["soft_break"] = policy.soft_break

    return props
