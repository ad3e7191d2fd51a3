"""Markdown parsing via markdown-it-py.

markdown-it-py does the parsing; this module only converts its syntax tree
into SourceNode objects. Block nodes carry line ranges from markdown-it
(`map`); columns are recovered from the source lines. Inline nodes carry no
position of their own.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

from .nodes import NodeType, SourceNode, SourcePos
from .policy import DEFAULT_POLICY, RenderPolicy
from .render import render
from .serialize import to_html

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

_SIMPLE_TYPES: dict[str, NodeType] = {
    "paragraph": NodeType.PARAGRAPH,
    "blockquote": NodeType.BLOCK_QUOTE,
    "list_item": NodeType.ITEM,
    "hr": NodeType.THEMATIC_BREAK,
    "em": NodeType.EMPH,
    "strong": NodeType.STRONG,
    "softbreak": NodeType.SOFTBREAK,
    "hardbreak": NodeType.HARDBREAK,
}

_TEXT_TYPES = frozenset({"text", "text_special"})

_TRAILING_BLANK_LINES_RE = re.compile(r"(\n *)+$")


def _accept_all_links(url: str) -> bool:
    # URI safety is the renderer's job (see uri.py), so every destination is kept.
    return True


def create_parser() -> MarkdownIt:
    """A CommonMark parser that keeps every link destination, including unsafe ones."""
    md = MarkdownIt("commonmark")
    md.validateLink = _accept_all_links
    return md


def _sourcepos(block_map: Sequence[int] | None, lines: list[str]) -> SourcePos | None:
    if not block_map:
        return None
    start, end = block_map
    start_line = start + 1
    end_line = max(end, start_line)
    while end_line > start_line and end_line <= len(lines) and not lines[end_line - 1].strip():
        end_line -= 1

    first = lines[start] if start < len(lines) else ""
    last = lines[end_line - 1] if end_line - 1 < len(lines) else ""
    start_col = len(first) - len(first.lstrip()) + 1
    end_col = max(len(last), 1)
    return ((start_line, start_col), (end_line, end_col))


def _is_tight(list_node: SyntaxTreeNode) -> bool:
    # markdown-it hides the paragraphs of tight lists.
    for item in list_node.children:
        for child in item.children:
            if child.type == "paragraph" and not child.hidden:
                return False
    return True


def _convert(node: SyntaxTreeNode, lines: list[str]) -> SourceNode:
    kind = node.type
    pos = _sourcepos(node.map, lines)

    if kind in _TEXT_TYPES:
        return SourceNode(NodeType.TEXT, node.content)
    if kind in _SIMPLE_TYPES:
        out = SourceNode(_SIMPLE_TYPES[kind], sourcepos=pos)
    elif kind == "heading":
        out = SourceNode(NodeType.HEADING, sourcepos=pos, level=int(node.tag[1:]))
    elif kind == "bullet_list":
        out = SourceNode(NodeType.LIST, sourcepos=pos, list_type="bullet", list_tight=_is_tight(node))
    elif kind == "ordered_list":
        start = int(node.attrs.get("start", 1))
        out = SourceNode(
            NodeType.LIST, sourcepos=pos, list_type="ordered", list_start=start, list_tight=_is_tight(node)
        )
    elif kind == "fence":
        return SourceNode(NodeType.CODE_BLOCK, node.content, sourcepos=pos, info=node.info.strip())
    elif kind == "code_block":
        return SourceNode(NodeType.CODE_BLOCK, node.content, sourcepos=pos, info="")
    elif kind == "code_inline":
        return SourceNode(NodeType.CODE, node.content)
    elif kind == "html_block":
        return SourceNode(NodeType.HTML_BLOCK, _TRAILING_BLANK_LINES_RE.sub("", node.content), sourcepos=pos)
    elif kind == "html_inline":
        return SourceNode(NodeType.HTML_INLINE, node.content)
    elif kind == "link":
        out = SourceNode(
            NodeType.LINK,
            destination=str(node.attrs.get("href", "")),
            title=_optional_str(node.attrs.get("title")),
        )
    elif kind == "image":
        out = SourceNode(
            NodeType.IMAGE,
            destination=str(node.attrs.get("src", "")),
            title=_optional_str(node.attrs.get("title")),
        )
    else:
        # Node kinds from plugins we do not know (tables, footnotes, ...).
        logger.debug("Unknown markdown-it node type %r", kind)
        out = SourceNode(kind, node.content or None, sourcepos=pos)

    _convert_children(out, node.children, lines)
    return out


def _optional_str(value: object) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _convert_children(parent: SourceNode, children: Sequence[SyntaxTreeNode], lines: list[str]) -> None:
    for child in children:
        if child.type == "inline":
            # Inline content belongs directly to its block.
            _convert_children(parent, child.children, lines)
            continue
        parent.append_child(_convert(child, lines))


def parse(text: str, *, parser: MarkdownIt | None = None) -> SourceNode:
    """Parse markdown `text` into a SourceNode document tree."""
    md = parser or create_parser()
    tokens = md.parse(text)
    lines = text.splitlines()

    document = SourceNode(NodeType.DOCUMENT)
    _convert_children(document, SyntaxTreeNode(tokens).children, lines)
    return document


def render_markdown(text: str, *, policy: RenderPolicy = DEFAULT_POLICY, parser: MarkdownIt | None = None) -> list:
    """Parse and render markdown `text` in one go."""
    return render(parse(text, parser=parser), policy=policy)


def markdown_to_html(text: str, *, policy: RenderPolicy = DEFAULT_POLICY, parser: MarkdownIt | None = None) -> str:
    """Parse, render and serialize markdown `text` to static markup."""
    return to_html(render_markdown(text, policy=policy, parser=parser))
