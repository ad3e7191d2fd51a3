"""Source node model consumed by the renderer.

A parsed markdown document is a tree of SourceNode objects. The renderer only
reads this tree; per-render state lives in side tables owned by the renderer.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .walker import Walker

SourcePos = tuple[tuple[int, int], tuple[int, int]]


class _StrEnum(str, Enum):
    """Backport of enum.StrEnum (Python 3.11+)."""

    def __str__(self) -> str:
        return str(self.value)


class NodeType(_StrEnum):
    DOCUMENT = "document"
    TEXT = "text"
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    SOFTBREAK = "softbreak"
    HARDBREAK = "hardbreak"
    EMPH = "emph"
    STRONG = "strong"
    LINK = "link"
    IMAGE = "image"
    CODE = "code"
    CODE_BLOCK = "code_block"
    BLOCK_QUOTE = "block_quote"
    LIST = "list"
    ITEM = "item"
    THEMATIC_BREAK = "thematic_break"
    HTML_INLINE = "html_inline"
    HTML_BLOCK = "html_block"


# Every type tag a renderer knows how to produce (the document root is structural only).
TYPES: tuple[NodeType, ...] = tuple(t for t in NodeType if t is not NodeType.DOCUMENT)

CONTAINER_TYPES: frozenset[NodeType] = frozenset(
    {
        NodeType.DOCUMENT,
        NodeType.PARAGRAPH,
        NodeType.HEADING,
        NodeType.EMPH,
        NodeType.STRONG,
        NodeType.LINK,
        NodeType.IMAGE,
        NodeType.BLOCK_QUOTE,
        NodeType.LIST,
        NodeType.ITEM,
    }
)

HTML_TYPES: frozenset[NodeType] = frozenset({NodeType.HTML_INLINE, NodeType.HTML_BLOCK})

# Older names still accepted wherever a type tag is.
TYPE_ALIASES: dict[str, NodeType] = {
    "html": NodeType.HTML_INLINE,
    "header": NodeType.HEADING,
    "horizontal_rule": NodeType.THEMATIC_BREAK,
}

_TYPES_BY_VALUE: dict[str, NodeType] = {t.value: t for t in NodeType}


def resolve_type(name: str | NodeType) -> NodeType | str:
    """Map a type tag (or alias) to its NodeType; unknown tags are returned as plain strings."""
    if isinstance(name, NodeType):
        return name
    name = str(name)
    if name in TYPE_ALIASES:
        return TYPE_ALIASES[name]
    return _TYPES_BY_VALUE.get(name, name)


class SourceNode:
    """A node of a parsed markdown document.

    - type: a NodeType (or an arbitrary string for node kinds we do not know)
    - literal: text payload for text, code, code_block and html nodes
    - parent/prev/next/first_child/last_child: tree links
    - level: heading level
    - list_type/list_start/list_tight: list attributes ("bullet" or "ordered")
    - destination/title: link and image attributes
    - info: code block info string
    - sourcepos: ((start_line, start_col), (end_line, end_col)), 1-based, or None
    """

    __slots__ = (
        "destination",
        "first_child",
        "info",
        "last_child",
        "level",
        "list_start",
        "list_tight",
        "list_type",
        "literal",
        "next",
        "parent",
        "prev",
        "sourcepos",
        "title",
        "type",
    )

    def __init__(
        self,
        node_type: NodeType | str,
        literal: str | None = None,
        *,
        sourcepos: SourcePos | None = None,
        level: int | None = None,
        list_type: str | None = None,
        list_start: int | None = None,
        list_tight: bool = False,
        destination: str | None = None,
        title: str | None = None,
        info: str | None = None,
    ) -> None:
        if node_type is None or node_type == "":
            raise ValueError("Empty node type passed to SourceNode constructor")

        self.type = resolve_type(node_type)
        self.literal = literal
        self.sourcepos = sourcepos
        self.level = level
        self.list_type = list_type
        self.list_start = list_start
        self.list_tight = list_tight
        self.destination = destination
        self.title = title
        self.info = info
        self.parent: SourceNode | None = None
        self.prev: SourceNode | None = None
        self.next: SourceNode | None = None
        self.first_child: SourceNode | None = None
        self.last_child: SourceNode | None = None

    @property
    def is_container(self) -> bool:
        return self.type in CONTAINER_TYPES

    @property
    def children(self) -> list[SourceNode]:
        out: list[SourceNode] = []
        child = self.first_child
        while child is not None:
            out.append(child)
            child = child.next
        return out

    def append_child(self, child: SourceNode) -> SourceNode:
        if self._would_create_circular_reference(child):
            msg = f"Adding {child.type} as child of {self.type} would create circular reference"
            raise ValueError(msg)

        child.unlink()
        child.parent = self
        if self.last_child is not None:
            self.last_child.next = child
            child.prev = self.last_child
        else:
            self.first_child = child
        self.last_child = child
        return child

    def unlink(self) -> None:
        if self.prev is not None:
            self.prev.next = self.next
        elif self.parent is not None:
            self.parent.first_child = self.next
        if self.next is not None:
            self.next.prev = self.prev
        elif self.parent is not None:
            self.parent.last_child = self.prev
        self.parent = None
        self.prev = None
        self.next = None

    def _would_create_circular_reference(self, child: SourceNode) -> bool:
        current: SourceNode | None = self
        while current is not None:
            if current is child:
                return True
            current = current.parent
        return False

    def walker(self) -> Walker:
        from .walker import Walker

        return Walker(self)

    def __repr__(self) -> str:
        if self.literal is not None:
            return f"SourceNode({self.type}={self.literal[:30]!r})"
        return f"SourceNode({self.type}, children={len(self.children)})"
