"""Tree assembler: turns a source tree into a list of output elements.

One pass over the walker's entering/leaving events. Containers are staged on
entering (in a side table keyed by node identity, so the source tree is never
written to) and produced on leaving, once their children are final. Leaves
are produced on entering. Each produced value is appended to the nearest
staged ancestor; the document root's children are the result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .element import Element, element
from .errors import RenderError
from .filters import NodeCandidate
from .keys import INITIAL_KEY_STATE, KeyState, next_key, position_signature
from .nodes import CONTAINER_TYPES, HTML_TYPES, NodeType, resolve_type
from .policy import DEFAULT_POLICY, RenderPolicy
from .producers import PASSTHROUGH, Producer, tag_attrs, tag_children
from .props import build_props
from .walker import EventStream

if TYPE_CHECKING:
    from .nodes import SourceNode

logger = logging.getLogger(__name__)

Output = Element | str


@dataclass(slots=True)
class _Staged:
    type: NodeType | str | None
    producer: Producer | None
    props: dict[str, Any]
    children: list[Output] = field(default_factory=list)
    # Integer keys handed out to children that have no source position.
    slots: list[int] = field(default_factory=lambda: [0])
    # Set on images: descendants only contribute their text, to the alt prop.
    in_image: bool = False

    def claim_slot(self) -> int:
        slot = self.slots[0]
        self.slots[0] = slot + 1
        return slot

    def append(self, child: Output | None) -> None:
        if child is None or child == "":
            return
        children = self.children
        if isinstance(child, str) and children and isinstance(children[-1], str):
            children[-1] += child
            return
        children.append(child)


def _in_tight_list(node: Any) -> bool:
    parent = getattr(node, "parent", None)
    grandparent = getattr(parent, "parent", None)
    return (
        grandparent is not None
        and resolve_type(grandparent.type) is NodeType.LIST
        and bool(getattr(grandparent, "list_tight", False))
    )


def _alt_text(node_type: NodeType | str, produced: Output | None) -> str:
    """Plain text a produced leaf contributes to an image description."""
    if isinstance(produced, Element):
        text = produced.to_text()
    else:
        text = produced or ""
    if not text and (node_type is NodeType.SOFTBREAK or node_type is NodeType.HARDBREAK):
        return "\n"
    return text


class _Transducer:
    """State for one render call."""

    __slots__ = ("doc", "filters", "key_state", "policy", "staged", "stream")

    def __init__(self, policy: RenderPolicy) -> None:
        self.policy = policy
        self.filters = policy.filters
        self.staged: dict[int, _Staged] = {}
        self.key_state: KeyState = INITIAL_KEY_STATE
        self.doc: Any = None
        self.stream: EventStream | None = None

    def run(self, root: Any) -> list[Output]:
        self.stream = EventStream(root.walker())
        for node, entering in self.stream:
            if self.doc is None:
                self.doc = node
                self.staged[id(node)] = _Staged(None, None, {})
                continue
            if node is self.doc:
                if entering:
                    continue
                break
            if entering:
                self._enter(node)
            else:
                self._leave(node)

        if self.doc is None:
            return []
        return self.staged[id(self.doc)].children

    def _target(self, node: Any) -> _Staged:
        """Nearest staged ancestor of `node`."""
        parent = getattr(node, "parent", None)
        while parent is not None:
            staged = self.staged.get(id(parent))
            if staged is not None:
                return staged
            parent = getattr(parent, "parent", None)
        return self.staged[id(self.doc)]

    def _key(self, node: Any, target: _Staged) -> str | int:
        signature = position_signature(node)
        if signature is None:
            return target.claim_slot()
        key, self.key_state = next_key(self.key_state, signature)
        return key

    def _producer(self, node_type: NodeType | str) -> Producer:
        producer = self.policy.producers.get(node_type)
        if producer is None:
            raise RenderError(f'No renderer for node type "{node_type}"', node_type=str(node_type))
        return producer

    def _enter(self, node: Any) -> None:
        node_type = resolve_type(node.type)

        if node_type is NodeType.PARAGRAPH and _in_tight_list(node):
            return
        if node_type in HTML_TYPES and self.policy.skip_html:
            return

        container = node_type in CONTAINER_TYPES
        target = self._target(node)
        key = self._key(node, target)

        if not self.filters.allows_type(node_type):
            if container and not self.filters.unwrap_disallowed:
                logger.debug("Dropping disallowed %s subtree", node_type)
                self.stream.skip(node)
            return

        if container and target.in_image:
            # Containers inside an image description are transparent.
            return

        producer = self._producer(node_type)
        props = build_props(node, node_type, key, self.policy)

        if container:
            staged = _Staged(node_type, producer, props, in_image=node_type is NodeType.IMAGE)
            if self.filters.may_unwrap_late:
                # Children may end up spliced into the target; keep their slots distinct.
                staged.slots = target.slots
            self.staged[id(node)] = staged
            return

        literal = node.literal
        children: list[Output] = [literal] if node_type is NodeType.TEXT and literal else []
        if not self.filters.allows_candidate(NodeCandidate(node_type, producer, props, children)):
            logger.debug("Predicate dropped %s", node_type)
            return
        produced = self._produce(node_type, producer, props, children)
        if target.in_image:
            # Image descriptions only contribute text to the image's alt.
            target.append(_alt_text(node_type, produced))
            return
        target.append(produced)

    def _leave(self, node: Any) -> None:
        staged = self.staged.pop(id(node), None)
        if staged is None:
            # Skipped or unwrapped on entering.
            return

        children = content = staged.children
        if staged.type is NodeType.IMAGE:
            alt = "".join(c for c in children if isinstance(c, str))
            staged.props["alt"] = alt
            children = []
            content = [alt]

        target = self._target(node)
        if not self.filters.allows_candidate(NodeCandidate(staged.type, staged.producer, staged.props, children)):
            if self.filters.unwrap_disallowed:
                logger.debug("Predicate unwrapped %s", staged.type)
                for child in content:
                    target.append(child)
            else:
                logger.debug("Predicate dropped %s", staged.type)
            return

        target.append(self._produce(staged.type, staged.producer, staged.props, children))

    def _produce(
        self,
        node_type: NodeType | str | None,
        producer: Producer | None,
        props: dict[str, Any],
        children: list[Output],
    ) -> Output | None:
        if producer is PASSTHROUGH:
            if node_type is NodeType.SOFTBREAK:
                if self.policy.soft_break_is_element:
                    return element("br", {"key": props["key"]})
                return self.policy.soft_break
            return props.get("literal", "")
        if isinstance(producer, str):
            return element(producer, tag_attrs(node_type, props), tag_children(node_type, props, children))
        if callable(producer):
            return producer({**props, "children": children})
        raise RenderError(f'Invalid renderer for node type "{node_type}"', node_type=str(node_type))


def render(root: SourceNode | Any, *, policy: RenderPolicy = DEFAULT_POLICY) -> list[Element | str]:
    """Render a parsed document into a list of top-level elements and strings.

    `root` is anything with a `walker()` method returning a commonmark-style
    walker; the first entering event is taken to be the document root.
    """
    return _Transducer(policy).run(root)


