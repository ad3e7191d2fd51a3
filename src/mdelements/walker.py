"""Entering/leaving traversal over a source tree.

`Walker` produces events lazily, one `next()` at a time, in the same shape as
commonmark's NodeWalker. `EventStream` adapts any such walker into an iterable
the renderer consumes, adding "skip this subtree".
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NamedTuple

from .errors import RenderError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .nodes import SourceNode


class WalkEvent(NamedTuple):
    node: Any
    entering: bool


class Walker:
    """Pre/post-order walk: entering events in document order, and a leaving
    event for each container after all of its descendants."""

    __slots__ = ("current", "entering", "root")

    def __init__(self, root: SourceNode) -> None:
        self.root = root
        self.current: SourceNode | None = root
        self.entering = True

    def next(self) -> WalkEvent | None:
        cur = self.current
        entering = self.entering
        if cur is None:
            return None

        if entering and cur.is_container:
            if cur.first_child is not None:
                self.current = cur.first_child
                self.entering = True
            else:
                # Empty container: leave it straight away.
                self.entering = False
        elif cur is self.root:
            self.current = None
        elif cur.next is None:
            self.current = cur.parent
            self.entering = False
        else:
            self.current = cur.next
            self.entering = True

        return WalkEvent(cur, entering)

    def resume_at(self, node: SourceNode, entering: bool) -> None:
        self.current = node
        self.entering = entering


class EventStream:
    """Iterable view over a walker's events with subtree skipping.

    The wrapped walker only needs `next()` returning an event (with `node` and
    `entering`) or None, and `resume_at(node, entering)` if `skip()` is used.
    """

    __slots__ = ("_walker",)

    def __init__(self, walker: Any) -> None:
        self._walker = walker

    def __iter__(self) -> Iterator[WalkEvent]:
        while True:
            event = self._walker.next()
            if event is None:
                return
            yield WalkEvent(event.node, bool(event.entering))

    def skip(self, node: Any) -> None:
        """Resume after `node`'s subtree without visiting its descendants.

        Must be called while `node`'s entering event is the current one.
        """
        self._walker.resume_at(node, False)
        # The next event is the node's own leaving event; swallow it.
        event = self._walker.next()
        if event is not None and (event.node is not node or event.entering):
            raise RenderError("walker did not resume at the leaving event of the skipped node")
