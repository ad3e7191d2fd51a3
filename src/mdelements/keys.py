"""Identity keys and source-position strings for visited nodes.

Keys are derived from the source position of a node (its own, or the nearest
positioned ancestor's). Runs of nodes sharing one position get a running
suffix: "1:1-1:3", "1:1-1:30", "1:1-1:31", ... The counter is threaded through
the render loop as a `KeyState` value rather than kept in module state.
"""

from __future__ import annotations

from typing import Any, NamedTuple


class KeyState(NamedTuple):
    signature: str | None = None
    counter: int = -1


INITIAL_KEY_STATE = KeyState()


def sourcepos_string(node: Any) -> str | None:
    """Flatten a node's own source position to "startLine:startCol-endLine:endCol"."""
    pos = getattr(node, "sourcepos", None)
    if not pos:
        return None
    (start_line, start_col), (end_line, end_col) = pos
    return f"{start_line}:{start_col}-{end_line}:{end_col}"


def position_signature(node: Any) -> str | None:
    """Return the position string of `node` or of its nearest positioned ancestor."""
    current = node
    while current is not None:
        pos = sourcepos_string(current)
        if pos is not None:
            return pos
        current = getattr(current, "parent", None)
    return None


def next_key(state: KeyState, signature: str) -> tuple[str, KeyState]:
    if signature == state.signature:
        counter = state.counter + 1
        return f"{signature}{counter}", KeyState(signature, counter)
    return signature, KeyState(signature, -1)
