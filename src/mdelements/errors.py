"""Exception types raised by mdelements."""

from __future__ import annotations


class MarkdownElementsError(Exception):
    """Base class for all mdelements errors."""


class ConfigurationError(MarkdownElementsError, ValueError):
    """Raised when a RenderPolicy is built from invalid options.

    Always raised eagerly, before any render happens.
    """


class RenderError(MarkdownElementsError):
    """Raised when the tree cannot be transduced (e.g. no producer for a node type).

    A render either fully succeeds or raises this; partial output is never returned.
    """

    def __init__(self, message: str, *, node_type: str | None = None) -> None:
        super().__init__(message)
        self.node_type = node_type
