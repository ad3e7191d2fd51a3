from .element import Element, element
from .errors import ConfigurationError, MarkdownElementsError, RenderError
from .filters import NodeCandidate
from .nodes import TYPES, NodeType, SourceNode
from .parser import create_parser, markdown_to_html, parse, render_markdown
from .policy import DEFAULT_POLICY, RenderPolicy
from .producers import DEFAULT_PRODUCERS, PASSTHROUGH
from .render import render
from .serialize import to_html, to_test_format
from .uri import uri_transformer
from .walker import EventStream, WalkEvent, Walker

__all__ = [
    "DEFAULT_POLICY",
    "DEFAULT_PRODUCERS",
    "PASSTHROUGH",
    "TYPES",
    "ConfigurationError",
    "Element",
    "EventStream",
    "MarkdownElementsError",
    "NodeCandidate",
    "NodeType",
    "RenderError",
    "RenderPolicy",
    "SourceNode",
    "WalkEvent",
    "Walker",
    "create_parser",
    "element",
    "markdown_to_html",
    "parse",
    "render",
    "render_markdown",
    "to_html",
    "to_test_format",
    "uri_transformer",
]
