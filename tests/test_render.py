from __future__ import annotations

import unittest

from mdelements import (
    Element,
    NodeType,
    RenderError,
    RenderPolicy,
    SourceNode,
    WalkEvent,
    element,
    render,
    to_html,
)


def _doc(*children: SourceNode) -> SourceNode:
    doc = SourceNode(NodeType.DOCUMENT)
    for child in children:
        doc.append_child(child)
    return doc


def _node(node_type, *children: SourceNode, **kwargs) -> SourceNode:
    node = SourceNode(node_type, **kwargs)
    for child in children:
        node.append_child(child)
    return node


def _text(value: str) -> SourceNode:
    return SourceNode(NodeType.TEXT, value)


class _FakeRoot:
    """Something that only quacks like a document: a `walker()` over scripted events."""

    def __init__(self, events):
        self.events = events

    def walker(self):
        events = list(self.events)

        class _Walker:
            def next(self):
                return events.pop(0) if events else None

        return _Walker()


class TestRenderBasics(unittest.TestCase):
    def test_paragraph_with_emphasis(self) -> None:
        doc = _doc(
            _node(
                NodeType.PARAGRAPH,
                _text("React is "),
                _node(NodeType.STRONG, _text("totally")),
                _text(" "),
                _node(NodeType.EMPH, _text("awesome")),
            )
        )
        out = render(doc)
        assert to_html(out) == "<p>React is <strong>totally</strong> <em>awesome</em></p>"

    def test_output_is_list_of_top_level_nodes(self) -> None:
        doc = _doc(
            _node(NodeType.PARAGRAPH, _text("a")),
            _node(NodeType.THEMATIC_BREAK),
            _node(NodeType.PARAGRAPH, _text("b")),
        )
        out = render(doc)
        assert [e.tag for e in out] == ["p", "hr", "p"]
        assert all(isinstance(e, Element) for e in out)

    def test_empty_document(self) -> None:
        assert render(_doc()) == []

    def test_source_tree_is_not_modified(self) -> None:
        para = _node(NodeType.PARAGRAPH, _text("a"))
        doc = _doc(para)
        render(doc, policy=RenderPolicy(disallowed_types=["paragraph"]))
        assert doc.first_child is para
        assert para.first_child.literal == "a"

    def test_adjacent_text_is_merged(self) -> None:
        doc = _doc(_node(NodeType.PARAGRAPH, _text("What does "), _text('"this"'), _text(" thing turn into?")))
        (para,) = render(doc)
        assert para.children == ('What does "this" thing turn into?',)

    def test_top_level_text_passes_through(self) -> None:
        assert render(_doc(_text("loose"))) == ["loose"]


class TestKeys(unittest.TestCase):
    def test_positional_keys(self) -> None:
        doc = _doc(
            _node(
                NodeType.PARAGRAPH,
                _text("a"),
                _node(NodeType.EMPH, _text("b")),
                sourcepos=((1, 1), (1, 3)),
            ),
            _node(NodeType.PARAGRAPH, _node(NodeType.STRONG, _text("c")), sourcepos=((3, 1), (3, 5))),
        )
        first, second = render(doc)
        assert first.key == "1:1-1:3"
        # text "a" took "1:1-1:30"
        assert first.children[1].key == "1:1-1:31"
        assert second.key == "3:1-3:5"
        assert second.children[0].key == "3:1-3:50"

    def test_fallback_keys_are_unique_among_siblings(self) -> None:
        doc = _doc(
            _node(NodeType.PARAGRAPH, _text("a"), _node(NodeType.EMPH, _text("b")), _node(NodeType.STRONG, _text("c"))),
            _node(NodeType.THEMATIC_BREAK),
        )
        para, rule = render(doc)
        assert para.key == 0
        assert rule.key == 1
        assert [c.key for c in para.children[1:]] == [1, 2]

    def test_unwrapped_children_keep_distinct_keys(self) -> None:
        def no_emph(node):
            return node.type != "emph"

        doc = _doc(
            _node(
                NodeType.PARAGRAPH,
                _node(NodeType.STRONG, _text("x")),
                _node(NodeType.EMPH, _node(NodeType.STRONG, _text("y"))),
            )
        )
        (para,) = render(doc, policy=RenderPolicy(allow_node=no_emph, unwrap_disallowed=True))
        assert [c.tag for c in para.children] == ["strong", "strong"]
        keys = [c.key for c in para.children]
        assert len(set(keys)) == 2

    def test_keys_never_render_as_attributes(self) -> None:
        doc = _doc(_node(NodeType.PARAGRAPH, _text("a"), sourcepos=((1, 1), (1, 1))))
        assert to_html(render(doc)) == "<p>a</p>"


class TestFiltering(unittest.TestCase):
    def _doc(self) -> SourceNode:
        return _doc(
            _node(
                NodeType.PARAGRAPH,
                _text("Espen "),
                _node(NodeType.EMPH, _text("initiated")),
                _text(" this, but has had several "),
                _node(NodeType.STRONG, _text("contributors")),
            )
        )

    def test_disallowed_container_is_dropped_with_children(self) -> None:
        out = render(self._doc(), policy=RenderPolicy(disallowed_types=["emph", "strong"]))
        assert to_html(out) == "<p>Espen  this, but has had several </p>"

    def test_disallowed_container_is_unwrapped(self) -> None:
        policy = RenderPolicy(disallowed_types=["emph", "strong"], unwrap_disallowed=True)
        out = render(self._doc(), policy=policy)
        assert to_html(out) == "<p>Espen initiated this, but has had several contributors</p>"
        assert out[0].children == ("Espen initiated this, but has had several contributors",)

    def test_disallowed_leaf_is_dropped_even_when_unwrapping(self) -> None:
        doc = _doc(_node(NodeType.PARAGRAPH, _text("a"), _node(NodeType.HARDBREAK), _text("b")))
        out = render(doc, policy=RenderPolicy(disallowed_types=["hardbreak"], unwrap_disallowed=True))
        assert to_html(out) == "<p>ab</p>"

    def test_allowed_types(self) -> None:
        out = render(self._doc(), policy=RenderPolicy(allowed_types=["paragraph", "text"]))
        assert to_html(out) == "<p>Espen  this, but has had several </p>"

    def test_predicate_sees_final_props_and_children(self) -> None:
        seen = []

        def allow(candidate):
            seen.append(candidate)
            return True

        doc = _doc(_node(NodeType.PARAGRAPH, _node(NodeType.LINK, _text("here"), destination="/x")))
        render(doc, policy=RenderPolicy(allow_node=allow))
        link = next(c for c in seen if c.type == NodeType.LINK)
        assert link.props["href"] == "/x"
        assert link.children == ["here"]
        assert link.producer == "a"

    def test_predicate_drops_node(self) -> None:
        def no_strong(candidate):
            return candidate.type != NodeType.STRONG

        out = render(self._doc(), policy=RenderPolicy(allow_node=no_strong))
        assert to_html(out) == "<p>Espen <em>initiated</em> this, but has had several </p>"

    def test_predicate_unwraps_node(self) -> None:
        def no_strong(candidate):
            return candidate.type != NodeType.STRONG

        out = render(self._doc(), policy=RenderPolicy(allow_node=no_strong, unwrap_disallowed=True))
        assert to_html(out) == "<p>Espen <em>initiated</em> this, but has had several contributors</p>"

    def test_predicate_is_not_called_for_type_filtered_nodes(self) -> None:
        seen = []

        def allow(candidate):
            seen.append(candidate.type)
            return True

        render(self._doc(), policy=RenderPolicy(disallowed_types=["emph"], allow_node=allow))
        assert NodeType.EMPH not in seen
        assert NodeType.STRONG in seen


class TestProducers(unittest.TestCase):
    def test_function_producer_gets_semantic_props(self) -> None:
        calls = []

        def heading(props):
            calls.append(props)
            return element("div", {"key": props["key"], "class": f"level-{props['level']}"}, props["children"])

        doc = _doc(_node(NodeType.HEADING, _text("Header"), level=1))
        out = render(doc, policy=RenderPolicy(renderers={"heading": heading}))
        assert to_html(out) == '<div class="level-1">Header</div>'
        assert calls[0]["level"] == 1
        assert calls[0]["children"] == ["Header"]

    def test_tag_producer_override(self) -> None:
        doc = _doc(_node(NodeType.BLOCK_QUOTE, _node(NodeType.PARAGRAPH, _text("q"))))
        out = render(doc, policy=RenderPolicy(renderers={"block_quote": "aside"}))
        assert to_html(out) == "<aside><p>q</p></aside>"

    def test_producer_returning_none_contributes_nothing(self) -> None:
        doc = _doc(_node(NodeType.PARAGRAPH, _text("a"), _node(NodeType.CODE, literal="x"), _text("b")))
        out = render(doc, policy=RenderPolicy(renderers={"code": lambda props: None}))
        assert to_html(out) == "<p>ab</p>"

    def test_text_producer_override(self) -> None:
        doc = _doc(_node(NodeType.PARAGRAPH, _text("shout")))
        out = render(doc, policy=RenderPolicy(renderers={"text": lambda props: props["literal"].upper()}))
        assert to_html(out) == "<p>SHOUT</p>"

    def test_soft_break_text_and_element(self) -> None:
        def doc():
            return _doc(_node(NodeType.PARAGRAPH, _text("a"), _node(NodeType.SOFTBREAK), _text("b")))

        assert to_html(render(doc())) == "<p>a\nb</p>"
        assert to_html(render(doc(), policy=RenderPolicy(soft_break=" "))) == "<p>a b</p>"
        assert to_html(render(doc(), policy=RenderPolicy(soft_break="br"))) == "<p>a<br/>b</p>"

    def test_tight_list_paragraphs_are_skipped(self) -> None:
        doc = _doc(
            _node(
                NodeType.LIST,
                _node(NodeType.ITEM, _node(NodeType.PARAGRAPH, _text("one"))),
                _node(NodeType.ITEM, _node(NodeType.PARAGRAPH, _text("two"))),
                list_type="ordered",
                list_start=3,
                list_tight=True,
            )
        )
        assert to_html(render(doc)) == '<ol start="3"><li>one</li><li>two</li></ol>'

    def test_loose_list_keeps_paragraphs(self) -> None:
        doc = _doc(
            _node(
                NodeType.LIST,
                _node(NodeType.ITEM, _node(NodeType.PARAGRAPH, _text("one"))),
                list_type="bullet",
                list_tight=False,
            )
        )
        assert to_html(render(doc)) == "<ul><li><p>one</p></li></ul>"

    def test_image_alt_from_descendants(self) -> None:
        image = _node(
            NodeType.IMAGE,
            _text("a "),
            _node(NodeType.EMPH, _text("fancy")),
            _node(NodeType.CODE, literal=" ninja"),
            destination="/ninja.png",
            title="Ninja",
        )
        (para,) = render(_doc(_node(NodeType.PARAGRAPH, image)))
        img = para.children[0]
        assert img.props["alt"] == "a fancy ninja"
        assert img.props["title"] == "Ninja"
        assert img.children == ()

    def test_image_transformer(self) -> None:
        image = _node(NodeType.IMAGE, _text("x"), destination="/ninja.png")
        policy = RenderPolicy(transform_image_uri=lambda uri: "https://cdn.example" + uri)
        out = render(_doc(_node(NodeType.PARAGRAPH, image)), policy=policy)
        assert to_html(out) == '<p><img src="https://cdn.example/ninja.png" alt="x"/></p>'


class TestRenderErrors(unittest.TestCase):
    def test_unknown_allowed_type_raises(self) -> None:
        doc = SourceNode(NodeType.DOCUMENT)
        fake = SourceNode("FakeType")
        root = _FakeRoot([WalkEvent(doc, True), WalkEvent(fake, True), WalkEvent(doc, False)])
        with self.assertRaises(RenderError) as ctx:
            render(root, policy=RenderPolicy(allowed_types=["FakeType"]))
        assert "FakeType" in str(ctx.exception)
        assert ctx.exception.node_type == "FakeType"

    def test_unknown_type_is_dropped_by_default(self) -> None:
        doc = SourceNode(NodeType.DOCUMENT)
        fake = SourceNode("FakeType")
        root = _FakeRoot([WalkEvent(doc, True), WalkEvent(fake, True), WalkEvent(doc, False)])
        assert render(root) == []

    def test_unknown_type_with_renderer(self) -> None:
        doc = _doc(SourceNode("table", "|a|"))
        policy = RenderPolicy(allowed_types=["table"], renderers={"table": lambda props: element("table", None, "x")})
        assert to_html(render(doc, policy=policy)) == "<table>x</table>"

    def test_walker_without_events(self) -> None:
        assert render(_FakeRoot([])) == []
