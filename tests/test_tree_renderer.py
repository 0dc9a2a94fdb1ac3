"""
Tests for the Tree Renderer

These tests verify:
    - Version invariant rendering of the common variants
    - Two-phase dispatch: AMF3 phase only for AMF3, fallback text at most once
    - Object children order, class definitions and static property formatting
    - Empty documents and the text dump
"""
import datetime

import pytest

from solviewer.model.document import (
    AMFVersion, Bool, ByteArray, ClassDefinition, Date, Dictionary, Document,
    ECMAArray, Element, Header, Integer, Null, Number, Object, StrictArray,
    String, Undefined, Unsupported, XML,
)
from solviewer.view import tree_renderer
from solviewer.view.tree_renderer import (
    AMF3_PHASE, COMMON_PHASE, EMPTY_DOCUMENT_TEXT, FALLBACK_TEXT,
    NO_CLASS_DEFINITION_TEXT, Outcome, TextTarget, TypeHandler, dump_document,
    format_static_properties, phases_for, render_document, render_element,
    render_value,
)


def render_lines(element: Element, version: AMFVersion) -> list:
    target = TextTarget()
    render_element(target, element, version)
    return target.lines()


COMMON_VALUES = [
    Number(1.5),
    Number(-0.25),
    Bool(True),
    Bool(False),
    String("hello"),
    String(""),
    Null(),
    Undefined(),
    Unsupported(),
    XML(content="<a>b</a>", flag=False),
    XML(content="<c/>", flag=True),
]

UNHANDLED_VALUES = [
    Integer(5),
    ECMAArray(elements=(Element("0", Number(1.0)),)),
    StrictArray(values=(Null(),)),
    Date(datetime.datetime(2020, 1, 2, 3, 4, 5)),
    ByteArray(b"\x01\x02"),
    Dictionary(pairs=((String("k"), Number(1.0)),)),
]


class TestScalars:
    """Test rendering of the common scalar variants."""

    @pytest.mark.parametrize("value, expected", [
        (Number(1.5), "x 1.5"),
        (Number(5.0), "x 5.0"),
        (Bool(True), "x true"),
        (Bool(False), "x false"),
        (String("abc"), "x abc"),
        (Null(), "x null"),
        (Undefined(), "x undefined"),
        (Unsupported(), "x unsupported"),
        (XML(content="<a/>", flag=False), "x <a/> false"),
    ])
    def test_value_text(self, value, expected):
        assert render_lines(Element("x", value), AMFVersion.AMF0) == [expected]

    @pytest.mark.parametrize("value", COMMON_VALUES)
    def test_version_invariant(self, value):
        """Common variants render the same in AMF0 and AMF3."""
        element = Element("v", value)
        assert render_lines(element, AMFVersion.AMF0) == render_lines(element, AMFVersion.AMF3)

    @pytest.mark.parametrize("value", COMMON_VALUES)
    def test_common_values_never_fall_back(self, value):
        for version in AMFVersion:
            assert FALLBACK_TEXT not in "\n".join(render_lines(Element("v", value), version))


class TestDispatch:
    """Test the two-phase dispatch and its AMF0 short-circuit."""

    def test_integer_in_amf3_uses_second_phase(self):
        """Pass one is unmatched, pass two renders the integer, no fallback."""
        doc = Document(
            header=Header(name="test", format_version=AMFVersion.AMF3, length=12),
            body=(Element("x", Integer(5)),),
        )
        target = TextTarget()
        render_document(target, doc)

        assert target.lines() == ["x 5"]
        assert run_common(Integer(5)) is Outcome.UNMATCHED

    def test_integer_in_amf0_falls_back(self):
        assert render_lines(Element("x", Integer(5)), AMFVersion.AMF0) == [f"x {FALLBACK_TEXT}"]

    @pytest.mark.parametrize("value", UNHANDLED_VALUES)
    def test_amf0_skips_second_phase(self, value, monkeypatch):
        """Under AMF0 the AMF3 phase is never consulted."""
        calls = []

        def spy(target, v, version):
            calls.append(v)

        monkeypatch.setattr(tree_renderer, "AMF3_PHASE", (TypeHandler(object, spy),))

        lines = render_lines(Element("v", value), AMFVersion.AMF0)

        assert calls == []
        assert lines == [f"v {FALLBACK_TEXT}"]

    def test_amf3_consults_second_phase_when_unmatched(self, monkeypatch):
        calls = []

        def spy(target, v, version):
            calls.append(v)
            target.code("spied")

        monkeypatch.setattr(tree_renderer, "AMF3_PHASE", (TypeHandler(StrictArray, spy),))
        value = StrictArray(values=())

        assert render_lines(Element("v", value), AMFVersion.AMF3) == ["v spied"]
        assert calls == [value]

    def test_amf3_not_consulted_when_common_matches(self, monkeypatch):
        calls = []
        monkeypatch.setattr(tree_renderer, "AMF3_PHASE", (TypeHandler(object, lambda t, v, ver: calls.append(v)),))

        render_lines(Element("v", Number(1.0)), AMFVersion.AMF3)
        assert calls == []

    @pytest.mark.parametrize("value", UNHANDLED_VALUES[1:])
    def test_fallback_shown_once_in_amf3(self, value):
        lines = render_lines(Element("v", value), AMFVersion.AMF3)
        assert "\n".join(lines).count(FALLBACK_TEXT) == 1

    def test_render_value_reports_outcome(self):
        target = TextTarget()
        assert render_value(target, Number(1.0), AMFVersion.AMF0) is Outcome.RENDERED
        assert render_value(target, Integer(1), AMFVersion.AMF3) is Outcome.RENDERED
        assert render_value(target, Integer(1), AMFVersion.AMF0) is Outcome.UNMATCHED

    def test_phases_for(self):
        assert phases_for(AMFVersion.AMF0) == (COMMON_PHASE,)
        assert phases_for(AMFVersion.AMF3) == (COMMON_PHASE, AMF3_PHASE)


def run_common(value):
    return tree_renderer.run_phase(COMMON_PHASE, TextTarget(), value, AMFVersion.AMF3)


class TestObjects:
    """Test rendering of Object values."""

    def test_children_in_order_with_class_definition(self):
        value = Object(
            children=(Element("a", Number(1.0)), Element("b", String("s")), Element("a", Bool(True))),
            class_def=ClassDefinition(name="Foo", static_properties=("a", "b")),
        )

        assert render_lines(Element("obj", value), AMFVersion.AMF3) == [
            "obj",
            "  a 1.0",
            "  b s",
            "  a true",
            "  Class Definition: Foo",
            '    Static Properties: ["a", "b"]',
        ]

    def test_child_count_matches(self):
        children = tuple(Element(f"c{i}", Number(float(i))) for i in range(7))
        target = TextTarget()
        render_element(target, Element("obj", Object(children=children, class_def=ClassDefinition())), AMFVersion.AMF3)

        child_rows = [cells[0] for level, cells in target.rows if level == 1 and cells[0].startswith("c")]
        assert child_rows == [f"c{i}" for i in range(7)]

    def test_empty_class_name_marker(self):
        value = Object(children=(), class_def=ClassDefinition(name="", static_properties=()))

        assert render_lines(Element("o", value), AMFVersion.AMF3) == [
            "o",
            '  Class Definition: ""',
            "    Static Properties: []",
        ]

    def test_no_class_definition(self):
        value = Object(children=(), class_def=None)
        assert render_lines(Element("o", value), AMFVersion.AMF0) == [f"o {NO_CLASS_DEFINITION_TEXT}"]

    def test_no_class_definition_after_children(self):
        value = Object(children=(Element("a", Null()),), class_def=None)
        assert render_lines(Element("o", value), AMFVersion.AMF0) == [
            "o",
            "  a null",
            NO_CLASS_DEFINITION_TEXT,
        ]

    def test_nested_objects_indent_further(self):
        inner = Object(children=(Element("leaf", Integer(3)),), class_def=ClassDefinition())
        outer = Object(children=(Element("inner", inner),), class_def=ClassDefinition(name="Outer"))

        lines = render_lines(Element("outer", outer), AMFVersion.AMF3)

        assert lines[:3] == ["outer", "  inner", "    leaf 3"]
        assert "  Class Definition: Outer" in lines

    def test_integer_child_in_amf0_object(self):
        value = Object(children=(Element("n", Integer(1)),), class_def=None)
        lines = render_lines(Element("o", value), AMFVersion.AMF0)
        assert lines[1] == f"  n {FALLBACK_TEXT}"


class TestStaticProperties:
    @pytest.mark.parametrize("properties, expected", [
        ((), "[]"),
        (("p1",), '["p1"]'),
        (("p1", "p2", "p3"), '["p1", "p2", "p3"]'),
    ])
    def test_format(self, properties, expected):
        assert format_static_properties(properties) == expected


class TestDocument:
    def test_empty_document_renders_nothing(self):
        target = TextTarget()
        render_document(target, Document.empty())
        assert target.rows == []

    def test_dump_empty(self):
        assert dump_document(Document.empty()) == EMPTY_DOCUMENT_TEXT

    def test_dump_loaded(self):
        doc = Document(
            header=Header(name="test", format_version=AMFVersion.AMF3, length=12),
            body=(Element("x", Integer(5)), Element("s", String("v"))),
        )
        assert dump_document(doc).splitlines() == [
            "Name: test",
            "SOL/AMF Version: AMF3",
            "Length: 12",
            "x 5",
            "s v",
        ]
