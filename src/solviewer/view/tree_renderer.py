"""
Tree Renderer
=============
Walks a Document's value tree and renders every element into a RenderTarget.

Why is this file needed?
------------------------
1. Dispatch: Values are rendered by an ordered list of typed handlers in two
   phases. The common phase covers types valid in AMF0 and AMF3. The AMF3
   phase is only consulted for AMF3 documents, and only when the common phase
   did not match. Whatever is still unmatched shows FALLBACK_TEXT exactly once.
2. Toolkit independence: The renderer only talks to the small RenderTarget
   protocol. The Qt widgets implement it in view/widgets/qt_target.py, and
   TextTarget below renders to plain text for logs and tests.

Functions:
    render_document: Render the whole body (nothing for an empty document).
    render_element: Render one element and its subtree.
    render_value: Two-phase dispatch for a single value.
    dump_document: Header + body as plain text.
"""
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Callable, ContextManager, Iterator, List, Protocol, Sequence, Tuple

from solviewer.model.document import (
    AMFVersion, Bool, ClassDefinition, Document, Element, Integer, Null, Number,
    Object, String, Undefined, Unsupported, Value, XML,
)

FALLBACK_TEXT = "Couldn't find type."
NO_CLASS_DEFINITION_TEXT = "No Class Definition Found!"
EMPTY_DOCUMENT_TEXT = "No SOL file loaded."


class RenderTarget(Protocol):
    """
    Minimal widget surface the renderer draws on.

    `label` starts a new row, `code` appends a monospace value to the current
    row, `indent` opens a nested block `levels` steps further to the right.
    """

    def label(self, text: str) -> None: ...

    def code(self, text: str) -> None: ...

    def indent(self, levels: int = 1) -> ContextManager[RenderTarget]: ...


class Outcome(Enum):
    RENDERED = "rendered"
    UNMATCHED = "unmatched"


@dataclass(frozen=True)
class TypeHandler:
    """Renders values of one variant and reports UNMATCHED for all others."""
    value_type: type
    render: Callable[[RenderTarget, Value, AMFVersion], None]

    def __call__(self, target: RenderTarget, value: Value, version: AMFVersion) -> Outcome:
        if not isinstance(value, self.value_type):
            return Outcome.UNMATCHED
        self.render(target, value, version)
        return Outcome.RENDERED


Phase = Sequence[TypeHandler]


# --- VALUE FORMATTING ---

def format_bool(value: bool) -> str:
    return "true" if value else "false"


def format_static_properties(properties: Sequence[str]) -> str:
    """['a', 'b'] -> '["a", "b"]', empty -> '[]'."""
    return "[" + ", ".join(f'"{p}"' for p in properties) + "]"


# --- HANDLERS ---

def _render_number(target: RenderTarget, value: Number, version: AMFVersion) -> None:
    target.code(repr(float(value.value)))


def _render_bool(target: RenderTarget, value: Bool, version: AMFVersion) -> None:
    target.code(format_bool(value.value))


def _render_string(target: RenderTarget, value: String, version: AMFVersion) -> None:
    target.code(value.value)


def _render_null(target: RenderTarget, value: Null, version: AMFVersion) -> None:
    target.code("null")


def _render_undefined(target: RenderTarget, value: Undefined, version: AMFVersion) -> None:
    target.code("undefined")


def _render_unsupported(target: RenderTarget, value: Unsupported, version: AMFVersion) -> None:
    target.code("unsupported")


def _render_xml(target: RenderTarget, value: XML, version: AMFVersion) -> None:
    target.code(value.content)
    target.code(format_bool(value.flag))


def _render_integer(target: RenderTarget, value: Integer, version: AMFVersion) -> None:
    target.code(str(value.value))


def _render_object(target: RenderTarget, value: Object, version: AMFVersion) -> None:
    for child in value.children:
        with target.indent(1) as inner:
            render_element(inner, child, version)

    if value.class_def is None:
        target.code(NO_CLASS_DEFINITION_TEXT)
        return

    _render_class_definition(target, value.class_def)


def _render_class_definition(target: RenderTarget, class_def: ClassDefinition) -> None:
    with target.indent(1) as inner:
        inner.label("Class Definition:")
        inner.code(class_def.name if class_def.name else '""')

    with target.indent(2) as inner:
        inner.label("Static Properties:")
        inner.code(format_static_properties(class_def.static_properties))


# Order matters, the first matching handler wins
COMMON_PHASE: Tuple[TypeHandler, ...] = (
    TypeHandler(Number, _render_number),
    TypeHandler(Bool, _render_bool),
    TypeHandler(String, _render_string),
    TypeHandler(Object, _render_object),
    TypeHandler(Null, _render_null),
    TypeHandler(Undefined, _render_undefined),
    TypeHandler(Unsupported, _render_unsupported),
    TypeHandler(XML, _render_xml),
)

AMF3_PHASE: Tuple[TypeHandler, ...] = (
    TypeHandler(Integer, _render_integer),
)


def run_phase(phase: Phase, target: RenderTarget, value: Value, version: AMFVersion) -> Outcome:
    for handler in phase:
        if handler(target, value, version) is Outcome.RENDERED:
            return Outcome.RENDERED
    return Outcome.UNMATCHED


def phases_for(version: AMFVersion) -> Tuple[Phase, ...]:
    """
    AMF0 cannot encode AMF3-only types, so its documents never try the AMF3 phase.
    """
    if version is AMFVersion.AMF3:
        return COMMON_PHASE, AMF3_PHASE
    return (COMMON_PHASE,)


def render_value(target: RenderTarget, value: Value, version: AMFVersion) -> Outcome:
    """
    Render `value`. Returns UNMATCHED when only the fallback text was shown.
    """
    for phase in phases_for(version):
        if run_phase(phase, target, value, version) is Outcome.RENDERED:
            return Outcome.RENDERED

    target.code(FALLBACK_TEXT)
    return Outcome.UNMATCHED


def render_element(target: RenderTarget, element: Element, version: AMFVersion) -> None:
    target.label(element.name)
    render_value(target, element.value, version)


def render_document(target: RenderTarget, document: Document) -> None:
    """Render the body of a loaded document. Empty documents render nothing."""
    if document.is_empty:
        return

    version = document.header.format_version
    for element in document.body:
        render_element(target, element, version)


# --- PLAIN TEXT TARGET ---

class TextTarget:
    """
    RenderTarget that collects rows of text.

    Each row is stored as (indent level, cells). `label` opens a row, `code`
    adds a cell to it.
    """

    def __init__(self, level: int = 0, rows: List[Tuple[int, List[str]]] | None = None) -> None:
        self.level = level
        self.rows: List[Tuple[int, List[str]]] = rows if rows is not None else []
        self._current: List[str] | None = None

    def label(self, text: str) -> None:
        self._current = [text]
        self.rows.append((self.level, self._current))

    def code(self, text: str) -> None:
        if self._current is None:
            self.label(text)
            return
        self._current.append(text)

    @contextmanager
    def indent(self, levels: int = 1) -> Iterator[TextTarget]:
        self._current = None
        yield TextTarget(level=self.level + levels, rows=self.rows)
        self._current = None

    def lines(self) -> List[str]:
        return ["  " * level + " ".join(cells) for level, cells in self.rows]

    def text(self) -> str:
        return "\n".join(self.lines())


def dump_document(document: Document) -> str:
    """Header and body as text, used for debug logging."""
    if document.is_empty:
        return EMPTY_DOCUMENT_TEXT

    target = TextTarget()
    header = document.header
    target.label("Name:")
    target.code(header.name)
    target.label("SOL/AMF Version:")
    target.code(str(header.format_version))
    target.label("Length:")
    target.code(str(header.length))
    render_document(target, document)
    return target.text()
