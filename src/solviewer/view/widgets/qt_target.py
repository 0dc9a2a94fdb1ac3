"""
Qt implementation of the RenderTarget protocol.

Every `label` call opens a QHBoxLayout row, `code` adds a selectable monospace
QLabel to it and `indent` nests a new QVBoxLayout with a left margin.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QFontDatabase
from PySide6.QtWidgets import QHBoxLayout, QLabel, QVBoxLayout, QWidget

from solviewer.config import INDENT_STEP_PX

CODE_STYLE = "background-color: palette(alternate-base); padding: 1px 4px;"


def make_code_label(text: str) -> QLabel:
    lbl = QLabel(text)
    lbl.setFont(QFontDatabase.systemFont(QFontDatabase.FixedFont))
    lbl.setTextFormat(Qt.PlainText)
    lbl.setTextInteractionFlags(Qt.TextSelectableByMouse)
    lbl.setStyleSheet(CODE_STYLE)
    return lbl


class QtTarget:
    def __init__(self, layout: QVBoxLayout) -> None:
        self.layout = layout
        self._row: Optional[QHBoxLayout] = None

    def _new_row(self) -> QHBoxLayout:
        row = QHBoxLayout()
        row.setContentsMargins(0, 0, 0, 0)
        row.addStretch()
        self.layout.addLayout(row)
        self._row = row
        return row

    def _add_to_row(self, widget: QWidget) -> None:
        row = self._row if self._row is not None else self._new_row()
        # Keep the trailing stretch last
        row.insertWidget(row.count() - 1, widget)

    def label(self, text: str) -> None:
        self._new_row()
        lbl = QLabel(text)
        lbl.setTextFormat(Qt.PlainText)
        self._add_to_row(lbl)

    def code(self, text: str) -> None:
        self._add_to_row(make_code_label(text))

    @contextmanager
    def indent(self, levels: int = 1) -> Iterator[QtTarget]:
        block = QVBoxLayout()
        block.setContentsMargins(INDENT_STEP_PX * levels, 0, 0, 0)
        block.setSpacing(self.layout.spacing())
        self.layout.addLayout(block)

        self._row = None
        yield QtTarget(block)
        self._row = None
