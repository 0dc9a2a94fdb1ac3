"""
Document View (Central Panel)
=============================
Shows the current AppState: either the "No SOL file loaded." placeholder, or
the header fields followed by the rendered body tree. A load error is shown
as an inline banner above both.
"""
import logging

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QScrollArea, QStackedWidget, QFormLayout
)

from solviewer.model.state import AppState
from solviewer.view.tree_renderer import EMPTY_DOCUMENT_TEXT, render_document
from solviewer.view.widgets.qt_target import QtTarget, make_code_label

logger = logging.getLogger(__name__)

HEADING_STYLE = "font-size: 16pt; font-weight: bold;"
ERROR_STYLE = "color: #b00020; font-weight: bold;"


def make_heading(text: str) -> QLabel:
    lbl = QLabel(text)
    lbl.setStyleSheet(HEADING_STYLE)
    return lbl


class DocumentView(QWidget):
    # Emitted while the user edits the header name
    name_edited = Signal(str)

    def __init__(self) -> None:
        super().__init__()

        layout = QVBoxLayout(self)

        # --- Error banner ---
        self.lbl_error = QLabel("")
        self.lbl_error.setStyleSheet(ERROR_STYLE)
        self.lbl_error.setWordWrap(True)
        self.lbl_error.setVisible(False)
        layout.addWidget(self.lbl_error)

        self.stack = QStackedWidget()
        layout.addWidget(self.stack)

        # --- Page 0: Empty ---
        empty_page = QWidget()
        empty_layout = QVBoxLayout(empty_page)
        empty_layout.addWidget(make_heading(EMPTY_DOCUMENT_TEXT))
        empty_layout.addStretch()
        self.stack.addWidget(empty_page)

        # --- Page 1: Loaded ---
        loaded_page = QWidget()
        loaded_layout = QVBoxLayout(loaded_page)

        loaded_layout.addWidget(make_heading("Header"))
        form = QFormLayout()

        self.edit_name = QLineEdit()
        self.edit_name.textEdited.connect(self.name_edited.emit)
        form.addRow("Name:", self.edit_name)

        self.lbl_version = make_code_label("")
        form.addRow("SOL/AMF Version:", self._wrap_left(self.lbl_version))

        self.lbl_length = make_code_label("")
        form.addRow("Length:", self._wrap_left(self.lbl_length))
        loaded_layout.addLayout(form)

        loaded_layout.addWidget(make_heading("Body"))
        self.scroll = QScrollArea()
        self.scroll.setWidgetResizable(True)
        loaded_layout.addWidget(self.scroll)
        self.stack.addWidget(loaded_page)

    @staticmethod
    def _wrap_left(widget: QWidget) -> QWidget:
        holder = QWidget()
        row = QHBoxLayout(holder)
        row.setContentsMargins(0, 0, 0, 0)
        row.addWidget(widget)
        row.addStretch()
        return holder

    # --- PUBLIC API ---

    def refresh(self, state: AppState) -> None:
        """Rebuild the view from the state after a load or a failed load."""
        self._update_error(state)

        if not state.is_loaded:
            self.stack.setCurrentIndex(0)
            return

        header = state.document.header
        # setText does not emit textEdited, the state is not touched
        self.edit_name.setText(header.name)
        self.lbl_version.setText(str(header.format_version))
        self.lbl_length.setText(str(header.length))

        self._rebuild_body(state)
        self.stack.setCurrentIndex(1)

    def _update_error(self, state: AppState) -> None:
        if state.error is None:
            self.lbl_error.setVisible(False)
            self.lbl_error.setText("")
            return
        self.lbl_error.setText(f"Could not open file: {state.error}")
        self.lbl_error.setVisible(True)

    def _rebuild_body(self, state: AppState) -> None:
        container = QWidget()
        body_layout = QVBoxLayout(container)
        body_layout.setAlignment(Qt.AlignTop)
        body_layout.setSpacing(2)

        render_document(QtTarget(body_layout), state.document)
        body_layout.addStretch()

        # QScrollArea deletes the previous container
        self.scroll.setWidget(container)
        logger.debug(f"Rendered {len(state.document.body)} top-level elements")
