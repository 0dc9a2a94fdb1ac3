"""
Main Application Window
=======================
The primary GUI container that holds the Menu Bar, the Document View and the
frame timer.

Why is this file needed?
------------------------
1. Layout: It organizes the high-level visual structure of the application.
2. Routing: It connects global actions (File -> Open..., File -> Exit) to the
   file-open task.
3. Frame loop: A QTimer ticks the app loop every frame so messages from
   background loads are applied even when the user is idle.
"""
import logging
import os

from PySide6.QtWidgets import QMainWindow
from PySide6.QtCore import QTimer
from PySide6.QtGui import QAction

from solviewer.config import FRAME_INTERVAL_MS, VISIBLE_APP_NAME
from solviewer.controller.app_loop import AppLoop
from solviewer.controller.message_bus import MessageBus
from solviewer.controller.workers import FileOpenTask
from solviewer.model.state import AppState
from solviewer.view.widgets.document_view import DocumentView

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, state: AppState) -> None:
        super().__init__()
        self.state: AppState = state
        self.bus = MessageBus()
        self.loop = AppLoop(self.bus, self.state)
        self.open_task = FileOpenTask(self.bus, self)

        self.update_window_title()
        self.resize(900, 700)

        # --- CENTRAL PANEL ---
        self.document_view = DocumentView()
        self.setCentralWidget(self.document_view)
        self.document_view.name_edited.connect(self.on_name_edited)

        # --- ACTIONS & MENUS ---
        self._create_actions()
        self._create_menus()

        # --- FRAME TIMER ---
        self.frame_timer = QTimer(self)
        self.frame_timer.setInterval(FRAME_INTERVAL_MS)
        self.frame_timer.timeout.connect(self.on_frame)
        self.frame_timer.start()

        # Initial Render
        self.document_view.refresh(self.state)

    def _create_actions(self) -> None:
        self.act_open = QAction("Open...", self)
        self.act_open.setShortcut("Ctrl+O")
        self.act_open.triggered.connect(self.on_file_open)

        self.act_exit = QAction("Exit", self)
        self.act_exit.triggered.connect(self.close)

    def _create_menus(self) -> None:
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&File")
        file_menu.addAction(self.act_open)
        file_menu.addSeparator()
        file_menu.addAction(self.act_exit)

    # --- HELPER METHODS ---
    def update_window_title(self) -> None:
        """Updates the window title based on the loaded file."""
        if self.state.source_path:
            self.setWindowTitle(f"{VISIBLE_APP_NAME} - [{os.path.basename(self.state.source_path)}]")
        else:
            self.setWindowTitle(VISIBLE_APP_NAME)

    # --- SLOTS ---

    def on_frame(self) -> None:
        """Called every FRAME_INTERVAL_MS by the frame timer."""
        if not self.loop.tick():
            return

        self.update_window_title()
        self.document_view.refresh(self.state)

        if self.state.error is not None:
            self.statusBar().showMessage(f"Failed to open file: {self.state.error}")
        else:
            self.statusBar().showMessage(f"Loaded {self.state.source_path}", 5000)

    def on_file_open(self) -> None:
        self.open_task.start()

    def on_name_edited(self, name: str) -> None:
        self.state.rename(name)

    def closeEvent(self, event, /) -> None:
        self.frame_timer.stop()
        self.open_task.wait_for_workers()
        event.accept()
