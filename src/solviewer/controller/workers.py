"""
Background Workers (Threading)
==============================
This module contains the file-open task and the QThread that reads and
decodes the chosen file.

Why is this file needed?
------------------------
1. Responsiveness: The file dialog is opened non-modally and large files are
   decoded off the UI thread, so the window keeps repainting.
2. Messages: Workers never touch widgets or the AppState. They post the
   finished result to the MessageBus, which the app loop drains every frame.

Classes:
    FileOpenWorker: Reads + decodes one file and posts the result.
    FileOpenTask: Shows the file picker and starts a worker for the choice.
"""
import logging
import os
from typing import Optional, Set

from PySide6.QtCore import QObject, QThread
from PySide6.QtWidgets import QFileDialog, QWidget

from solviewer.config import SOL_FILE_FILTER
from solviewer.controller.loader import load_file
from solviewer.controller.message_bus import MessageBus

logger = logging.getLogger(__name__)


class FileOpenWorker(QThread):
    def __init__(self, path: str, bus: MessageBus, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.path = path
        self.bus = bus

    def run(self) -> None:
        logger.info(f"Loading '{self.path}' in background thread...")
        # load_file turns every failure into a FileOpenFailed message
        self.bus.post(load_file(self.path))


class FileOpenTask(QObject):
    """
    Opens the picker for File -> Open... Every call is independent, several
    workers may run at once and whichever result is drained last wins.
    """

    def __init__(self, bus: MessageBus, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.bus = bus
        self._parent_widget = parent
        # Running workers must stay referenced until they finish
        self._workers: Set[FileOpenWorker] = set()

    def start(self) -> None:
        dialog = QFileDialog(self._parent_widget, "Open SOL file", os.getcwd(), SOL_FILE_FILTER)
        dialog.setFileMode(QFileDialog.ExistingFile)
        dialog.setAcceptMode(QFileDialog.AcceptOpen)
        dialog.fileSelected.connect(self._on_file_selected)
        dialog.rejected.connect(lambda: logger.debug("Open dialog cancelled."))
        dialog.finished.connect(dialog.deleteLater)
        # open() returns immediately, the result arrives through the signals
        dialog.open()

    def _on_file_selected(self, path: str) -> None:
        if not path:
            return
        path = os.path.abspath(path)

        worker = FileOpenWorker(path, self.bus)
        self._workers.add(worker)
        worker.finished.connect(lambda w=worker: self._on_worker_finished(w))
        worker.start()

    def _on_worker_finished(self, worker: FileOpenWorker) -> None:
        self._workers.discard(worker)
        worker.deleteLater()

    def wait_for_workers(self) -> None:
        """Block until running loads finish, a QThread must not be destroyed while running."""
        if self._workers:
            logger.info(f"Waiting for {len(self._workers)} running load(s) to finish...")
        for worker in list(self._workers):
            worker.wait()
