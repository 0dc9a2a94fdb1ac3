"""
App Loop
========
Per-frame work on the UI thread: drain the message bus and apply every
message to the AppState.

Why is this file needed?
------------------------
The main window only needs to call `tick()` from its frame timer and refresh
when it returns True. Draining never blocks, reading and decoding already
happened on a worker thread.
"""
import logging

from solviewer.controller.message_bus import MessageBus
from solviewer.model.messages import FileOpen
from solviewer.model.state import AppState
from solviewer.view.tree_renderer import dump_document

logger = logging.getLogger(__name__)


class AppLoop:
    def __init__(self, bus: MessageBus, state: AppState) -> None:
        self.bus = bus
        self.state = state

    def tick(self) -> bool:
        """Apply every queued message. Returns True if the state changed."""
        changed = False
        for message in self.bus.drain():
            changed |= self.state.apply(message)

            if isinstance(message, FileOpen) and logger.isEnabledFor(logging.DEBUG):
                logger.debug(f"Loaded document:\n{dump_document(message.document)}")
        return changed
