"""
Application State (Data Model)
==============================
This module defines the central data structure for the running application.

Why is this file needed?
------------------------
1. State Management: It holds the currently displayed document and the last
   load error in one place.
2. Ownership: Only the app loop on the UI thread writes to this object, views
   read from it. A successful load replaces the document in a single assignment.

Classes:
    AppState: The main container class.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from solviewer.model.messages import FileOpen, FileOpenFailed, Message
from solviewer.model.document import Document
from solviewer.model.errors import LoadError

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """
    Holds the open document. Starts out Empty (placeholder header, length 0).
    """
    document: Document = field(default_factory=Document.empty)
    source_path: Optional[str] = None
    error: Optional[LoadError] = None

    @property
    def is_loaded(self) -> bool:
        return not self.document.is_empty

    def apply(self, message: Message) -> bool:
        """
        Apply a message from the bus. Returns True if the view must refresh.
        """
        if isinstance(message, FileOpen):
            self.document = message.document
            self.source_path = message.path
            self.error = None
            logger.info(f"Document replaced with '{message.document.header.name}' from {message.path}")
            return True

        if isinstance(message, FileOpenFailed):
            # Keep the previous document so the user can retry
            self.error = message.error
            logger.warning(f"Keeping previous document after failed load: {message.error}")
            return True

        logger.warning(f"Ignoring unknown message {message!r}")
        return False

    def rename(self, name: str) -> None:
        """Edit the header name in memory. Nothing is written back to disk."""
        if not self.is_loaded:
            return
        self.document = self.document.with_name(name)
