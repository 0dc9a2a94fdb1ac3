"""
Messages posted by background tasks to the UI thread through the MessageBus.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from solviewer.model.document import Document
from solviewer.model.errors import LoadError


@dataclass(frozen=True)
class FileOpen:
    """A file was chosen, read and decoded."""
    path: str
    document: Document


@dataclass(frozen=True)
class FileOpenFailed:
    """A chosen file could not be read or decoded."""
    path: str
    error: LoadError


Message = Union[FileOpen, FileOpenFailed]
