"""
Load errors raised by the decoder adapter.

Both kinds are recoverable: the worker catches them and reports them to the
UI thread as a FileOpenFailed message.
"""
from typing import Optional


class LoadError(Exception):
    """Base class for failures while opening a SOL file."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path:
            return f"{self.message} ({self.path})"
        return self.message


class FileIOError(LoadError):
    """The file could not be opened or read."""


class DecodeFailure(LoadError):
    """The bytes are not a valid SOL document."""
