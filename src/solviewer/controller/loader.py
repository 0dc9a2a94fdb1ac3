"""
Read + decode step of the file-open pipeline.

Runs on a worker thread and always returns a message, so the worker has
nothing left to do but post it.
"""
import logging

from solviewer.model.messages import FileOpen, FileOpenFailed, Message
from solviewer.model.decoder import load_document
from solviewer.model.errors import DecodeFailure, LoadError

logger = logging.getLogger(__name__)


def load_file(path: str) -> Message:
    try:
        document = load_document(path)
    except LoadError as e:
        logger.error(f"Failed to open '{path}': {e}")
        return FileOpenFailed(path=path, error=e)
    except Exception as e:
        logger.exception(f"Unexpected error while decoding '{path}'")
        return FileOpenFailed(path=path, error=DecodeFailure(f"Unexpected error: {e}", path=path))

    logger.info(f"Loaded '{document.header.name}' ({len(document.body)} elements) from {path}")
    return FileOpen(path=path, document=document)
