"""
Message Bus
===========
Single channel between background tasks (many producers) and the app loop on
the UI thread (the only consumer).

Why is this file needed?
------------------------
Qt widgets and the AppState may only be touched from the UI thread. Workers
never call into the UI, they post a message here and the app loop picks it up
on its next frame.
"""
import logging
import queue
from typing import Iterator

from solviewer.model.messages import Message

logger = logging.getLogger(__name__)


class MessageBus:
    def __init__(self) -> None:
        self._queue: "queue.SimpleQueue[Message]" = queue.SimpleQueue()

    def post(self, message: Message) -> None:
        """Thread-safe, never blocks."""
        logger.debug(f"Posting {type(message).__name__} for {message.path}")
        self._queue.put(message)

    def drain(self) -> Iterator[Message]:
        """
        Yield every queued message in FIFO order without blocking.
        Stops as soon as the queue is empty.
        """
        while True:
            try:
                yield self._queue.get_nowait()
            except queue.Empty:
                return

    def empty(self) -> bool:
        return self._queue.empty()
