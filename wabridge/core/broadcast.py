"""
In-process broadcast sink.

Queues login state notifications for the UI push layer (websocket hub), which
consumes them from ``queue``.
"""

from __future__ import annotations

import asyncio

from wabridge.core.logging.logger import get_logger
from wabridge.domain.interfaces.broadcast_interface import BroadcastMessage, IBroadcastSink

logger = get_logger(__name__)


class QueueBroadcastSink(IBroadcastSink):
    """IBroadcastSink backed by an asyncio.Queue."""

    def __init__(self, maxsize: int = 0):
        self.queue: asyncio.Queue[BroadcastMessage] = asyncio.Queue(maxsize=maxsize)

    def publish(self, message: BroadcastMessage) -> None:
        """Enqueue without waiting; a full queue drops the notification."""
        try:
            self.queue.put_nowait(message)
        except asyncio.QueueFull:
            logger.warning(f"Broadcast queue full, dropping {message.code} notification")
