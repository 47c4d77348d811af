"""
Events module for wabridge.

This module contains the event pipeline entry points:
- Event dispatching with an exhaustive route table
- Per-kind event handling
- Default log-only handlers and statistics
"""

from .default_handlers import DefaultEventLogger, MessageLogStrategy
from .event_dispatcher import BridgeEventDispatcher
from .event_handler import BridgeEventHandler

__all__ = [
    "BridgeEventDispatcher",
    "BridgeEventHandler",
    "DefaultEventLogger",
    "MessageLogStrategy",
]
