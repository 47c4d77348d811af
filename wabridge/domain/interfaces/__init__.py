"""Interfaces for the collaborators the event pipeline talks to."""

from .broadcast_interface import BroadcastMessage, IBroadcastSink
from .messaging_interface import IMessagingClient

__all__ = ["BroadcastMessage", "IBroadcastSink", "IMessagingClient"]
