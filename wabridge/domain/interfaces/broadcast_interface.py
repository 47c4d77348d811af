"""Broadcast sink interface for login state notifications."""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ConfigDict

from wabridge.core.types import BroadcastCode


class BroadcastMessage(BaseModel):
    """
    Record pushed to the real-time UI channel.

    Codes:
        LOGIN_SUCCESS: pairing finished, ``message`` names the new device
        LIST_DEVICES: device logged out, UI should refresh its device list
    """

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    code: BroadcastCode
    message: str | None = None
    result: Any = None


class IBroadcastSink(ABC):
    """
    Fire-and-forget channel to the UI push layer.

    There is no acknowledgement and no response contract; implementations
    must not raise back into the event pipeline.
    """

    @abstractmethod
    def publish(self, message: BroadcastMessage) -> None:
        """
        Publish a notification.

        Args:
            message: Record to push to every connected UI client
        """
        ...
