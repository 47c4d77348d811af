"""
Messaging client interface.

The protocol client (session, pairing, wire format, crypto) lives outside the
bridge. This interface is the only surface the event pipeline uses:

- read-only identity: own_id, push_name, is_connected, is_logged_in
- commands: send_presence, send_text, download, is_on_whatsapp

Implementations must be safe for concurrent command issuance; handlers for
different events call into the same client instance at the same time.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wabridge.events.message_content import MediaReference


class IMessagingClient(ABC):
    """Commands and identity exposed by the protocol client."""

    @property
    @abstractmethod
    def own_id(self) -> str | None:
        """JID of the logged in device, or None before login.

        Returns:
            Device JID string (e.g. "6281234567890:12@s.whatsapp.net")
        """
        pass

    @property
    @abstractmethod
    def push_name(self) -> str:
        """Display name of the account; empty until the app state sync delivers it."""
        pass

    @abstractmethod
    def is_connected(self) -> bool:
        """Whether the websocket to the servers is up."""
        pass

    @abstractmethod
    def is_logged_in(self) -> bool:
        """Whether the device is paired and authenticated."""
        pass

    @abstractmethod
    async def send_presence(self, available: bool = True) -> None:
        """Announce own presence.

        Raises:
            Client-specific exceptions when the command cannot be sent
        """
        pass

    @abstractmethod
    async def send_text(self, recipient: str, text: str) -> str:
        """Send a plain text message.

        Args:
            recipient: Destination JID
            text: Message body

        Returns:
            ID of the sent message
        """
        pass

    @abstractmethod
    async def download(self, media: "MediaReference") -> bytes:
        """Fetch and decrypt an attachment.

        Args:
            media: Undownloaded media reference taken from a message

        Returns:
            Raw attachment bytes
        """
        pass

    @abstractmethod
    async def is_on_whatsapp(self, jids: list[str]) -> dict[str, bool]:
        """Check which addresses are registered.

        Args:
            jids: Addresses to check

        Returns:
            Mapping of each queried address to its registration state
        """
        pass
