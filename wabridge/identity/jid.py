"""
JID helpers used at the API boundary.

Parsing and sanitizing of user supplied addresses, plus the login guard the
HTTP layer runs before issuing commands. Failures surface as BridgeError
subclasses instead of aborting the process.
"""

from typing import NamedTuple

from wabridge.core.config.settings import Settings
from wabridge.core.logging.logger import get_logger
from wabridge.domain.errors import (
    ClientNotInitializedError,
    InvalidJIDError,
    NotConnectedError,
    NotLoggedInError,
)
from wabridge.domain.interfaces.messaging_interface import IMessagingClient

logger = get_logger(__name__)

DEFAULT_USER_SERVER = Settings.USER_SERVER_SUFFIX.lstrip("@")

# Longest E.164 number; anything longer is a group id
MAX_PHONE_LENGTH = 15

_PLATFORM_NAMES = {
    0: "UNKNOWN",
    1: "CHROME",
    2: "FIREFOX",
    3: "IE",
    4: "OPERA",
    5: "SAFARI",
    6: "EDGE",
    7: "DESKTOP",
    8: "IPAD",
    9: "ANDROID_TABLET",
    10: "OHANA",
    11: "ALOHA",
    12: "CATALINA",
    13: "TCL_TV",
}


class JID(NamedTuple):
    """Parsed address: ``user[:device]@server``."""

    user: str
    server: str
    device: int = 0

    def __str__(self) -> str:
        if self.device:
            return f"{self.user}:{self.device}@{self.server}"
        return f"{self.user}@{self.server}"


def sanitize_phone(phone: str | None) -> str | None:
    """
    Turn a bare number into a full address.

    Numbers up to 15 characters become user addresses, longer ones group
    addresses. Values that already contain ``@`` are returned unchanged.
    """
    if not phone or "@" in phone:
        return phone
    if len(phone) <= MAX_PHONE_LENGTH:
        return f"{phone}{Settings.USER_SERVER_SUFFIX}"
    return f"{phone}{Settings.GROUP_SERVER_SUFFIX}"


def get_platform_name(device_id: int) -> str:
    """Map a companion platform id to its name."""
    return _PLATFORM_NAMES.get(device_id, "UNKNOWN")


def parse_jid(arg: str) -> JID:
    """
    Parse a phone number or address.

    Raises:
        InvalidJIDError: If the address is empty or has no user part
    """
    if not arg:
        raise InvalidJIDError("empty JID")
    if arg[0] == "+":
        arg = arg[1:]

    if "@" not in arg:
        return JID(user=arg, server=DEFAULT_USER_SERVER)

    user_part, _, server = arg.partition("@")
    user, _, device = user_part.partition(":")
    if not user or not server:
        logger.warning(f"Invalid JID {arg}: missing user or server")
        raise InvalidJIDError(f"invalid JID {arg}")
    if device and not device.isdigit():
        raise InvalidJIDError(f"invalid device in JID {arg}")
    return JID(user=user, server=server, device=int(device) if device else 0)


def ensure_logged_in(client: IMessagingClient | None) -> IMessagingClient:
    """
    Check the client can issue commands.

    Raises:
        ClientNotInitializedError: No client has been created
        NotConnectedError: The client is disconnected
        NotLoggedInError: The client is connected but not paired
    """
    if client is None:
        raise ClientNotInitializedError()
    if not client.is_connected():
        raise NotConnectedError()
    if not client.is_logged_in():
        raise NotLoggedInError()
    return client


async def is_on_whatsapp(client: IMessagingClient, jid: str) -> bool:
    """Only user addresses are checked; groups and others are assumed valid."""
    if Settings.USER_SERVER_SUFFIX not in jid:
        return True
    registered = await client.is_on_whatsapp([jid])
    return all(registered.values())


async def validate_jid_with_login(
    client: IMessagingClient | None, jid: str, account_validation: bool = True
) -> JID:
    """
    Validate a destination before sending to it.

    Raises:
        BridgeError subclasses from ensure_logged_in, or InvalidJIDError when
        the address is malformed or not registered
    """
    client = ensure_logged_in(client)
    if account_validation and not await is_on_whatsapp(client, jid):
        raise InvalidJIDError(f"Phone {jid} is not on whatsapp")
    return parse_jid(jid)
