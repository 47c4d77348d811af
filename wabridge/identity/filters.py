"""
Loop and origin filters.

Decide whether an event came from a group, from a broadcast list / status,
or from the logged in account itself. Self detection compares the first run
of digits in each address only, so device suffixes (``:12``) and server
suffixes (``@s.whatsapp.net``, ``@lid``) never affect the result.
"""

import re

from wabridge.core.config.settings import Settings

_DIGITS = re.compile(r"\d+")

BROADCAST_MARKER = "broadcast"


def is_group(jid: str) -> bool:
    """Check if the address is a group chat."""
    return Settings.GROUP_SERVER_SUFFIX in jid


def is_broadcast(source: str) -> bool:
    """Check if the source string belongs to a broadcast list or status update."""
    return BROADCAST_MARKER in source


def extract_phone_number(jid: str) -> str:
    """
    Extract the phone number from a JID.

    Returns:
        The first run of digits, or an empty string if there is none
    """
    match = _DIGITS.search(jid)
    return match.group(0) if match else ""


def is_self(jid: str, own_id: str | None) -> bool:
    """
    Check if an address belongs to the logged in account.

    Args:
        jid: Address or source string of the event
        own_id: JID of the logged in device; None before login

    Returns:
        True if both carry the same leading digit run
    """
    if not own_id:
        return False
    phone = extract_phone_number(jid)
    return bool(phone) and phone == extract_phone_number(own_id)
