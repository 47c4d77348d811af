"""Address helpers: origin filters and API-boundary JID validation."""

from .filters import extract_phone_number, is_broadcast, is_group, is_self
from .jid import (
    JID,
    ensure_logged_in,
    get_platform_name,
    parse_jid,
    sanitize_phone,
    validate_jid_with_login,
)

__all__ = [
    "JID",
    "ensure_logged_in",
    "extract_phone_number",
    "get_platform_name",
    "is_broadcast",
    "is_group",
    "is_self",
    "parse_jid",
    "sanitize_phone",
    "validate_jid_with_login",
]
