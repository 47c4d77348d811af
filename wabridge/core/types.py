"""
Core type definitions for wabridge.

This module contains the closed sets of values the event pipeline routes on.
"""

from enum import Enum


class EventKind(str, Enum):
    """
    Every event variant the protocol client can hand to the bridge.

    The dispatcher keeps one route per member; adding a member without a
    route fails at dispatcher construction.
    """

    MESSAGE = "message"
    RECEIPT = "receipt"
    PRESENCE = "presence"
    PAIR_SUCCESS = "pair_success"
    LOGGED_OUT = "logged_out"
    CONNECTED = "connected"
    PUSH_NAME_CHANGED = "push_name_changed"
    STREAM_REPLACED = "stream_replaced"
    HISTORY_SYNC = "history_sync"
    APP_STATE_SYNC_COMPLETE = "app_state_sync_complete"
    APP_STATE = "app_state"
    DELETE_FOR_ME = "delete_for_me"


class MediaKind(str, Enum):
    """Downloadable attachment kinds carried by a message."""

    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"
    STICKER = "sticker"
    DOCUMENT = "document"


class ReceiptType(str, Enum):
    """Receipt types reported by the protocol client."""

    DELIVERED = "delivered"
    READ = "read"
    READ_SELF = "read-self"
    PLAYED = "played"
    SENDER = "sender"
    RETRY = "retry"
    SERVER_ERROR = "server-error"
    INACTIVE = "inactive"

    @property
    def is_forwardable(self) -> bool:
        """Only read and delivery receipts are forwarded to webhooks."""
        return self in (ReceiptType.DELIVERED, ReceiptType.READ, ReceiptType.READ_SELF)


class BroadcastCode(str, Enum):
    """Codes pushed to the UI broadcast channel on login state changes."""

    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LIST_DEVICES = "LIST_DEVICES"


# App state patch whose completion makes the push name available
CRITICAL_BLOCK_PATCH = "critical_block"
