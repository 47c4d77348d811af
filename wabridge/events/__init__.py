"""
Event schemas consumed by the bridge.

Usage:
    from wabridge.events import MessageEvent, ReceiptEvent, parse_event
"""

from .bridge_events import (
    AppStateEvent,
    AppStateSyncCompleteEvent,
    BaseEvent,
    BridgeEvent,
    ConnectedEvent,
    DeleteForMeEvent,
    HistorySyncEvent,
    LoggedOutEvent,
    MessageEvent,
    PairSuccessEvent,
    PresenceEvent,
    PushNameChangedEvent,
    ReceiptEvent,
    StreamReplacedEvent,
    parse_event,
)
from .message_content import (
    AudioMessage,
    ContextInfo,
    DocumentMessage,
    ExtendedTextMessage,
    ImageMessage,
    MediaReference,
    MessageContent,
    MessageInfo,
    MessageKey,
    QuotedMessage,
    ReactionMessage,
    StickerMessage,
    VideoMessage,
)

__all__ = [
    # Event variants
    "BaseEvent",
    "BridgeEvent",
    "MessageEvent",
    "ReceiptEvent",
    "PresenceEvent",
    "PairSuccessEvent",
    "LoggedOutEvent",
    "ConnectedEvent",
    "PushNameChangedEvent",
    "StreamReplacedEvent",
    "HistorySyncEvent",
    "AppStateSyncCompleteEvent",
    "AppStateEvent",
    "DeleteForMeEvent",
    "parse_event",
    # Message content
    "MessageInfo",
    "MessageContent",
    "ExtendedTextMessage",
    "ContextInfo",
    "QuotedMessage",
    "ReactionMessage",
    "MessageKey",
    "MediaReference",
    "ImageMessage",
    "AudioMessage",
    "VideoMessage",
    "StickerMessage",
    "DocumentMessage",
]
