"""
Event variants emitted by the protocol client.

The bridge consumes exactly this closed set. Each variant is a frozen model
tagged by ``kind``; ``BridgeEvent`` is the discriminated union over all of
them and ``parse_event`` turns a raw mapping into one of its members.
"""

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from wabridge.core.types import CRITICAL_BLOCK_PATCH, EventKind, ReceiptType
from wabridge.domain.errors import MalformedEventError
from wabridge.events.message_content import MessageContent, MessageInfo


class BaseEvent(BaseModel):
    """Common configuration for all event variants."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    kind: str

    @property
    def event_kind(self) -> EventKind:
        return EventKind(self.kind)

    @property
    def event_id(self) -> str | None:
        """Identifier used in logs; variants without one return None."""
        return None


class MessageEvent(BaseEvent):
    """A message was received (or echoed back from another own device)."""

    kind: Literal["message"] = "message"

    info: MessageInfo
    message: MessageContent = Field(default_factory=MessageContent)
    is_view_once: bool = False
    is_ephemeral: bool = False
    is_edit: bool = False

    @property
    def event_id(self) -> str:
        return self.info.id


class ReceiptEvent(BaseEvent):
    """Delivery / read receipt for one or more messages."""

    kind: Literal["receipt"] = "receipt"

    chat: str
    sender: str
    timestamp: datetime
    receipt_type: ReceiptType = Field(alias="type")
    message_ids: list[str] = Field(default_factory=list)

    @property
    def event_id(self) -> str | None:
        return self.message_ids[0] if self.message_ids else None

    @property
    def source_string(self) -> str:
        if self.sender and self.sender != self.chat:
            return f"{self.sender} in {self.chat}"
        return self.chat


class PresenceEvent(BaseEvent):
    """A contact went online or offline."""

    kind: Literal["presence"] = "presence"

    from_: str = Field(alias="from")
    unavailable: bool = False
    last_seen: datetime | None = None


class PairSuccessEvent(BaseEvent):
    """QR pairing completed for a new device."""

    kind: Literal["pair_success"] = "pair_success"

    id: str
    business_name: str = ""
    platform: str = ""


class LoggedOutEvent(BaseEvent):
    """The device was unlinked, either on connect or while running."""

    kind: Literal["logged_out"] = "logged_out"

    on_connect: bool = False
    reason: str = ""


class ConnectedEvent(BaseEvent):
    kind: Literal["connected"] = "connected"


class PushNameChangedEvent(BaseEvent):
    kind: Literal["push_name_changed"] = "push_name_changed"

    push_name: str = ""


class StreamReplacedEvent(BaseEvent):
    """Another client opened a session for the same device."""

    kind: Literal["stream_replaced"] = "stream_replaced"


class HistorySyncEvent(BaseEvent):
    """Bulk backlog chunk sent once after login."""

    kind: Literal["history_sync"] = "history_sync"

    sync_type: str = "UNKNOWN"
    data: dict[str, Any] = Field(default_factory=dict)


class AppStateSyncCompleteEvent(BaseEvent):
    kind: Literal["app_state_sync_complete"] = "app_state_sync_complete"

    name: str

    @property
    def is_critical_block(self) -> bool:
        return self.name == CRITICAL_BLOCK_PATCH


class AppStateEvent(BaseEvent):
    kind: Literal["app_state"] = "app_state"

    index: list[str] = Field(default_factory=list)
    sync_action_value: dict[str, Any] | None = None


class DeleteForMeEvent(BaseEvent):
    kind: Literal["delete_for_me"] = "delete_for_me"

    chat: str
    sender: str
    message_id: str
    timestamp: datetime | None = None

    @property
    def event_id(self) -> str:
        return self.message_id


BridgeEvent = Annotated[
    MessageEvent
    | ReceiptEvent
    | PresenceEvent
    | PairSuccessEvent
    | LoggedOutEvent
    | ConnectedEvent
    | PushNameChangedEvent
    | StreamReplacedEvent
    | HistorySyncEvent
    | AppStateSyncCompleteEvent
    | AppStateEvent
    | DeleteForMeEvent,
    Field(discriminator="kind"),
]

_event_adapter: TypeAdapter[BridgeEvent] = TypeAdapter(BridgeEvent)


def parse_event(raw: Any) -> BaseEvent:
    """
    Validate a raw mapping into one of the known event variants.

    Args:
        raw: Mapping as produced by the protocol client bridge

    Returns:
        The matching event model

    Raises:
        MalformedEventError: If the mapping has no known kind or is missing
            required fields
    """
    if not isinstance(raw, dict):
        raise MalformedEventError(f"event must be a mapping, got {type(raw).__name__}")
    try:
        return _event_adapter.validate_python(raw)
    except ValidationError as e:
        raise MalformedEventError(
            f"invalid {raw.get('kind', 'unknown')!s} event: {e.error_count()} validation error(s)"
        ) from e
