"""
Normalized webhook payloads.

These are the stable shapes POSTed to webhook destinations. They are built
fresh per event and never persisted beyond the HTTP body.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MessageTextPayload(BaseModel):
    """Text body of a message with its reply reference."""

    id: str = ""
    text: str = ""
    replied_id: str = ""


class ReactionPayload(BaseModel):
    """Reaction sub-object; both fields empty when the message is no reaction."""

    id: str = ""
    message: str = ""


class MessagePayload(BaseModel):
    """Webhook body for a received message.

    Media fields hold the raw reference until extraction replaces them with
    the extracted media descriptor.
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    audio: Any = None
    contact: dict[str, Any] | None = None
    document: Any = None
    forwarded: bool = False
    from_: str = Field("", alias="from")
    image: Any = None
    list_: dict[str, Any] | None = Field(None, alias="list")
    live_location: dict[str, Any] | None = None
    location: dict[str, Any] | None = None
    message: MessageTextPayload = Field(default_factory=MessageTextPayload)
    order: dict[str, Any] | None = None
    pushname: str = ""
    quoted_message: str | None = None
    reaction: ReactionPayload = Field(default_factory=ReactionPayload)
    sticker: Any = None
    video: Any = None
    view_once: dict[str, Any] | None = None

    def to_body(self) -> dict[str, Any]:
        """JSON-ready mapping using the wire key names."""
        return self.model_dump(mode="json", by_alias=True)


class ReceiptPayload(BaseModel):
    """Webhook body for a read or delivery receipt."""

    source: str
    timestamp: str
    type: str
    ids: list[str] = Field(default_factory=list)

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
