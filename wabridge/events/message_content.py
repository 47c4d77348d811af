"""
Message content schema.

Pydantic models for the content of an incoming message as exposed by the
protocol client: plain and extended text, reply context, reactions, and the
five downloadable media references. Everything the bridge does not interpret
is carried as an opaque mapping and passed through to webhooks unchanged.
"""

from datetime import datetime
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from wabridge.core.types import MediaKind

_FROZEN = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class QuotedMessage(BaseModel):
    """The message a reply points at (only its plain text is surfaced)."""

    model_config = _FROZEN

    conversation: str | None = Field(None, description="Plain text of the quoted message")


class ContextInfo(BaseModel):
    """Reply / forward context attached to an extended text message."""

    model_config = _FROZEN

    stanza_id: str | None = Field(None, description="ID of the message being replied to")
    participant: str | None = Field(None, description="Author of the quoted message")
    is_forwarded: bool = Field(False, description="Whether the message was forwarded")
    quoted_message: QuotedMessage | None = None


class ExtendedTextMessage(BaseModel):
    """Text message with optional reply context."""

    model_config = _FROZEN

    text: str | None = None
    context_info: ContextInfo | None = None


class MessageKey(BaseModel):
    """Key identifying a message within a chat."""

    model_config = _FROZEN

    id: str | None = None
    remote_jid: str | None = None
    from_me: bool = False


class ReactionMessage(BaseModel):
    """Emoji reaction targeting another message."""

    model_config = _FROZEN

    text: str | None = None
    key: MessageKey | None = None


class MediaReference(BaseModel):
    """
    Undownloaded attachment.

    Holds only the opaque handle the protocol client needs to fetch and
    decrypt the bytes, plus the mime type hint.
    """

    model_config = _FROZEN

    media_kind: ClassVar[MediaKind]

    url: str | None = None
    direct_path: str | None = None
    media_key: str | None = Field(None, description="Base64 media key")
    file_sha256: str | None = None
    file_enc_sha256: str | None = None
    file_length: int | None = None
    mimetype: str | None = None

    def get_mimetype(self) -> str:
        return self.mimetype or ""

    def get_caption(self) -> str:
        """Audio and stickers have no caption."""
        return ""


class ImageMessage(MediaReference):
    media_kind: ClassVar[MediaKind] = MediaKind.IMAGE

    caption: str | None = None
    width: int | None = None
    height: int | None = None

    def get_caption(self) -> str:
        return self.caption or ""


class AudioMessage(MediaReference):
    media_kind: ClassVar[MediaKind] = MediaKind.AUDIO

    seconds: int | None = None
    ptt: bool = Field(False, description="Push-to-talk voice note")


class VideoMessage(MediaReference):
    media_kind: ClassVar[MediaKind] = MediaKind.VIDEO

    caption: str | None = None
    seconds: int | None = None
    gif_playback: bool = False

    def get_caption(self) -> str:
        return self.caption or ""


class StickerMessage(MediaReference):
    media_kind: ClassVar[MediaKind] = MediaKind.STICKER

    is_animated: bool = False


class DocumentMessage(MediaReference):
    media_kind: ClassVar[MediaKind] = MediaKind.DOCUMENT

    caption: str | None = None
    title: str | None = None
    file_name: str | None = None
    page_count: int | None = None

    def get_caption(self) -> str:
        return self.caption or ""


class MessageContent(BaseModel):
    """
    Content of a received message.

    At most one of the body fields is usually set; the normalizer reads all
    of them and never assumes which one is present.
    """

    model_config = _FROZEN

    conversation: str | None = None
    extended_text_message: ExtendedTextMessage | None = None

    image_message: ImageMessage | None = None
    audio_message: AudioMessage | None = None
    video_message: VideoMessage | None = None
    sticker_message: StickerMessage | None = None
    document_message: DocumentMessage | None = None

    reaction_message: ReactionMessage | None = None

    # Passed through to webhooks as-is
    contact_message: dict[str, Any] | None = None
    list_message: dict[str, Any] | None = None
    live_location_message: dict[str, Any] | None = None
    location_message: dict[str, Any] | None = None
    order_message: dict[str, Any] | None = None
    view_once_message: dict[str, Any] | None = None

    def get_media(self, kind: MediaKind) -> MediaReference | None:
        """Get the attachment of the given kind, if any."""
        return getattr(self, f"{kind.value}_message")

    def iter_media(self) -> list[MediaReference]:
        """All attachments present in this message, in MediaKind order."""
        return [media for kind in MediaKind if (media := self.get_media(kind)) is not None]

    def get_text(self) -> str:
        """Extended text wins over the plain conversation body."""
        if self.extended_text_message and self.extended_text_message.text:
            return self.extended_text_message.text
        return self.conversation or ""


class MessageInfo(BaseModel):
    """Envelope metadata of a received message."""

    model_config = _FROZEN

    id: str
    chat: str
    sender: str
    push_name: str = ""
    timestamp: datetime
    type: str = ""
    category: str = ""
    is_from_me: bool = False
    is_group: bool = False

    @property
    def source_string(self) -> str:
        """Human readable origin, e.g. ``"<sender> in <chat>"`` for group traffic."""
        if self.sender and self.sender != self.chat:
            return f"{self.sender} in {self.chat}"
        return self.chat
