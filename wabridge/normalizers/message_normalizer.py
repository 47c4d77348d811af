"""
Payload normalization for message and receipt events.

Converts the partially populated fields of an event into the stable webhook
body shapes defined in ``wabridge.domain.models.payloads``.
"""

from pathlib import Path

from wabridge.core.logging.logger import get_logger
from wabridge.core.types import MediaKind
from wabridge.domain.errors import BridgeError, WebhookError
from wabridge.domain.models.media_result import ExtractedMedia
from wabridge.domain.models.payloads import (
    MessagePayload,
    MessageTextPayload,
    ReactionPayload,
    ReceiptPayload,
)
from wabridge.events.bridge_events import MessageEvent, ReceiptEvent
from wabridge.media.media_extractor import MediaExtractor

logger = get_logger(__name__)


def build_message_text(event: MessageEvent) -> MessageTextPayload:
    """Extended text wins over conversation and carries the replied-to id."""
    content = event.message
    text = MessageTextPayload(id=event.info.id, text=content.conversation or "")

    extended = content.extended_text_message
    if extended and extended.text:
        text.text = extended.text
        if extended.context_info and extended.context_info.stanza_id:
            text.replied_id = extended.context_info.stanza_id
    return text


def build_message_payload(
    event: MessageEvent,
    extracted: dict[MediaKind, ExtractedMedia] | None = None,
) -> MessagePayload:
    """
    Build the webhook body for a message.

    Args:
        event: The received message
        extracted: Already extracted media by kind; kinds missing here keep
            their raw reference

    Returns:
        MessagePayload ready for ``to_body()``
    """
    content = event.message
    context_info = (
        content.extended_text_message.context_info
        if content.extended_text_message
        else None
    )

    quoted_message = None
    if context_info and context_info.quoted_message:
        quoted_message = context_info.quoted_message.conversation or None

    reaction = ReactionPayload()
    if content.reaction_message is not None:
        reaction.message = content.reaction_message.text or ""
        if content.reaction_message.key is not None:
            reaction.id = content.reaction_message.key.id or ""

    payload = MessagePayload(
        contact=content.contact_message,
        forwarded=bool(context_info and context_info.is_forwarded),
        from_=event.info.source_string,
        list_=content.list_message,
        live_location=content.live_location_message,
        location=content.location_message,
        message=build_message_text(event),
        order=content.order_message,
        pushname=event.info.push_name,
        quoted_message=quoted_message,
        reaction=reaction,
        view_once=content.view_once_message,
    )

    for kind in MediaKind:
        media = content.get_media(kind)
        if media is None:
            continue
        result = (extracted or {}).get(kind)
        if result is not None and not result.is_empty:
            setattr(payload, kind.value, result.model_dump())
        else:
            setattr(payload, kind.value, media.model_dump(mode="json"))
    return payload


def build_receipt_payload(event: ReceiptEvent) -> ReceiptPayload:
    """Build the ``{source, timestamp, type, ids}`` webhook body for a receipt."""
    return ReceiptPayload(
        source=event.source_string,
        timestamp=event.timestamp.isoformat(),
        type=event.receipt_type.value,
        ids=list(event.message_ids),
    )


class MessageNormalizer:
    """
    Extracts every attachment of a message, then normalizes it.

    A message whose media cannot be fetched is never delivered with a broken
    reference: the first extraction failure aborts the whole body.
    """

    def __init__(self, extractor: MediaExtractor, media_root: str | Path):
        self.extractor = extractor
        self.media_root = media_root

    async def extract_all(self, event: MessageEvent) -> dict[MediaKind, ExtractedMedia]:
        """
        Raises:
            WebhookError: Naming the media kind that failed
        """
        extracted: dict[MediaKind, ExtractedMedia] = {}
        for media in event.message.iter_media():
            kind = media.media_kind
            try:
                extracted[kind] = await self.extractor.extract(self.media_root, media)
            except BridgeError as e:
                raise WebhookError(f"Failed to download {kind.value}: {e.message}") from e
        return extracted

    async def build(self, event: MessageEvent) -> MessagePayload:
        extracted = await self.extract_all(event)
        if extracted:
            logger.debug(f"Extracted {len(extracted)} attachment(s) for message {event.info.id}")
        return build_message_payload(event, extracted)
