"""
Event handler for the bridge pipeline.

Holds the side effects of every event kind: presence re-announcement, UI
broadcasts, auto-reply, webhook forwarding and history persistence. The
dispatcher decides which method runs; this class decides what it does.
"""

import asyncio

from wabridge.core.events.default_handlers import DefaultEventLogger
from wabridge.core.logging.logger import get_logger
from wabridge.core.pipeline_context import PipelineContext
from wabridge.core.types import BroadcastCode
from wabridge.domain.errors import WebhookError
from wabridge.domain.interfaces.broadcast_interface import BroadcastMessage
from wabridge.events.bridge_events import (
    AppStateEvent,
    AppStateSyncCompleteEvent,
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
)
from wabridge.history.history_writer import HistorySyncWriter
from wabridge.identity.filters import is_broadcast, is_group, is_self
from wabridge.media.media_extractor import MediaExtractor
from wabridge.normalizers.message_normalizer import MessageNormalizer, build_receipt_payload


class BridgeEventHandler:
    """
    Per-kind behaviour of the bridge.

    Every ``handle_*`` coroutine returns a short action name for the dispatch
    result. Best-effort steps (presence, auto-reply, delivery) log their own
    failures; anything else propagates to the dispatcher.
    """

    def __init__(
        self,
        context: PipelineContext,
        normalizer: MessageNormalizer | None = None,
        history_writer: HistorySyncWriter | None = None,
        event_logger: DefaultEventLogger | None = None,
    ):
        """
        Args:
            context: Pipeline dependencies (client, settings, sinks)
            normalizer: Message normalizer; built from settings when omitted
            history_writer: History writer; built from settings when omitted
            event_logger: Log-only handler shared by all kinds
        """
        self.context = context
        self.logger = get_logger(self.__class__.__module__)

        settings = context.settings
        self.normalizer = normalizer or MessageNormalizer(
            MediaExtractor(context.client, settings.max_download_size),
            settings.path_media,
        )
        self.history_writer = history_writer or HistorySyncWriter(
            settings.path_storages, context.started_at, context.history_sequence
        )
        self.event_logger = event_logger or DefaultEventLogger()

    # ------------------------------------------------------------------
    # Presence
    # ------------------------------------------------------------------

    async def announce_presence(self) -> str:
        """Re-announce availability once the push name is known."""
        client = self.context.client
        if not client.push_name:
            return "presence_skipped"

        try:
            await client.send_presence(available=True)
        except Exception as e:
            self.logger.warning(f"Failed to send available presence: {e}")
            return "presence_failed"

        self.logger.info(f"Marked self as available as {client.push_name}")
        return "presence_sent"

    async def handle_connected(self, event: ConnectedEvent) -> str:
        return await self.announce_presence()

    async def handle_push_name_changed(self, event: PushNameChangedEvent) -> str:
        return await self.announce_presence()

    async def handle_app_state_sync_complete(self, event: AppStateSyncCompleteEvent) -> str:
        if not event.is_critical_block:
            self.logger.debug(f"App state sync complete: {event.name}")
            return "logged"
        return await self.announce_presence()

    # ------------------------------------------------------------------
    # Login state
    # ------------------------------------------------------------------

    async def handle_pair_success(self, event: PairSuccessEvent) -> str:
        self.logger.info(
            f"Successfully paired with {event.id} (business: {event.business_name or '-'}, "
            f"platform: {event.platform or '-'})"
        )
        self.context.broadcast.publish(
            BroadcastMessage(
                code=BroadcastCode.LOGIN_SUCCESS,
                message=f"Successfully pair with {event.id}",
            )
        )
        return "broadcast_sent"

    async def handle_logged_out(self, event: LoggedOutEvent) -> str:
        self.logger.warning(
            f"Logged out (on_connect={event.on_connect}, reason={event.reason or '-'})"
        )
        self.context.broadcast.publish(
            BroadcastMessage(code=BroadcastCode.LIST_DEVICES, result=None)
        )
        return "broadcast_sent"

    async def handle_stream_replaced(self, event: StreamReplacedEvent) -> str:
        self.logger.critical("Stream replaced by another session, exiting")
        self.context.exit_process(0)
        return "process_exit"

    # ------------------------------------------------------------------
    # Messages and receipts
    # ------------------------------------------------------------------

    async def handle_message(self, event: MessageEvent) -> str:
        """
        Log, auto-reply, then forward.

        Forwarding is skipped without webhooks, for broadcast sources and for
        the account's own messages echoed back. Group messages are forwarded.
        """
        self.event_logger.log_message(event)
        await self.auto_reply(event)

        info = event.info
        if not self.context.can_forward:
            return "message_logged"
        if is_broadcast(info.source_string):
            return "message_ignored_broadcast"
        if is_self(info.sender, self.context.client.own_id):
            return "message_ignored_self"

        try:
            payload = await self.normalizer.build(event)
        except WebhookError as e:
            self.logger.error(f"Failed forward to webhook: {e.message}")
            return "message_media_failed"

        return await self._deliver(payload.to_body(), "message")

    async def auto_reply(self, event: MessageEvent) -> bool:
        """
        Send the configured auto-reply to the sender.

        Returns:
            True if a reply was sent
        """
        settings = self.context.settings
        info = event.info
        if not settings.has_auto_reply:
            return False
        if is_group(info.chat) or is_broadcast(info.source_string):
            return False

        try:
            await self.context.client.send_text(info.sender, settings.auto_reply_message)
        except Exception as e:
            self.logger.warning(f"Failed to send auto-reply to {info.sender}: {e}")
            return False
        return True

    async def handle_receipt(self, event: ReceiptEvent) -> str:
        if not event.receipt_type.is_forwardable:
            self.logger.debug(f"Ignoring {event.receipt_type.value} receipt from {event.source_string}")
            return "receipt_ignored"

        self.logger.info(
            f"{event.receipt_type.value.capitalize()} receipt for {event.message_ids} "
            f"from {event.source_string} at {event.timestamp.isoformat()}"
        )
        if not self.context.can_forward:
            return "receipt_logged"
        if is_self(event.sender, self.context.client.own_id):
            return "receipt_ignored_self"

        return await self._deliver(build_receipt_payload(event).to_body(), "receipt")

    async def _deliver(self, body: dict, label: str) -> str:
        errors = await self.context.webhook_sender.deliver(body)
        if errors:
            return f"{label}_forward_failed"
        return f"{label}_forwarded"

    # ------------------------------------------------------------------
    # History sync
    # ------------------------------------------------------------------

    async def handle_history_sync(self, event: HistorySyncEvent) -> str:
        account_id = self.context.account_id
        if not account_id:
            self.logger.error("Failed to write history sync: account id is unknown")
            return "history_dropped"

        try:
            await asyncio.to_thread(self.history_writer.write, account_id, event)
        except (OSError, TypeError, ValueError) as e:
            self.logger.error(f"Failed to write history sync {event.sync_type}: {e}")
            return "history_dropped"
        return "history_written"

    # ------------------------------------------------------------------
    # Log only
    # ------------------------------------------------------------------

    async def handle_presence(self, event: PresenceEvent) -> str:
        self.event_logger.log_presence(event)
        return "logged"

    async def handle_delete_for_me(self, event: DeleteForMeEvent) -> str:
        self.event_logger.log_delete_for_me(event)
        return "logged"

    async def handle_app_state(self, event: AppStateEvent) -> str:
        self.event_logger.log_app_state(event)
        return "logged"
