"""
Test suite for BridgeEventDispatcher routing and failure isolation.

Covers the route table, malformed input, presence gating, broadcast
notifications, stream replacement and webhook forwarding filters.
"""

import threading
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from wabridge.core.events import BridgeEventDispatcher, BridgeEventHandler
from wabridge.core.types import EventKind
from wabridge.domain.errors import WebhookError
from wabridge.domain.models.payloads import MessagePayload

WEBHOOK = "http://hooks.test/whatsapp"
OWN_ID = "6281234567890:12@s.whatsapp.net"
SENDER = "6289876543210@s.whatsapp.net"
GROUP = "120363025246125486@g.us"


def make_dispatcher(context, **kwargs) -> BridgeEventDispatcher:
    return BridgeEventDispatcher(BridgeEventHandler(context, **kwargs))


class TestDispatcherRouting:
    """Route table and result shape."""

    def test_every_event_kind_has_a_route(self, make_context):
        dispatcher = make_dispatcher(make_context())

        assert set(dispatcher._routes) == set(EventKind)

    def test_missing_route_fails_at_construction(self, make_context):
        class ReceiptlessDispatcher(BridgeEventDispatcher):
            def _build_routes(self, event_handler):
                routes = super()._build_routes(event_handler)
                del routes[EventKind.RECEIPT]
                return routes

        with pytest.raises(ValueError, match="receipt"):
            ReceiptlessDispatcher(BridgeEventHandler(make_context()))

    @pytest.mark.asyncio
    async def test_result_contains_timing_and_action(self, make_context):
        dispatcher = make_dispatcher(make_context())

        result = await dispatcher.dispatch({"kind": "connected"})

        assert result["success"] is True
        assert result["kind"] == "connected"
        assert result["action"] == "presence_sent"
        assert result["dispatch_time"] >= 0
        assert "processed_at" in result
        assert "error" not in result

    @pytest.mark.asyncio
    async def test_malformed_event_is_dropped_with_warning(self, make_context):
        dispatcher = make_dispatcher(make_context())

        result = await dispatcher.dispatch({"kind": "no_such_event"})

        assert result["success"] is False
        assert result["action"] == "malformed_event"
        assert result["kind"] is None
        assert "error" in result

    @pytest.mark.asyncio
    async def test_non_mapping_input_is_malformed(self, make_context):
        dispatcher = make_dispatcher(make_context())

        result = await dispatcher.dispatch(["not", "an", "event"])

        assert result["success"] is False
        assert result["action"] == "malformed_event"

    @pytest.mark.asyncio
    async def test_handler_exception_never_escapes(self, make_context, message_data):
        context = make_context()
        dispatcher = make_dispatcher(context)
        dispatcher._routes[EventKind.MESSAGE] = AsyncMock(side_effect=RuntimeError("boom"))

        result = await dispatcher.dispatch(message_data())

        assert result["success"] is False
        assert result["action"] == "handler_error"
        assert result["error"] == "boom"

    @pytest.mark.asyncio
    async def test_stats_count_every_event(self, make_context):
        dispatcher = make_dispatcher(make_context())

        await dispatcher.dispatch({"kind": "connected"})
        await dispatcher.dispatch({"kind": "presence", "from": SENDER})
        await dispatcher.dispatch({"kind": "presence", "from": SENDER, "unavailable": True})

        stats = dispatcher.event_handler.event_logger.get_stats()
        assert stats["total_events"] == 3
        assert stats["by_kind"] == {"connected": 1, "presence": 2}


class TestPresenceAndLoginState:
    """Presence re-announcement, broadcasts and stream replacement."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "raw",
        [
            {"kind": "connected"},
            {"kind": "push_name_changed", "push_name": "Bridge"},
            {"kind": "app_state_sync_complete", "name": "critical_block"},
        ],
    )
    async def test_presence_sent_when_push_name_known(self, make_context, fake_client, raw):
        dispatcher = make_dispatcher(make_context())

        result = await dispatcher.dispatch(raw)

        assert result["action"] == "presence_sent"
        fake_client.send_presence.assert_awaited_once_with(available=True)

    @pytest.mark.asyncio
    async def test_presence_skipped_without_push_name(self, make_context, fake_client):
        fake_client._push_name = ""
        dispatcher = make_dispatcher(make_context())

        result = await dispatcher.dispatch({"kind": "connected"})

        assert result["action"] == "presence_skipped"
        fake_client.send_presence.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_other_app_state_patch_does_not_announce(self, make_context, fake_client):
        dispatcher = make_dispatcher(make_context())

        await dispatcher.dispatch({"kind": "app_state_sync_complete", "name": "regular_low"})

        fake_client.send_presence.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_presence_failure_is_not_fatal(self, make_context, fake_client):
        fake_client.send_presence.side_effect = ConnectionError("socket closed")
        dispatcher = make_dispatcher(make_context())

        result = await dispatcher.dispatch({"kind": "connected"})

        assert result["success"] is True
        assert result["action"] == "presence_failed"

    @pytest.mark.asyncio
    async def test_pair_success_broadcasts_login(self, make_context, broadcast_sink):
        dispatcher = make_dispatcher(make_context())

        await dispatcher.dispatch({"kind": "pair_success", "id": OWN_ID, "platform": "android"})

        notification = broadcast_sink.queue.get_nowait()
        assert notification.code == "LOGIN_SUCCESS"
        assert notification.message == f"Successfully pair with {OWN_ID}"

    @pytest.mark.asyncio
    async def test_logged_out_broadcasts_device_list(self, make_context, broadcast_sink):
        dispatcher = make_dispatcher(make_context())

        await dispatcher.dispatch({"kind": "logged_out", "on_connect": True})

        notification = broadcast_sink.queue.get_nowait()
        assert notification.code == "LIST_DEVICES"
        assert notification.result is None

    @pytest.mark.asyncio
    async def test_stream_replaced_exits_process(self, make_context):
        context = make_context()
        dispatcher = make_dispatcher(context)

        result = await dispatcher.dispatch({"kind": "stream_replaced"})

        context.exit_process.assert_called_once_with(0)
        assert result["action"] == "process_exit"


class TestMessageForwarding:
    """Auto-reply and webhook forwarding for messages and receipts."""

    @pytest.mark.asyncio
    async def test_message_forwarded_with_normalized_body(
        self, make_context, webhook_sender, message_data
    ):
        context = make_context(webhook_sender=webhook_sender, WHATSAPP_WEBHOOK=WEBHOOK)
        dispatcher = make_dispatcher(context)

        result = await dispatcher.dispatch(message_data())

        assert result["action"] == "message_forwarded"
        body = webhook_sender.deliver.await_args.args[0]
        assert body["from"] == SENDER
        assert body["message"]["text"] == "hello"
        assert body["pushname"] == "Alice"

    @pytest.mark.asyncio
    async def test_no_forward_without_webhook(self, make_context, webhook_sender, message_data):
        dispatcher = make_dispatcher(make_context(webhook_sender=None))

        result = await dispatcher.dispatch(message_data())

        assert result["action"] == "message_logged"
        webhook_sender.deliver.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_broadcast_message_not_forwarded(
        self, make_context, webhook_sender, message_data
    ):
        context = make_context(webhook_sender=webhook_sender, WHATSAPP_WEBHOOK=WEBHOOK)
        dispatcher = make_dispatcher(context)

        result = await dispatcher.dispatch(message_data(chat="status@broadcast"))

        assert result["action"] == "message_ignored_broadcast"
        webhook_sender.deliver.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_own_echo_not_forwarded(self, make_context, webhook_sender, message_data):
        context = make_context(webhook_sender=webhook_sender, WHATSAPP_WEBHOOK=WEBHOOK)
        dispatcher = make_dispatcher(context)

        result = await dispatcher.dispatch(
            message_data(sender="6281234567890:3@s.whatsapp.net", chat=SENDER)
        )

        assert result["action"] == "message_ignored_self"
        webhook_sender.deliver.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_group_message_still_forwarded(
        self, make_context, webhook_sender, message_data
    ):
        context = make_context(webhook_sender=webhook_sender, WHATSAPP_WEBHOOK=WEBHOOK)
        dispatcher = make_dispatcher(context)

        result = await dispatcher.dispatch(message_data(chat=GROUP))

        assert result["action"] == "message_forwarded"
        assert webhook_sender.deliver.await_args.args[0]["from"] == f"{SENDER} in {GROUP}"

    @pytest.mark.asyncio
    async def test_delivery_failure_keeps_pipeline_alive(self, make_context, message_data):
        sender = MagicMock()
        sender.deliver = AsyncMock(
            side_effect=[[WebhookError("connection refused", url=WEBHOOK)], []]
        )
        context = make_context(webhook_sender=sender, WHATSAPP_WEBHOOK=WEBHOOK)
        dispatcher = make_dispatcher(context)

        first = await dispatcher.dispatch(message_data(message_id="A1"))
        second = await dispatcher.dispatch(message_data(message_id="A2"))

        assert first["success"] is True
        assert first["action"] == "message_forward_failed"
        assert second["action"] == "message_forwarded"
        assert sender.deliver.await_count == 2

    @pytest.mark.asyncio
    async def test_media_failure_aborts_only_that_message(
        self, make_context, fake_client, webhook_sender, message_data
    ):
        context = make_context(webhook_sender=webhook_sender, WHATSAPP_WEBHOOK=WEBHOOK)
        dispatcher = make_dispatcher(context)
        fake_client.download.side_effect = [ConnectionError("cdn unreachable"), b"ok"]
        image = {"image_message": {"mimetype": "image/jpeg", "direct_path": "/v/t62/1"}}

        failed = await dispatcher.dispatch(message_data(message=image, message_id="B1"))
        delivered = await dispatcher.dispatch(message_data(message=image, message_id="B2"))

        assert failed["action"] == "message_media_failed"
        assert delivered["action"] == "message_forwarded"
        webhook_sender.deliver.assert_awaited_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("chat", [GROUP, "status@broadcast"])
    async def test_auto_reply_never_fires_for_group_or_broadcast(
        self, make_context, fake_client, message_data, chat
    ):
        dispatcher = make_dispatcher(make_context(WHATSAPP_AUTO_REPLY="Away right now"))

        await dispatcher.dispatch(message_data(chat=chat))

        fake_client.send_text.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_auto_reply_goes_to_sender(self, make_context, fake_client, message_data):
        dispatcher = make_dispatcher(make_context(WHATSAPP_AUTO_REPLY="Away right now"))

        await dispatcher.dispatch(message_data())

        fake_client.send_text.assert_awaited_once_with(SENDER, "Away right now")

    @pytest.mark.asyncio
    async def test_auto_reply_failure_does_not_block_forwarding(
        self, make_context, fake_client, webhook_sender, message_data
    ):
        fake_client.send_text.side_effect = RuntimeError("rate limited")
        context = make_context(
            webhook_sender=webhook_sender,
            WHATSAPP_WEBHOOK=WEBHOOK,
            WHATSAPP_AUTO_REPLY="Away right now",
        )
        dispatcher = make_dispatcher(context)

        result = await dispatcher.dispatch(message_data())

        assert result["action"] == "message_forwarded"

    @pytest.mark.asyncio
    async def test_custom_normalizer_is_used(self, make_context, webhook_sender, message_data):
        normalizer = MagicMock()
        normalizer.build = AsyncMock(return_value=MessagePayload(from_="custom"))
        context = make_context(webhook_sender=webhook_sender, WHATSAPP_WEBHOOK=WEBHOOK)
        dispatcher = make_dispatcher(context, normalizer=normalizer)

        await dispatcher.dispatch(message_data())

        assert webhook_sender.deliver.await_args.args[0]["from"] == "custom"


class TestReceiptForwarding:
    """Receipts are filtered by type and by origin."""

    @staticmethod
    def receipt(receipt_type: str, sender: str = SENDER) -> dict:
        return {
            "kind": "receipt",
            "chat": sender,
            "sender": sender,
            "timestamp": datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc).isoformat(),
            "type": receipt_type,
            "message_ids": ["ABC"],
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize("receipt_type", ["delivered", "read", "read-self"])
    async def test_forwardable_receipt_forwarded(self, make_context, webhook_sender, receipt_type):
        context = make_context(webhook_sender=webhook_sender, WHATSAPP_WEBHOOK=WEBHOOK)
        dispatcher = make_dispatcher(context)

        result = await dispatcher.dispatch(self.receipt(receipt_type))

        assert result["action"] == "receipt_forwarded"
        assert webhook_sender.deliver.await_args.args[0] == {
            "source": SENDER,
            "timestamp": "2024-05-01T12:00:00+00:00",
            "type": receipt_type,
            "ids": ["ABC"],
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize("receipt_type", ["played", "retry", "sender"])
    async def test_other_receipt_types_ignored(self, make_context, webhook_sender, receipt_type):
        context = make_context(webhook_sender=webhook_sender, WHATSAPP_WEBHOOK=WEBHOOK)
        dispatcher = make_dispatcher(context)

        result = await dispatcher.dispatch(self.receipt(receipt_type))

        assert result["action"] == "receipt_ignored"
        webhook_sender.deliver.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_own_receipt_not_forwarded(self, make_context, webhook_sender):
        context = make_context(webhook_sender=webhook_sender, WHATSAPP_WEBHOOK=WEBHOOK)
        dispatcher = make_dispatcher(context)

        result = await dispatcher.dispatch(self.receipt("read-self", sender=OWN_ID))

        assert result["action"] == "receipt_ignored_self"
        webhook_sender.deliver.assert_not_awaited()


class TestHistorySync:
    """History chunks are written through the context's sequence."""

    @pytest.mark.asyncio
    async def test_history_chunk_written(self, make_context, tmp_path):
        context = make_context()
        dispatcher = make_dispatcher(context)

        result = await dispatcher.dispatch(
            {"kind": "history_sync", "sync_type": "INITIAL_BOOTSTRAP", "data": {"conversations": []}}
        )

        assert result["action"] == "history_written"
        expected = (
            tmp_path / "storages" / f"history-1700000000-{OWN_ID}-1-INITIAL_BOOTSTRAP.json"
        )
        assert expected.exists()

    @pytest.mark.asyncio
    async def test_history_dropped_without_account(self, make_context, fake_client):
        fake_client._own_id = None
        dispatcher = make_dispatcher(make_context())

        result = await dispatcher.dispatch({"kind": "history_sync", "data": {}})

        assert result["success"] is True
        assert result["action"] == "history_dropped"

    @pytest.mark.asyncio
    async def test_write_failure_is_dropped(self, make_context, tmp_path):
        blocker = tmp_path / "blocked"
        blocker.write_text("not a directory")
        dispatcher = make_dispatcher(make_context(PATH_STORAGES=str(blocker)))

        result = await dispatcher.dispatch({"kind": "history_sync", "data": {}})

        assert result["success"] is True
        assert result["action"] == "history_dropped"

    @pytest.mark.asyncio
    async def test_history_written_off_the_event_loop(self, make_context):
        writer_threads = []
        writer = MagicMock()
        writer.write.side_effect = lambda account_id, event: writer_threads.append(
            threading.get_ident()
        )
        dispatcher = make_dispatcher(make_context(), history_writer=writer)

        result = await dispatcher.dispatch({"kind": "history_sync", "data": {}})

        assert result["action"] == "history_written"
        writer.write.assert_called_once()
        assert writer.write.call_args.args[0] == OWN_ID
        assert writer_threads[0] != threading.get_ident()
