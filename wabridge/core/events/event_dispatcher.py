"""
Event dispatcher for routing bridge events to the event handler.

One event at a time goes in; a result dict always comes out. Nothing raised
while handling an event escapes, so the event stream stays alive.
"""

from collections.abc import Awaitable, Callable, Mapping
from datetime import datetime
from typing import Any

from wabridge.core.logging.context import event_context
from wabridge.core.logging.logger import get_logger
from wabridge.core.types import EventKind
from wabridge.domain.errors import MalformedEventError
from wabridge.events.bridge_events import BaseEvent, parse_event

from .event_handler import BridgeEventHandler

RouteHandler = Callable[[Any], Awaitable[str]]


class BridgeEventDispatcher:
    """
    Routes every EventKind to one BridgeEventHandler coroutine.

    The route table is checked at construction; a kind without a route is a
    programming error and fails fast instead of being dropped at runtime.
    """

    def __init__(self, event_handler: BridgeEventHandler):
        """
        Args:
            event_handler: BridgeEventHandler instance with injected context

        Raises:
            ValueError: If some EventKind has no route
        """
        self.logger = get_logger(__name__)
        self._event_handler = event_handler
        self._routes = self._build_routes(event_handler)

        missing = [kind.value for kind in EventKind if kind not in self._routes]
        if missing:
            raise ValueError(f"No route for event kinds: {missing}")

        self.logger.info(
            f"BridgeEventDispatcher initialized with {event_handler.__class__.__name__}"
        )

    def _build_routes(self, event_handler: BridgeEventHandler) -> dict[EventKind, RouteHandler]:
        return {
            EventKind.MESSAGE: event_handler.handle_message,
            EventKind.RECEIPT: event_handler.handle_receipt,
            EventKind.PRESENCE: event_handler.handle_presence,
            EventKind.PAIR_SUCCESS: event_handler.handle_pair_success,
            EventKind.LOGGED_OUT: event_handler.handle_logged_out,
            EventKind.CONNECTED: event_handler.handle_connected,
            EventKind.PUSH_NAME_CHANGED: event_handler.handle_push_name_changed,
            EventKind.STREAM_REPLACED: event_handler.handle_stream_replaced,
            EventKind.HISTORY_SYNC: event_handler.handle_history_sync,
            EventKind.APP_STATE_SYNC_COMPLETE: event_handler.handle_app_state_sync_complete,
            EventKind.APP_STATE: event_handler.handle_app_state,
            EventKind.DELETE_FOR_ME: event_handler.handle_delete_for_me,
        }

    @property
    def event_handler(self) -> BridgeEventHandler:
        return self._event_handler

    async def dispatch(self, event: BaseEvent | Mapping[str, Any]) -> dict[str, Any]:
        """
        Handle one event to completion.

        Args:
            event: A parsed event, or the raw mapping produced by the client

        Returns:
            Dictionary with ``success``, ``kind``, ``action``,
            ``dispatch_time`` and ``processed_at``; ``error`` on failure
        """
        dispatch_start = datetime.now()

        if not isinstance(event, BaseEvent):
            try:
                event = parse_event(dict(event) if isinstance(event, Mapping) else event)
            except MalformedEventError as e:
                self.logger.warning(f"Dropping malformed event: {e.message}")
                return self._result(dispatch_start, False, None, "malformed_event", e.message)

        kind = event.event_kind
        account_id = self._event_handler.context.account_id
        with event_context(account_id=account_id, event_id=event.event_id):
            self._event_handler.event_logger.record(event)
            try:
                action = await self._routes[kind](event)
            except Exception as e:
                self.logger.error(
                    f"Error handling {kind.value} event {event.event_id or '-'}"
                    f"{self._describe_source(event)}: {e}",
                    exc_info=True,
                )
                return self._result(dispatch_start, False, kind, "handler_error", str(e))

            result = self._result(dispatch_start, True, kind, action)
            self.logger.debug(f"{kind.value} -> {action} in {result['dispatch_time']:.3f}s")
            return result

    @staticmethod
    def _describe_source(event: BaseEvent) -> str:
        source = getattr(event, "source_string", None)
        if source is None and hasattr(event, "info"):
            source = event.info.source_string
        return f" from {source}" if source else ""

    @staticmethod
    def _result(
        dispatch_start: datetime,
        success: bool,
        kind: EventKind | None,
        action: str,
        error: str | None = None,
    ) -> dict[str, Any]:
        dispatch_end = datetime.now()
        result = {
            "success": success,
            "kind": kind.value if kind else None,
            "action": action,
            "dispatch_time": (dispatch_end - dispatch_start).total_seconds(),
            "processed_at": dispatch_end.isoformat(),
        }
        if error is not None:
            result["error"] = error
        return result
