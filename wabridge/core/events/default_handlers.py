"""
Default log-only handlers for bridge events.

Every event passes through DefaultEventLogger before (or instead of) any
side effect, so the log and the statistics see the full stream.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from wabridge.core.logging.logger import get_logger
from wabridge.events.bridge_events import (
    AppStateEvent,
    BaseEvent,
    DeleteForMeEvent,
    MessageEvent,
    PresenceEvent,
)


class MessageLogStrategy(Enum):
    """Strategies for logging received messages."""

    SUMMARIZED = "summarized"  # Message id, origin, type and text preview
    STATS_ONLY = "stats_only"  # Log only statistics, no individual messages
    NONE = "none"  # Don't log messages


class DefaultEventLogger:
    """
    Default logger for the event stream.

    Logs the log-only variants (presence, delete-for-me, app state) and a
    summary line per message, and keeps counters per event kind.
    """

    def __init__(
        self,
        log_strategy: MessageLogStrategy = MessageLogStrategy.SUMMARIZED,
        content_preview_length: int = 100,
    ):
        """
        Args:
            log_strategy: Strategy for message logging (default: SUMMARIZED)
            content_preview_length: Max characters for text preview (default: 100)
        """
        self.log_strategy = log_strategy
        self.content_preview_length = content_preview_length
        self.logger = get_logger(__name__)
        self._stats = self._new_stats()

    @staticmethod
    def _new_stats() -> dict[str, Any]:
        return {
            "total_events": 0,
            "by_kind": {},
            "messages_by_type": {},
            "last_event_at": None,
            "last_reset": datetime.now(),
        }

    def record(self, event: BaseEvent) -> None:
        """Count one event."""
        self._stats["total_events"] += 1
        self._stats["by_kind"][event.kind] = self._stats["by_kind"].get(event.kind, 0) + 1
        self._stats["last_event_at"] = datetime.now()

    def log_message(self, event: MessageEvent) -> None:
        message_type = self._get_message_type(event)
        by_type = self._stats["messages_by_type"]
        by_type[message_type] = by_type.get(message_type, 0) + 1

        if self.log_strategy == MessageLogStrategy.NONE:
            return
        if self.log_strategy == MessageLogStrategy.STATS_ONLY:
            total = sum(by_type.values())
            if total % 10 == 0:
                self.logger.info(f"Message stats: {total} total, types: {by_type}")
            return

        info = event.info
        preview = self._get_content_preview(event)
        sender = f"{info.source_string} ({info.push_name})" if info.push_name else info.source_string
        self.logger.info(
            f"Received message {info.id} from {sender}: {message_type}"
            + (f" - '{preview}'" if preview else "")
        )

    def log_presence(self, event: PresenceEvent) -> None:
        if not event.unavailable:
            self.logger.info(f"{event.from_} is now online")
        elif event.last_seen is None:
            self.logger.info(f"{event.from_} is now offline")
        else:
            self.logger.info(
                f"{event.from_} is now offline (last seen: {event.last_seen.isoformat()})"
            )

    def log_delete_for_me(self, event: DeleteForMeEvent) -> None:
        self.logger.info(f"Deleted message {event.message_id} for {event.sender} in {event.chat}")

    def log_app_state(self, event: AppStateEvent) -> None:
        self.logger.debug(f"App state event: {event.index} / {event.sync_action_value}")

    def _get_message_type(self, event: MessageEvent) -> str:
        media = event.message.iter_media()
        if media:
            return media[0].media_kind.value
        if event.message.reaction_message is not None:
            return "reaction"
        return event.info.type or "text"

    def _get_content_preview(self, event: MessageEvent) -> str:
        content = event.message.get_text()
        if len(content) > self.content_preview_length:
            content = content[: self.content_preview_length] + "..."
        return content

    def get_stats(self) -> dict[str, Any]:
        """
        Get current event statistics.

        Returns:
            Dictionary containing event counters
        """
        return self._stats.copy()

    def reset_stats(self) -> None:
        """Reset statistics tracking."""
        self._stats = self._new_stats()
