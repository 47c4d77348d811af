"""
Pipeline Context - dependency container for the event pipeline.

Replaces process-wide globals (client handle, startup time, history counter)
with one explicit object handed to the dispatcher.
"""

import os
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import aiohttp

from wabridge.core.config.settings import Settings
from wabridge.delivery.webhook_sender import WebhookSender
from wabridge.domain.interfaces.broadcast_interface import IBroadcastSink
from wabridge.domain.interfaces.messaging_interface import IMessagingClient
from wabridge.history.history_writer import HistorySequence

@dataclass
class PipelineContext:
    """
    Everything an event handler may touch outside the event itself.

    Design:
        - One instance per process lifetime
        - ``client`` is shared read-only; commands may be issued concurrently
        - ``history_sequence`` is the only mutable shared state and locks itself
        - ``webhook_sender`` is None when no destination is configured
    """

    client: IMessagingClient
    settings: Settings
    broadcast: IBroadcastSink
    webhook_sender: WebhookSender | None = None
    started_at: int = field(default_factory=lambda: int(time.time()))
    history_sequence: HistorySequence = field(default_factory=HistorySequence)
    exit_process: Callable[[int], Any] = field(default=os._exit, repr=False)

    @property
    def account_id(self) -> str | None:
        """JID of the logged in account, if known."""
        return self.client.own_id

    @property
    def can_forward(self) -> bool:
        """Check if webhook forwarding is possible at all."""
        return self.webhook_sender is not None and self.settings.has_webhook

    @classmethod
    def create(
        cls,
        client: IMessagingClient,
        broadcast: IBroadcastSink,
        session: aiohttp.ClientSession,
        settings: Settings,
        **kwargs: Any,
    ) -> "PipelineContext":
        """
        Build a context whose webhook sender follows the settings.

        Args:
            client: Protocol client
            broadcast: UI broadcast sink
            session: Shared aiohttp session, used only when webhooks are configured
            settings: Application settings
            **kwargs: Overrides for the remaining fields (started_at, exit_process)
        """
        sender = None
        if settings.has_webhook:
            sender = WebhookSender(
                session,
                settings.webhook_urls,
                secret=settings.webhook_secret,
                timeout=settings.webhook_timeout,
            )
        return cls(client=client, settings=settings, broadcast=broadcast, webhook_sender=sender, **kwargs)
