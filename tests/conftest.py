"""
Pytest configuration and common fixtures for wabridge tests.

Provides a fake protocol client, settings built from a controlled
environment, and ready-made pipeline contexts.
"""

from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from wabridge.core.broadcast import QueueBroadcastSink
from wabridge.core.config.settings import Settings
from wabridge.core.pipeline_context import PipelineContext
from wabridge.domain.interfaces.messaging_interface import IMessagingClient

OWN_ID = "6281234567890:12@s.whatsapp.net"
SENDER = "6289876543210@s.whatsapp.net"
GROUP = "120363025246125486@g.us"


class FakeMessagingClient(IMessagingClient):
    """
    In-memory protocol client.

    Commands are replaced per instance by AsyncMocks so tests can assert on
    awaits and inject failures through ``side_effect``.
    """

    def __init__(self, own_id: str | None = OWN_ID, push_name: str = "Bridge"):
        self._own_id = own_id
        self._push_name = push_name
        self.connected = True
        self.logged_in = own_id is not None
        self.send_presence = AsyncMock()
        self.send_text = AsyncMock(return_value="3EB0REPLY")
        self.download = AsyncMock(return_value=b"\xff\xd8\xff\xe0fake-jpeg")
        self.is_on_whatsapp = AsyncMock(side_effect=lambda jids: {jid: True for jid in jids})

    async def send_presence(self, available: bool = True) -> None:
        pass

    async def send_text(self, recipient: str, text: str) -> str:
        return ""

    async def download(self, media) -> bytes:
        return b""

    async def is_on_whatsapp(self, jids: list[str]) -> dict[str, bool]:
        return {}

    @property
    def own_id(self) -> str | None:
        return self._own_id

    @property
    def push_name(self) -> str:
        return self._push_name

    def is_connected(self) -> bool:
        return self.connected

    def is_logged_in(self) -> bool:
        return self.logged_in


@pytest.fixture
def fake_client() -> FakeMessagingClient:
    return FakeMessagingClient()


@pytest.fixture
def make_settings(monkeypatch, tmp_path):
    """Build Settings from a clean environment plus overrides."""

    def _make(**env: str) -> Settings:
        defaults = {
            "LOG_LEVEL": "DEBUG",
            "ENVIRONMENT": "DEV",
            "PATH_MEDIA": str(tmp_path / "media"),
            "PATH_STORAGES": str(tmp_path / "storages"),
            "WHATSAPP_AUTO_REPLY": "",
            "WHATSAPP_WEBHOOK": "",
        }
        defaults.update(env)
        for key, value in defaults.items():
            monkeypatch.setenv(key, value)
        return Settings()

    return _make


@pytest.fixture
def settings(make_settings) -> Settings:
    return make_settings()


@pytest.fixture
def broadcast_sink() -> QueueBroadcastSink:
    return QueueBroadcastSink()


@pytest.fixture
def webhook_sender() -> MagicMock:
    sender = MagicMock()
    sender.deliver = AsyncMock(return_value=[])
    return sender


@pytest.fixture
def make_context(fake_client, broadcast_sink, make_settings):
    """Build a PipelineContext; webhook_sender is attached only when given."""

    def _make(webhook_sender=None, **env: str) -> PipelineContext:
        return PipelineContext(
            client=fake_client,
            settings=make_settings(**env),
            broadcast=broadcast_sink,
            webhook_sender=webhook_sender,
            started_at=1700000000,
            exit_process=MagicMock(),
        )

    return _make


def message_event_data(
    *,
    message: dict[str, Any] | None = None,
    chat: str = SENDER,
    sender: str = SENDER,
    message_id: str = "3EB0A1B2C3D4",
    push_name: str = "Alice",
) -> dict[str, Any]:
    """Raw message event mapping as the protocol client hands it over."""
    return {
        "kind": "message",
        "info": {
            "id": message_id,
            "chat": chat,
            "sender": sender,
            "push_name": push_name,
            "timestamp": datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc).isoformat(),
            "is_group": chat.endswith("@g.us"),
        },
        "message": message if message is not None else {"conversation": "hello"},
    }


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch):
    """Keep a developer's .env from leaking webhook targets into tests."""
    monkeypatch.setenv("ENVIRONMENT", "DEV")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("WHATSAPP_WEBHOOK", "")
    monkeypatch.setenv("WHATSAPP_AUTO_REPLY", "")


@pytest.fixture
def message_data():
    """Factory for raw message event mappings."""
    return message_event_data
