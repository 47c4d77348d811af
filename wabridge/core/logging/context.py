"""
Event context management using contextvars for automatic propagation.

The dispatcher sets the account and event identifiers once per event; every
component that logs while that event is being handled picks them up without
manual parameter passing.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

# Locally authenticated account (device JID)
_account_context: ContextVar[str | None] = ContextVar("account_id", default=None)
# Identifier of the event currently being handled
_event_context: ContextVar[str | None] = ContextVar("event_id", default=None)


def get_current_account_context() -> str | None:
    """Get the current account ID from context variables."""
    return _account_context.get()


def get_current_event_context() -> str | None:
    """Get the current event ID from context variables."""
    return _event_context.get()


@contextmanager
def event_context(
    account_id: str | None = None, event_id: str | None = None
) -> Iterator[None]:
    """
    Scope the logging context to a single event.

    Previous values are restored on exit so nested or concurrent handling in
    other tasks never sees a stale event id.
    """
    account_token = _account_context.set(account_id)
    event_token = _event_context.set(event_id)
    try:
        yield
    finally:
        _event_context.reset(event_token)
        _account_context.reset(account_token)


def get_context_info() -> dict[str, str | None]:
    """
    Get current context information for debugging.

    Returns:
        Dictionary with current account_id and event_id
    """
    return {
        "account_id": get_current_account_context(),
        "event_id": get_current_event_context(),
    }
