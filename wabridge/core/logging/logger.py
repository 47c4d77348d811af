"""
Rich console logging with account and event prefixes.

Every line logged while the dispatcher handles an event is prefixed with
``[A:<account>][E:<event>]`` taken from the context variables in
``wabridge.core.logging.context``; explicit values bound with
``ContextLogger.bind`` are the fallback outside an event.
"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from datetime import datetime
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

from wabridge.core.config.settings import settings

from .context import get_current_account_context, get_current_event_context

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

CONSOLE_FORMAT = "[%(short_name)s] %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-7s | %(short_name)s | %(message)s"

_console = Console(
    theme=Theme(
        {
            "logging.level.debug": "dim white",
            "logging.level.info": "cyan",
            "logging.level.warning": "yellow",
            "logging.level.error": "bold red",
        }
    )
)


class ShortNameFormatter(logging.Formatter):
    """Adds ``short_name``: package loggers keep only their last two parts."""

    def format(self, record: logging.LogRecord) -> str:
        name = record.name
        if name.startswith("wabridge."):
            name = ".".join(name.split(".")[-2:])
        record.short_name = name
        return super().format(record)


class ContextLogger(logging.LoggerAdapter):
    """
    LoggerAdapter that prefixes messages with the account and event id.

    The context variables win over bound values, so a module-level logger
    created at import time still reports the event currently being handled.
    """

    def __init__(
        self,
        logger: logging.Logger,
        account_id: str | None = None,
        event_id: str | None = None,
    ):
        super().__init__(logger, {"account_id": account_id, "event_id": event_id})

    @property
    def account_id(self) -> str | None:
        return get_current_account_context() or self.extra["account_id"]

    @property
    def event_id(self) -> str | None:
        return get_current_event_context() or self.extra["event_id"]

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        prefix = ""
        if self.account_id:
            prefix += f"[A:{self.account_id}]"
        if self.event_id:
            prefix += f"[E:{self.event_id}]"
        return (f"{prefix} {msg}" if prefix else msg), kwargs

    def bind(self, **kwargs: str | None) -> ContextLogger:
        """Copy of this logger with ``account_id`` and/or ``event_id`` replaced."""
        return ContextLogger(
            self.logger,
            account_id=kwargs.get("account_id", self.extra["account_id"]),
            event_id=kwargs.get("event_id", self.extra["event_id"]),
        )


def setup_logging(
    *,
    level: str = "INFO",
    mode: str = "PROD",
    log_dir: str | None = None,
) -> None:
    """
    Configure the root logger.

    Args:
        level: One of DEBUG, INFO, WARNING, ERROR; anything else means INFO
        mode: ``DEV`` adds a daily file under ``log_dir`` next to the console
        log_dir: Directory for the daily file
    """
    lvl = level.upper() if level.upper() in LEVELS else "INFO"

    console_handler = RichHandler(
        console=_console,
        rich_tracebacks=True,
        show_path=False,
        markup=False,
    )
    console_handler.setFormatter(ShortNameFormatter(CONSOLE_FORMAT))
    handlers: list[logging.Handler] = [console_handler]

    logfile = None
    if mode.upper() == "DEV" and log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        logfile = Path(log_dir) / f"wabridge_{datetime.now():%Y%m%d}.log"
        file_handler = logging.FileHandler(logfile, encoding="utf-8")
        file_handler.setFormatter(ShortNameFormatter(FILE_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(level=lvl, handlers=handlers, force=True)

    # aiohttp access and client noise stays out of the bridge log
    logging.getLogger("aiohttp").setLevel(max(logging.WARNING, logging.getLevelName(lvl)))

    target = f"console + {logfile}" if logfile else "console"
    logging.getLogger("wabridge.logging").info(f"Logging initialized ({lvl}, {target})")


def setup_app_logging() -> None:
    """Configure logging from the global settings."""
    setup_logging(
        level=settings.log_level,
        mode=settings.environment,
        log_dir=settings.log_dir,
    )


def get_logger(name: str) -> ContextLogger:
    """
    Get a context-aware logger.

    Args:
        name: Logger name (usually __name__)
    """
    return ContextLogger(logging.getLogger(name))
