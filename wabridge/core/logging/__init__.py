"""Logging module for wabridge."""

from .context import event_context
from .logger import get_logger, setup_app_logging, setup_logging

__all__ = ["event_context", "get_logger", "setup_app_logging", "setup_logging"]
