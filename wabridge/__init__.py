"""
wabridge - WhatsApp event bridge

Consumes the event stream of a WhatsApp protocol client and turns it into
normalized webhook deliveries, UI broadcasts and local history files.

Clean Import Interface:
- Only pipeline essentials exposed at top level
- Domain-specific imports available via wabridge.domain paths
"""

from .core.events import BridgeEventDispatcher, BridgeEventHandler
from .core.pipeline_context import PipelineContext
from .events import parse_event

# Dynamic version from pyproject.toml
from .core.config.settings import settings

__version__ = settings.version

__all__ = [
    "BridgeEventDispatcher",
    "BridgeEventHandler",
    "PipelineContext",
    "parse_event",
]
