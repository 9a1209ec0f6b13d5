"""
stackhook - Google Cloud Logging hook for Python logging

Relays stdlib logging records and structlog events to Cloud Logging
(formerly Stackdriver), mapping levels to severities and promoting
selected fields to entry labels. Delivery is either buffered through the
client library's background transport or synchronous per call.
"""

__version__ = "0.1.0"

from .core.client import CloudLogger, CloudLoggingClient
from .core.context import SyncContext
from .core.hook import StackdriverHook, new, new_synchronous
from .core.levels import PANIC, Level, Severity, map_level

__all__ = [
    "CloudLogger",
    "CloudLoggingClient",
    "Level",
    "PANIC",
    "Severity",
    "StackdriverHook",
    "SyncContext",
    "map_level",
    "new",
    "new_synchronous",
]
