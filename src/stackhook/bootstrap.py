"""
Wiring a hook into an application's logging.

``install`` is the one-call setup: it builds a hook from settings,
attaches it to stdlib logging and structlog, and keeps the client
libraries' own loggers away from it.
"""

import logging
import sys
from typing import Any, Iterable, List, Optional

import structlog

from .config import HookSettings, get_settings
from .core.exceptions import ConfigurationError
from .core.hook import StackdriverHook, new, new_synchronous
from .core.levels import PANIC


def configure_logging(log_level: str = "INFO", hook: Optional[StackdriverHook] = None) -> None:
    """
    Configure stdlib logging and structlog.

    structlog renders straight to stderr rather than through stdlib
    loggers, so a hook attached to the root logger never sees a structlog
    event twice. When ``hook`` is given it runs as a processor just before
    rendering and receives the event's keyword fields intact.
    """
    level = getattr(logging, log_level.upper())
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger().setLevel(level)

    processors: List[Any] = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if hook is not None:
        processors.append(hook)
    processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )


def exclude_loggers(names: Iterable[str]) -> None:
    """Stop ``names`` from propagating to the root logger; they log to stderr instead."""
    for name in names:
        excluded = logging.getLogger(name)
        excluded.propagate = False
        if not excluded.handlers:
            excluded.addHandler(logging.StreamHandler(sys.stderr))


def build_hook(client: Any, settings: HookSettings, **options: Any) -> StackdriverHook:
    """Build a hook from settings without attaching it anywhere."""
    if not settings.log_name:
        raise ConfigurationError("A log name is required to build a hook")

    factory = new_synchronous if settings.synchronous else new
    hook = factory(client, settings.log_name, **options)
    # Synchronous hooks start on a background context; bounding a call
    # with a deadline is left to the caller through set_sync_context.
    hook.set_labels(*settings.labels)
    return hook


def install(client: Any, settings: Optional[HookSettings] = None, **options: Any) -> StackdriverHook:
    """
    Build a hook from settings and attach it to the application's logging.

    ``options`` are forwarded to ``client.logger``. The client is not
    closed here; the caller owns it.
    """
    settings = settings or get_settings()
    hook = build_hook(client, settings, **options)

    logging.addLevelName(PANIC, "PANIC")
    exclude_loggers(settings.logging.excluded_loggers)

    # basicConfig is a no-op once the root logger has handlers
    configure_logging(settings.logging.level, hook=hook)
    if settings.logging.attach_root:
        logging.getLogger().addHandler(hook)

    return hook
