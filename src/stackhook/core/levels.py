"""
Source levels, remote severities and the mapping between them.

Source levels follow the six-level model most application loggers share
(DEBUG through PANIC). Severities are the names Cloud Logging accepts in
an entry's ``severity`` field.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

# stdlib has no level above CRITICAL; PANIC sits one step higher.
PANIC = 60


class Level(str, Enum):
    """Log levels emitted by the application side."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    FATAL = "FATAL"
    PANIC = "PANIC"


class Severity(str, Enum):
    """Cloud Logging severities, lowest to highest."""

    DEFAULT = "DEFAULT"
    DEBUG = "DEBUG"
    INFO = "INFO"
    NOTICE = "NOTICE"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"
    ALERT = "ALERT"
    EMERGENCY = "EMERGENCY"


LEVEL_TO_SEVERITY: Dict[Level, Severity] = {
    Level.DEBUG: Severity.DEBUG,
    Level.INFO: Severity.INFO,
    Level.WARNING: Severity.WARNING,
    Level.ERROR: Severity.ERROR,
    Level.FATAL: Severity.CRITICAL,
    Level.PANIC: Severity.ALERT,
}

_LEVELNO_TO_LEVEL: Dict[int, Level] = {
    logging.DEBUG: Level.DEBUG,
    logging.INFO: Level.INFO,
    logging.WARNING: Level.WARNING,
    logging.ERROR: Level.ERROR,
    logging.CRITICAL: Level.FATAL,
    PANIC: Level.PANIC,
}

# structlog method names (and the lowercased ``level`` values its
# add_log_level processor writes).
_METHOD_TO_LEVEL: Dict[str, Level] = {
    "debug": Level.DEBUG,
    "info": Level.INFO,
    "msg": Level.INFO,
    "warning": Level.WARNING,
    "warn": Level.WARNING,
    "error": Level.ERROR,
    "exception": Level.ERROR,
    "critical": Level.FATAL,
    "fatal": Level.FATAL,
    "panic": Level.PANIC,
}


def all_levels() -> List[Level]:
    """Every source level, lowest first."""
    return list(Level)


def level_from_levelno(levelno: int) -> Optional[Level]:
    """Translate a stdlib numeric level; ``None`` when it is not one of the six."""
    return _LEVELNO_TO_LEVEL.get(levelno)


def level_from_name(name: Any) -> Optional[Level]:
    """Translate a structlog method name or level string; ``None`` when unknown."""
    if not isinstance(name, str):
        return None
    return _METHOD_TO_LEVEL.get(name.lower())


def map_level(level: Any) -> Severity:
    """
    Map a source level to its remote severity.

    Total over its input: stdlib level numbers and level names are
    accepted as well as ``Level`` members, and anything unrecognised
    falls back to ``Severity.DEBUG``.
    """
    if isinstance(level, Level):
        return LEVEL_TO_SEVERITY[level]

    resolved: Optional[Level] = None
    if isinstance(level, int) and not isinstance(level, bool):
        resolved = level_from_levelno(level)
    elif isinstance(level, str):
        resolved = level_from_name(level)

    if resolved is None:
        return Severity.DEBUG
    return LEVEL_TO_SEVERITY[resolved]
