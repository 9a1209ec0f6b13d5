"""
Record and entry models.

- Record: what the logging framework hands over (message, level, time, fields)
- RemoteEntry: what Cloud Logging receives (timestamp, severity, payload, labels)
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field

from ..core.levels import Severity, level_from_levelno, level_from_name

# Attributes every LogRecord carries; anything else on a record came in via ``extra=``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None, None)).keys()
) | {"message", "asctime"}

# Event dict keys consumed into the record itself rather than its fields.
_EVENT_DICT_KEYS = frozenset({"event", "level", "timestamp"})

_exc_formatter = logging.Formatter()


def _parse_timestamp(value: Any) -> datetime:
    """Best-effort conversion of a structlog timestamp value to an aware datetime."""
    parsed = None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            parsed = datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            pass
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            pass

    if parsed is None:
        return datetime.now(timezone.utc)
    if parsed.tzinfo is None:
        # TimeStamper without utc=True stamps naive local time
        parsed = parsed.astimezone(timezone.utc)
    return parsed


class Record(BaseModel):
    """
    A single log record as emitted by the application.

    ``level`` is normally a ``Level`` member; unknown levels are kept as
    whatever value the framework used so that severity mapping can
    normalise them.
    """

    message: str = Field(description="Rendered log message")
    level: Any = Field(description="Source level (Level member, or raw value when unknown)")
    time: datetime = Field(description="When the record was emitted")
    data: Dict[str, Any] = Field(
        default_factory=dict,
        description="Structured fields attached to the record",
    )

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_logging(cls, record: logging.LogRecord) -> "Record":
        """Build a record from a stdlib ``LogRecord``; ``extra=`` keys become fields."""
        data = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS
        }

        if record.exc_info and record.exc_info[0] is not None and "exception" not in data:
            data["exception"] = record.exc_text or _exc_formatter.formatException(record.exc_info)

        level = level_from_levelno(record.levelno)
        return cls(
            message=record.getMessage(),
            level=level if level is not None else record.levelno,
            time=datetime.fromtimestamp(record.created, tz=timezone.utc),
            data=data,
        )

    @classmethod
    def from_event_dict(cls, method_name: str, event_dict: Mapping[str, Any]) -> "Record":
        """Build a record from a structlog event dict."""
        event = event_dict.get("event", "")
        level = level_from_name(event_dict.get("level")) or level_from_name(method_name)

        return cls(
            message=event if isinstance(event, str) else str(event),
            level=level if level is not None else method_name,
            time=_parse_timestamp(event_dict.get("timestamp")),
            data={
                key: value
                for key, value in event_dict.items()
                if key not in _EVENT_DICT_KEYS
            },
        )


class RemoteEntry(BaseModel):
    """
    Entry in the shape Cloud Logging ingests.

    The payload becomes the entry's ``jsonPayload``; labels become its
    indexed ``labels`` map.
    """

    timestamp: datetime = Field(description="Event time")
    severity: Severity = Field(description="Cloud Logging severity")
    payload: Dict[str, Any] = Field(description="Message plus all non-label fields")
    labels: Dict[str, str] = Field(default_factory=dict, description="Fields promoted to labels")
