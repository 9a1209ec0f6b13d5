"""
Tests for building records from stdlib LogRecords and structlog event dicts.
"""

import logging
import sys
from datetime import datetime, timezone

from stackhook.core.levels import PANIC, Level
from stackhook.models.entry import Record


def _log_record(level: int = logging.INFO, msg: str = "hello", args=None, exc_info=None, **extra) -> logging.LogRecord:
    record = logging.getLogger("tests.records").makeRecord(
        "tests.records", level, __file__, 1, msg, args, exc_info, extra=extra or None
    )
    return record


class TestFromLogging:
    """Test conversion of stdlib records."""

    def test_message_and_extra_fields(self) -> None:
        """Test the formatted message and extra fields are carried over."""
        record = _log_record(msg="count=%d", args=(3,), animal="walrus", number=1)

        converted = Record.from_logging(record)

        assert converted.message == "count=3"
        assert converted.data == {"animal": "walrus", "number": 1}
        assert converted.level is Level.INFO

    def test_time_is_utc_created(self) -> None:
        """Test the record time is the creation time in UTC."""
        record = _log_record()
        record.created = 1441615713.0

        converted = Record.from_logging(record)

        assert converted.time == datetime(2015, 9, 7, 8, 48, 33, tzinfo=timezone.utc)

    def test_level_numbers(self) -> None:
        """Test stdlib level numbers translate to levels."""
        assert Record.from_logging(_log_record(logging.CRITICAL)).level is Level.FATAL
        assert Record.from_logging(_log_record(PANIC)).level is Level.PANIC
        assert Record.from_logging(_log_record(25)).level == 25

    def test_exception_is_formatted_into_field(self) -> None:
        """Test exc_info is formatted into an exception field."""
        try:
            raise ValueError("bad value")
        except ValueError:
            record = _log_record(logging.ERROR, exc_info=sys.exc_info())

        converted = Record.from_logging(record)

        assert "ValueError: bad value" in converted.data["exception"]
        assert "exc_info" not in converted.data

    def test_explicit_exception_field_wins(self) -> None:
        """Test an explicit exception field is not overwritten."""
        try:
            raise ValueError("bad value")
        except ValueError:
            record = _log_record(logging.ERROR, exc_info=sys.exc_info(), exception="mine")

        assert Record.from_logging(record).data["exception"] == "mine"

    def test_formatter_added_attributes_are_ignored(self) -> None:
        """Test attributes added by formatters are not fields."""
        record = _log_record(user="bob")
        logging.Formatter("%(asctime)s %(message)s").format(record)

        assert Record.from_logging(record).data == {"user": "bob"}


class TestFromEventDict:
    """Test conversion of structlog event dicts."""

    def test_basic_event(self) -> None:
        """Test an event dict becomes message, level and fields."""
        converted = Record.from_event_dict(
            "warning",
            {"event": "disk low", "free_mb": 12, "timestamp": "2015-09-07T08:48:33Z"},
        )

        assert converted.message == "disk low"
        assert converted.level is Level.WARNING
        assert converted.time == datetime(2015, 9, 7, 8, 48, 33, tzinfo=timezone.utc)
        assert converted.data == {"free_mb": 12}

    def test_level_key_takes_precedence(self) -> None:
        """Test the level key wins over the method name."""
        converted = Record.from_event_dict("log", {"event": "x", "level": "critical"})
        assert converted.level is Level.FATAL

    def test_unknown_method_is_kept_raw(self) -> None:
        """Test an unknown method name is kept as the raw level."""
        converted = Record.from_event_dict("trace", {"event": "x"})
        assert converted.level == "trace"

    def test_non_string_event_is_stringified(self) -> None:
        """Test a non-string event becomes a string message."""
        converted = Record.from_event_dict("info", {"event": 404})
        assert converted.message == "404"

    def test_timestamp_variants(self) -> None:
        """Test datetime, epoch and unparseable timestamps."""
        when = datetime(2020, 1, 1, tzinfo=timezone.utc)

        assert Record.from_event_dict("info", {"event": "x", "timestamp": when}).time == when
        assert Record.from_event_dict("info", {"event": "x", "timestamp": when.timestamp()}).time == when

        before = datetime.now(timezone.utc)
        fallback = Record.from_event_dict("info", {"event": "x", "timestamp": "not a time"}).time
        assert fallback >= before

    def test_out_of_range_epoch_falls_back_to_now(self) -> None:
        """Test an epoch the platform cannot represent falls back to now."""
        before = datetime.now(timezone.utc)

        converted = Record.from_event_dict("info", {"event": "x", "timestamp": 1e20})

        assert converted.time >= before
        assert converted.time.tzinfo is not None

    def test_naive_timestamps_become_aware(self) -> None:
        """Test naive timestamps are read as local time and made aware."""
        naive = datetime(2015, 9, 7, 8, 48, 33)
        expected = naive.astimezone(timezone.utc)

        from_string = Record.from_event_dict("info", {"event": "x", "timestamp": "2015-09-07T08:48:33"}).time
        from_datetime = Record.from_event_dict("info", {"event": "x", "timestamp": naive}).time

        assert from_string.tzinfo is not None
        assert from_string == expected
        assert from_datetime == expected
