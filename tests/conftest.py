"""
Pytest configuration and shared fixtures.

Contains fake remote client doubles and common records for all test modules.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Generator, List, Optional, Tuple

import pytest

from stackhook.config import get_settings
from stackhook.core.context import SyncContext
from stackhook.core.levels import Level
from stackhook.models.entry import Record, RemoteEntry


class FakeRemoteLogger:
    """Records what the hook hands to the remote logger."""

    def __init__(self, name: str, options: Dict[str, Any]) -> None:
        self.name = name
        self.options = options
        self.entries: List[RemoteEntry] = []
        self.sync_entries: List[Tuple[RemoteEntry, SyncContext]] = []
        self.sync_error: Optional[Exception] = None

    def log(self, entry: RemoteEntry) -> None:
        self.entries.append(entry)

    def log_sync(self, entry: RemoteEntry, ctx: SyncContext) -> None:
        if self.sync_error is not None:
            raise self.sync_error
        self.sync_entries.append((entry, ctx))


class FakeClient:
    """Stands in for CloudLoggingClient."""

    def __init__(self) -> None:
        self.loggers: List[FakeRemoteLogger] = []

    def logger(self, name: str, **options: Any) -> FakeRemoteLogger:
        remote = FakeRemoteLogger(name, options)
        self.loggers.append(remote)
        return remote


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def record_time() -> datetime:
    return datetime(2015, 9, 7, 8, 48, 33, tzinfo=timezone.utc)


@pytest.fixture
def walrus_record(record_time: datetime) -> Record:
    """The record from the package example."""
    return Record(
        message="A walrus appears",
        level=Level.INFO,
        time=record_time,
        data={"animal": "walrus", "number": 1, "size": 10},
    )


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> Generator[None, None, None]:
    """Run with no STACKHOOK_* env vars, no config file and a fresh settings cache."""
    import os

    for key in list(os.environ):
        if key.startswith("STACKHOOK_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    # Values copied from a config file are written straight into os.environ
    for key in list(os.environ):
        if key.startswith("STACKHOOK_"):
            os.environ.pop(key)


@pytest.fixture
def restore_logging() -> Generator[None, None, None]:
    """Undo root handler and structlog changes made by a test."""
    import structlog

    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()
