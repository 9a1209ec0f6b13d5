"""
Cancellation and deadline handle for synchronous deliveries.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from .exceptions import ContextCancelledError, DeadlineExceededError, StackHookException


class SyncContext:
    """
    Carries the cancellation state and optional deadline that a synchronous
    hook checks before each remote write.

    A context is shared by every delivery made under it: once cancelled or
    expired it stays done, and a hook needs a fresh one through
    ``set_sync_context`` to resume synchronous delivery.
    """

    def __init__(self, deadline: Optional[datetime] = None) -> None:
        if deadline is not None and deadline.tzinfo is None:
            deadline = deadline.replace(tzinfo=timezone.utc)
        self._deadline = deadline
        self._cancelled = False

    @classmethod
    def background(cls) -> "SyncContext":
        """Context that is never cancelled and has no deadline."""
        return cls()

    @classmethod
    def with_deadline(cls, deadline: datetime) -> "SyncContext":
        return cls(deadline=deadline)

    @classmethod
    def with_timeout(cls, seconds: float) -> "SyncContext":
        """Context whose deadline is ``seconds`` from now."""
        return cls(deadline=datetime.now(timezone.utc) + timedelta(seconds=seconds))

    @property
    def deadline(self) -> Optional[datetime]:
        return self._deadline

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def error(self) -> Optional[StackHookException]:
        """Return the error a delivery under this context would fail with, if any."""
        if self._cancelled:
            return ContextCancelledError()
        if self._deadline is not None and datetime.now(timezone.utc) >= self._deadline:
            return DeadlineExceededError(deadline=self._deadline.isoformat())
        return None

    def raise_if_done(self) -> None:
        err = self.error()
        if err is not None:
            raise err

    def __repr__(self) -> str:
        return f"SyncContext(deadline={self._deadline!r}, cancelled={self._cancelled})"
