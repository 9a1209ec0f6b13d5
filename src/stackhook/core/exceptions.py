"""
Custom exceptions for stackhook.

Remote delivery errors raised by google-cloud-logging are never wrapped:
a synchronous hook re-raises them exactly as the client produced them.
The classes here cover the failures stackhook itself detects.
"""

from typing import Any, Dict, Optional


class StackHookException(Exception):
    """Base exception for stackhook."""

    def __init__(
        self,
        message: str,
        error_code: str = "internal_error",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}


class ContextCancelledError(StackHookException):
    """Raised when a synchronous delivery runs under a cancelled context."""

    def __init__(self, message: str = "Sync context was cancelled") -> None:
        super().__init__(
            message=message,
            error_code="context_cancelled",
        )


class DeadlineExceededError(StackHookException):
    """Raised when a synchronous delivery runs past its context deadline."""

    def __init__(
        self,
        message: str = "Sync context deadline exceeded",
        deadline: Optional[str] = None,
    ) -> None:
        details = {}
        if deadline:
            details["deadline"] = deadline

        super().__init__(
            message=message,
            error_code="deadline_exceeded",
            details=details,
        )


class ConfigurationError(StackHookException):
    """Raised when hook settings cannot be turned into a working hook."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            message=message,
            error_code="configuration_error",
            details=details,
        )
