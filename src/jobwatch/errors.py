"""
Error taxonomy for jobwatch.

Store failures are never wrapped: they surface to the event-dispatch layer
unchanged. The types here cover the conditions jobwatch itself detects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standardized error codes."""

    # Event errors (1xxx)
    INVALID_EVENT = "ERR_1000"
    UNKNOWN_EVENT_TYPE = "ERR_1001"

    # Configuration errors (2xxx)
    CONFIG_ERROR = "ERR_2000"
    INVALID_CONFIG = "ERR_2001"

    # Internal errors (9xxx)
    INTERNAL_ERROR = "ERR_9000"


@dataclass
class ErrorContext:
    """Structured context for error debugging."""

    job_id: str | None = None
    job_type: str | None = None
    operation: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "job_id": self.job_id,
            "job_type": self.job_type,
            "operation": self.operation,
            **self.extra,
        }


class JobWatchError(Exception):
    """
    Base exception for all jobwatch errors.

    Attributes:
        code: Standardized error code for programmatic handling
        message: Human-readable error message
        context: Structured debugging context
    """

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.context = context or ErrorContext()

    def __str__(self) -> str:
        parts = [f"[{self.code.value}] {self.message}"]
        if self.context.job_id:
            parts.append(f"(job_id={self.context.job_id})")
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code.value,
            "message": self.message,
            "context": self.context.to_dict(),
        }


class InvalidEventError(JobWatchError, ValueError):
    """An event was constructed without the fields every listener relies on.

    This is a programming error in the originating job.
    """

    code = ErrorCode.INVALID_EVENT


class UnknownEventTypeError(JobWatchError, TypeError):
    """The bus was asked to publish something that is not a job event."""

    code = ErrorCode.UNKNOWN_EVENT_TYPE


class ConfigurationError(JobWatchError, ValueError):
    """Invalid or inconsistent configuration."""

    code = ErrorCode.INVALID_CONFIG


__all__ = [
    "ErrorCode",
    "ErrorContext",
    "JobWatchError",
    "InvalidEventError",
    "UnknownEventTypeError",
    "ConfigurationError",
]
