"""
Error classification for build-trigger decisions.

This module provides:
- DecisionErrorType enum for categorizing resolution failures
- DecisionError base exception carrying the classification
- Concrete exceptions for owner, client and revision failures

Every DecisionError is fail-open: the strategy converts it to a
"build required" verdict and records it in the trace.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Optional


class DecisionErrorType(Enum):
    """Classification of failures while resolving a changeset."""

    OWNER_UNAVAILABLE = auto()   # No owner context to build a client from
    CLIENT_UNAVAILABLE = auto()  # Backend cannot produce a client
    MALFORMED_REVISION = auto()  # Foreign revision too short to degrade
    UNEXPECTED = auto()          # Anything else raised while resolving/scanning


class DecisionError(Exception):
    """
    Base exception for decision failures.

    Includes the error type and the underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        error_type: DecisionErrorType = DecisionErrorType.UNEXPECTED,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.error_type = error_type
        self.cause = cause

    @classmethod
    def from_exception(cls, exc: Exception) -> DecisionError:
        """Wrap an arbitrary exception, keeping typed errors as they are."""
        if isinstance(exc, DecisionError):
            return exc
        return cls(f"{type(exc).__name__}: {exc}", DecisionErrorType.UNEXPECTED, cause=exc)


class OwnerUnavailableError(DecisionError):
    """Raised when the owner context needed for a client is missing."""

    def __init__(self, message: str = "Error retrieving SCMSourceOwner") -> None:
        super().__init__(message, error_type=DecisionErrorType.OWNER_UNAVAILABLE)


class ClientUnavailableError(DecisionError):
    """Raised when no version-control client can be built."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(
            f"Error retrieving version-control client: {message}",
            error_type=DecisionErrorType.CLIENT_UNAVAILABLE,
            cause=cause,
        )


class MalformedRevisionError(DecisionError):
    """Raised when a foreign revision is shorter than the required prefix."""

    def __init__(self, revision: str, required_length: int) -> None:
        super().__init__(
            f"Revision '{revision}' cannot be degraded to a native revision: "
            f"index out of bounds (begin 0, end {required_length}, length {len(revision)})",
            error_type=DecisionErrorType.MALFORMED_REVISION,
        )
        self.revision = revision
        self.required_length = required_length
