from __future__ import annotations

from typing import Iterable


class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "DOMAIN_ERROR"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "VALIDATION_ERROR"


class NotFoundError(DomainError):
    """Raised when a referenced event or member does not exist for the tenant."""

    code = "NOT_FOUND"


class UnknownMemberError(DomainError):
    """Raised when an identifier does not resolve to a member."""

    code = "UNKNOWN_MEMBER"


class AmbiguousMemberError(UnknownMemberError):
    """Raised when a manual name search matches more than one member."""

    code = "AMBIGUOUS_MEMBER"


class UnknownSessionError(NotFoundError):
    """Raised when a session id is not configured for the event."""

    code = "UNKNOWN_SESSION"


class SessionNotOpenError(DomainError):
    """Raised when attendance is recorded before the event was opened."""

    code = "SESSION_NOT_OPEN"


class InvalidTransitionError(DomainError):
    """Raised when a check-in step is driven from the wrong state."""

    code = "INVALID_TRANSITION"


class StoreWriteFailure(DomainError):
    """Raised when the store rejects an insert/update/delete."""

    code = "STORE_WRITE_FAILURE"


class StoreReadFailure(DomainError):
    """Raised when the store cannot be reached or rejects a select."""

    code = "STORE_READ_FAILURE"


class PartialBatchFailure(StoreWriteFailure):
    """Some, but not all, roster operations reached the store."""

    code = "PARTIAL_BATCH_FAILURE"

    def __init__(self, message: str, *, failed_ids: Iterable[str], applied_ids: Iterable[str] = ()):
        self.failed_ids = sorted(failed_ids)
        self.applied_ids = sorted(applied_ids)
        super().__init__(f"{message} (failed: {', '.join(self.failed_ids)})")


class RosterConfirmationRequired(ValidationError):
    """Removing these members would discard recorded attendance."""

    code = "CONFIRMATION_REQUIRED"

    def __init__(self, member_ids: Iterable[str]):
        self.member_ids = sorted(member_ids)
        super().__init__(
            "Removing these members discards their recorded attendance: " + ", ".join(self.member_ids)
        )
