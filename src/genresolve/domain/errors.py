"""Errors raised by the identity resolution core."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


class IdentityResolutionError(RuntimeError):
    """Base class for identity resolution failures."""


class InvalidNameError(IdentityResolutionError, ValueError):
    """Raised for empty or whitespace-only names; nothing is written."""


class StoreUnavailableError(IdentityResolutionError):
    """Raised when the store cannot be reached or a transaction fails.

    Nothing was written; callers may retry.
    """


class ConstraintViolationError(IdentityResolutionError):
    """Raised when a commit violates a store constraint.

    On canonical inserts this signals a concurrent create; resolving the occurrence
    again finds the now-existing canonical.
    """


class CanonicalNotFoundError(IdentityResolutionError, LookupError):
    def __init__(self, canonical_id: UUID) -> None:
        super().__init__(f"Canonical person {canonical_id} not found")
        self.canonical_id = canonical_id


class QueueItemNotFoundError(IdentityResolutionError, LookupError):
    def __init__(self, queue_id: UUID) -> None:
        super().__init__(f"Queue item {queue_id} not found")
        self.queue_id = queue_id


class QueueTransitionError(IdentityResolutionError):
    """Raised for adjudications the review-queue state machine does not allow."""
