"""Public domain model surface."""

from __future__ import annotations

from genresolve.domain.model.entity import Entity, new_id, utcnow
from genresolve.domain.model.enums import (
    MatchMethod,
    MatchType,
    PersonType,
    QueueStatus,
    ResolutionAction,
    ResolutionType,
    Sex,
    VerificationStatus,
)
from genresolve.domain.model.occurrence import NameOccurrence, UnconfirmedLead
from genresolve.domain.model.people import CanonicalPerson, NameVariant
from genresolve.domain.model.review import (
    ANONYMOUS_REVIEWER,
    MAX_PRIORITY,
    MAX_QUEUE_CANDIDATES,
    MIN_PRIORITY,
    QueueCandidate,
    QueueResolution,
    ReviewQueueItem,
)

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    "new_id",
    "utcnow",
    # enums
    "MatchMethod",
    "MatchType",
    "PersonType",
    "QueueStatus",
    "ResolutionAction",
    "ResolutionType",
    "Sex",
    "VerificationStatus",
    # people
    "CanonicalPerson",
    "NameVariant",
    # review queue
    "ANONYMOUS_REVIEWER",
    "MAX_PRIORITY",
    "MAX_QUEUE_CANDIDATES",
    "MIN_PRIORITY",
    "QueueCandidate",
    "QueueResolution",
    "ReviewQueueItem",
    # inputs
    "NameOccurrence",
    "UnconfirmedLead",
]
