"""Review queue items and the adjudications that close them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from genresolve.domain.errors import QueueTransitionError
from genresolve.domain.model.entity import Entity, utcnow
from genresolve.domain.model.enums import QueueStatus, ResolutionType

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

MIN_PRIORITY = 1
MAX_PRIORITY = 10
MAX_QUEUE_CANDIDATES = 5
ANONYMOUS_REVIEWER = "anonymous"


@dataclass(frozen=True, slots=True)
class QueueCandidate:
    canonical_id: UUID
    score: float


@dataclass(frozen=True, slots=True)
class QueueResolution:
    """A reviewer's decision about a pending queue item."""

    type: ResolutionType
    canonical_id: UUID | None = None
    resolved_by: str = ANONYMOUS_REVIEWER
    notes: str | None = None

    def __post_init__(self) -> None:
        if self.type is ResolutionType.LINKED_EXISTING and self.canonical_id is None:
            raise QueueTransitionError("linked_existing requires a canonical_id")
        if self.type in {ResolutionType.NOT_A_PERSON, ResolutionType.DEFERRED} and (
            self.canonical_id is not None
        ):
            raise QueueTransitionError(f"{self.type} does not take a canonical_id")

    @classmethod
    def linked_existing(
        cls,
        canonical_id: UUID,
        *,
        resolved_by: str = ANONYMOUS_REVIEWER,
        notes: str | None = None,
    ) -> QueueResolution:
        return cls(
            type=ResolutionType.LINKED_EXISTING,
            canonical_id=canonical_id,
            resolved_by=resolved_by,
            notes=notes,
        )

    @classmethod
    def created_new(
        cls,
        canonical_id: UUID | None = None,
        *,
        resolved_by: str = ANONYMOUS_REVIEWER,
        notes: str | None = None,
    ) -> QueueResolution:
        """Without ``canonical_id`` a canonical is created from the queued name."""
        return cls(
            type=ResolutionType.CREATED_NEW,
            canonical_id=canonical_id,
            resolved_by=resolved_by,
            notes=notes,
        )

    @classmethod
    def not_a_person(
        cls, *, resolved_by: str = ANONYMOUS_REVIEWER, notes: str | None = None
    ) -> QueueResolution:
        return cls(type=ResolutionType.NOT_A_PERSON, resolved_by=resolved_by, notes=notes)

    @classmethod
    def deferred(cls, reason: str, *, resolved_by: str = ANONYMOUS_REVIEWER) -> QueueResolution:
        return cls(type=ResolutionType.DEFERRED, resolved_by=resolved_by, notes=reason)


@dataclass(eq=False, kw_only=True)
class ReviewQueueItem(Entity):
    """An undecided resolution awaiting a human.

    Created ``pending``; :meth:`resolve` and :meth:`dismiss` are the only transitions
    and both are terminal.
    """

    unconfirmed_name: str
    candidates: tuple[QueueCandidate, ...] = ()
    source_url: str | None = None
    source_context: str | None = None
    location_context: str | None = None
    unconfirmed_person_id: str | None = None

    priority: int = 3
    status: QueueStatus = QueueStatus.PENDING

    resolution_type: ResolutionType | None = None
    resolved_canonical_id: UUID | None = None
    resolved_by: str | None = None
    resolved_at: datetime | None = None
    resolution_notes: str | None = None

    created_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        if not MIN_PRIORITY <= self.priority <= MAX_PRIORITY:
            raise ValueError(f"priority must be within 1..10, got {self.priority}")
        if len(self.candidates) > MAX_QUEUE_CANDIDATES:
            raise ValueError(f"at most {MAX_QUEUE_CANDIDATES} candidates may be queued")

    @property
    def is_pending(self) -> bool:
        return self.status is QueueStatus.PENDING

    @property
    def best_score(self) -> float | None:
        return self.candidates[0].score if self.candidates else None

    def resolve(self, resolution: QueueResolution, *, at: datetime | None = None) -> None:
        self.require_pending()
        if resolution.type is ResolutionType.CREATED_NEW and resolution.canonical_id is None:
            raise QueueTransitionError("created_new must carry the created canonical_id")
        self.status = QueueStatus.RESOLVED
        self.resolution_type = resolution.type
        self.resolved_canonical_id = resolution.canonical_id
        self.resolved_by = resolution.resolved_by
        self.resolution_notes = resolution.notes
        self.resolved_at = at or utcnow()

    def dismiss(
        self,
        *,
        dismissed_by: str = ANONYMOUS_REVIEWER,
        notes: str | None = None,
        at: datetime | None = None,
    ) -> None:
        self.require_pending()
        self.status = QueueStatus.DISMISSED
        self.resolved_by = dismissed_by
        self.resolution_notes = notes
        self.resolved_at = at or utcnow()

    def require_pending(self) -> None:
        if not self.is_pending:
            raise QueueTransitionError(f"Queue item {self.id} is already {self.status}")
