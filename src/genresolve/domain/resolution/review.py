"""Review queue: priority assignment and human adjudication."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from genresolve.domain.errors import CanonicalNotFoundError, QueueItemNotFoundError
from genresolve.domain.model import (
    ANONYMOUS_REVIEWER,
    CanonicalPerson,
    MatchMethod,
    NameVariant,
    QueueResolution,
    ResolutionType,
    VerificationStatus,
)

if TYPE_CHECKING:
    from uuid import UUID

    from genresolve.domain.model import ReviewQueueItem
    from genresolve.domain.ports import ResolutionRepositories

log = logging.getLogger(__name__)

HUMAN_CONFIRMED_CONFIDENCE = 0.99
DEFAULT_PRIORITY = 3

# (lower bound inclusive, upper bound exclusive, priority)
PRIORITY_BANDS: tuple[tuple[float, float, int], ...] = (
    (0.80, 0.85, 8),
    (0.70, 0.80, 6),
    (0.60, 0.70, 4),
)


def queue_priority(best_confidence: float | None) -> int:
    """Borderline auto-matches are the most valuable to review."""

    if best_confidence is None:
        return DEFAULT_PRIORITY
    for lower, upper, priority in PRIORITY_BANDS:
        if lower <= best_confidence < upper:
            return priority
    return DEFAULT_PRIORITY


def load_queue_item(repositories: ResolutionRepositories, queue_id: UUID) -> ReviewQueueItem:
    item = repositories.review_queue.get(queue_id)
    if item is None:
        raise QueueItemNotFoundError(queue_id)
    return item


def adjudicate(
    repositories: ResolutionRepositories,
    queue_id: UUID,
    resolution: QueueResolution,
) -> ReviewQueueItem:
    """Apply a reviewer's decision to a pending item.

    ``linked_existing`` also records the queued spelling as a human-confirmed variant
    of the chosen canonical. ``created_new`` without a canonical id creates the
    canonical from the queued name.
    """

    item = load_queue_item(repositories, queue_id)
    item.require_pending()

    if resolution.type is ResolutionType.LINKED_EXISTING:
        canonical = _require_canonical(repositories, resolution.canonical_id)
        _link_confirmed_variant(repositories, item, canonical, resolution.resolved_by)
    elif resolution.type is ResolutionType.CREATED_NEW and resolution.canonical_id is None:
        canonical = CanonicalPerson.create(
            item.unconfirmed_name,
            verification_status=VerificationStatus.HUMAN_CONFIRMED,
            created_by=resolution.resolved_by,
        )
        repositories.canonicals.add(canonical)
        resolution = QueueResolution.created_new(
            canonical.id, resolved_by=resolution.resolved_by, notes=resolution.notes
        )
    elif resolution.type is ResolutionType.CREATED_NEW:
        _require_canonical(repositories, resolution.canonical_id)

    item.resolve(resolution)
    log.info(
        "Queue item %s resolved as %s by %s",
        item.id,
        resolution.type,
        resolution.resolved_by,
    )
    return item


def dismiss(
    repositories: ResolutionRepositories,
    queue_id: UUID,
    *,
    dismissed_by: str = ANONYMOUS_REVIEWER,
    notes: str | None = None,
) -> ReviewQueueItem:
    item = load_queue_item(repositories, queue_id)
    item.dismiss(dismissed_by=dismissed_by, notes=notes)
    log.info("Queue item %s dismissed by %s", item.id, dismissed_by)
    return item


def _require_canonical(
    repositories: ResolutionRepositories, canonical_id: UUID | None
) -> CanonicalPerson:
    if canonical_id is None:
        raise ValueError("canonical_id is required")
    canonical = repositories.canonicals.get(canonical_id)
    if canonical is None:
        raise CanonicalNotFoundError(canonical_id)
    return canonical


def _link_confirmed_variant(
    repositories: ResolutionRepositories,
    item: ReviewQueueItem,
    canonical: CanonicalPerson,
    resolved_by: str,
) -> None:
    if canonical.is_spelled(item.unconfirmed_name):
        return
    variant = NameVariant.for_canonical(
        canonical,
        item.unconfirmed_name,
        match_method=MatchMethod.HUMAN_CONFIRMED,
        match_confidence=HUMAN_CONFIRMED_CONFIDENCE,
        source_url=item.source_url,
        unconfirmed_person_id=item.unconfirmed_person_id,
        created_by=resolved_by,
    )
    repositories.variants.add(variant)
