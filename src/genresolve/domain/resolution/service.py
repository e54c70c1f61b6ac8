"""Application services for identity resolution.

Each operation opens its own unit of work; operations that write commit before
returning, so one call is one transaction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from genresolve.config import ResolutionConfig
from genresolve.config.resolution import DEFAULT_QUEUE_PAGE_SIZE, DEFAULT_SEARCH_LIMIT
from genresolve.domain.errors import (
    CanonicalNotFoundError,
    ConstraintViolationError,
    InvalidNameError,
)
from genresolve.domain.model import (
    CanonicalPerson,
    MatchMethod,
    NameVariant,
    QueueStatus,
    VerificationStatus,
)
from genresolve.domain.resolution import review, search
from genresolve.domain.resolution.candidates import CandidateQuery
from genresolve.domain.resolution.candidates import find_candidates as _find_candidates
from genresolve.domain.resolution.resolver import resolve_occurrence

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from uuid import UUID

    from genresolve.domain.model import (
        NameOccurrence,
        PersonType,
        QueueResolution,
        ReviewQueueItem,
        Sex,
    )
    from genresolve.domain.ports import ResolutionUnitOfWork
    from genresolve.domain.resolution.candidates import Candidate
    from genresolve.domain.resolution.resolver import Resolution

    type UnitOfWorkFactory = Callable[[], ResolutionUnitOfWork]

log = logging.getLogger(__name__)

_DEFAULT_CONFIG = ResolutionConfig()


@dataclass(frozen=True, slots=True)
class BatchOutcome:
    """Result for one occurrence of :func:`resolve_batch`; exactly one field is set."""

    occurrence: NameOccurrence
    resolution: Resolution | None = None
    error: InvalidNameError | ConstraintViolationError | None = None


def resolve_or_create(
    occurrence: NameOccurrence,
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    config: ResolutionConfig = _DEFAULT_CONFIG,
) -> Resolution:
    """Link, queue or create for one occurrence, atomically."""

    with unit_of_work_factory() as uow:
        resolution = resolve_occurrence(uow.repositories, occurrence, config)
        uow.commit()
    return resolution


def resolve_batch(
    occurrences: Iterable[NameOccurrence],
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    config: ResolutionConfig = _DEFAULT_CONFIG,
) -> list[BatchOutcome]:
    """Resolve occurrences one transaction each.

    Invalid names and constraint violations are reported per occurrence;
    ``StoreUnavailableError`` aborts the batch.
    """

    outcomes: list[BatchOutcome] = []
    for occurrence in occurrences:
        try:
            resolution = resolve_or_create(
                occurrence, unit_of_work_factory=unit_of_work_factory, config=config
            )
        except (InvalidNameError, ConstraintViolationError) as exc:
            log.warning("Could not resolve %r: %s", occurrence.full_name, exc)
            outcomes.append(BatchOutcome(occurrence=occurrence, error=exc))
        else:
            outcomes.append(BatchOutcome(occurrence=occurrence, resolution=resolution))
    return outcomes


def find_candidates(
    full_name: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    state: str | None = None,
    county: str | None = None,
    config: ResolutionConfig = _DEFAULT_CONFIG,
) -> list[Candidate]:
    query = CandidateQuery.from_name(full_name, state=state, county=county)
    with unit_of_work_factory() as uow:
        return _find_candidates(uow.repositories, query, config)


def create_canonical(
    full_name: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    person_type: PersonType | None = None,
    sex: Sex | None = None,
    birth_year_estimate: int | None = None,
    primary_state: str | None = None,
    primary_county: str | None = None,
    verification_status: VerificationStatus = VerificationStatus.AUTO_CREATED,
    confidence_score: float | None = None,
    created_by: str | None = None,
    config: ResolutionConfig = _DEFAULT_CONFIG,
) -> CanonicalPerson:
    canonical = CanonicalPerson.create(
        full_name,
        person_type=person_type,
        sex=sex,
        birth_year_estimate=birth_year_estimate,
        primary_state=primary_state,
        primary_county=primary_county,
        verification_status=verification_status,
        confidence_score=(
            config.default_canonical_confidence if confidence_score is None else confidence_score
        ),
        created_by=created_by,
    )
    with unit_of_work_factory() as uow:
        uow.repositories.canonicals.add(canonical)
        uow.commit()
    log.info("Created canonical %s for %r", canonical.id, canonical.canonical_name)
    return canonical


def add_variant(
    canonical_id: UUID,
    variant_name: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    match_method: MatchMethod = MatchMethod.AUTO,
    match_confidence: float = 0.0,
    source_type: str | None = None,
    source_url: str | None = None,
    unconfirmed_person_id: str | None = None,
    created_by: str | None = None,
) -> NameVariant:
    """Record a spelling for a canonical.

    An existing ``(canonical, spelling)`` pair is returned unchanged; the canonical's
    own spelling is rejected with ``InvalidNameError``.
    """

    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        canonical = repositories.canonicals.get(canonical_id)
        if canonical is None:
            raise CanonicalNotFoundError(canonical_id)
        variant = NameVariant.for_canonical(
            canonical,
            variant_name,
            match_method=match_method,
            match_confidence=match_confidence,
            source_type=source_type,
            source_url=source_url,
            unconfirmed_person_id=unconfirmed_person_id,
            created_by=created_by,
        )
        if not repositories.variants.add(variant):
            existing = repositories.variants.get_by_name(canonical_id, variant.variant_name)
            if existing is None:
                raise ConstraintViolationError(
                    f"Variant {variant.variant_name!r} was rejected for {canonical_id}"
                )
            variant = existing
        uow.commit()
    return variant


def search_similar(
    text: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> search.SimilarNames:
    with unit_of_work_factory() as uow:
        return search.search_similar(uow.repositories, text, limit=limit)


def canonical_detail(
    canonical_id: UUID, *, unit_of_work_factory: UnitOfWorkFactory
) -> search.CanonicalDetail:
    with unit_of_work_factory() as uow:
        return search.canonical_detail(uow.repositories, canonical_id)


def queue_items(
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    status: QueueStatus = QueueStatus.PENDING,
    limit: int = DEFAULT_QUEUE_PAGE_SIZE,
) -> list[ReviewQueueItem]:
    """Queue items in serving order: priority descending, oldest first."""

    with unit_of_work_factory() as uow:
        return uow.repositories.review_queue.list_by_status(status=status, limit=limit)


def queue_item(
    queue_id: UUID, *, unit_of_work_factory: UnitOfWorkFactory
) -> search.QueueItemDetail:
    with unit_of_work_factory() as uow:
        return search.queue_item_detail(uow.repositories, queue_id)


def resolve_queue_item(
    queue_id: UUID,
    resolution: QueueResolution,
    *,
    unit_of_work_factory: UnitOfWorkFactory,
) -> ReviewQueueItem:
    with unit_of_work_factory() as uow:
        item = review.adjudicate(uow.repositories, queue_id, resolution)
        uow.commit()
    return item


def dismiss_queue_item(
    queue_id: UUID,
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    dismissed_by: str = review.ANONYMOUS_REVIEWER,
    notes: str | None = None,
) -> ReviewQueueItem:
    with unit_of_work_factory() as uow:
        item = review.dismiss(uow.repositories, queue_id, dismissed_by=dismissed_by, notes=notes)
        uow.commit()
    return item


def stats(*, unit_of_work_factory: UnitOfWorkFactory) -> search.ResolutionStats:
    """Store counts; a count whose table is missing reads 0."""

    with unit_of_work_factory() as uow:
        return search.collect_stats(uow.repositories)
