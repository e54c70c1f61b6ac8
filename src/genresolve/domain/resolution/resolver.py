"""Dispatch a name occurrence to link, review or create."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from genresolve.domain.model import (
    CanonicalPerson,
    MatchMethod,
    NameVariant,
    QueueCandidate,
    ResolutionAction,
    ReviewQueueItem,
    VerificationStatus,
)
from genresolve.domain.resolution.candidates import CandidateQuery, find_candidates
from genresolve.domain.resolution.review import queue_priority

if TYPE_CHECKING:
    from uuid import UUID

    from genresolve.config import ResolutionConfig
    from genresolve.domain.model import NameOccurrence
    from genresolve.domain.ports import ResolutionRepositories
    from genresolve.domain.resolution.candidates import Candidate

log = logging.getLogger(__name__)

NEW_CANONICAL_CONFIDENCE = 1.0


@dataclass(frozen=True, slots=True)
class Resolution:
    """What the resolver did with one occurrence."""

    action: ResolutionAction
    confidence: float
    canonical_id: UUID | None = None
    candidates: tuple[Candidate, ...] = field(default=())
    queue_item_id: UUID | None = None
    variant_id: UUID | None = None


def resolve_occurrence(
    repositories: ResolutionRepositories,
    occurrence: NameOccurrence,
    config: ResolutionConfig,
) -> Resolution:
    """Resolve ``occurrence`` against the store behind ``repositories``.

    Writes go through the repositories only; committing is the caller's business so
    that all writes for one occurrence land together or not at all.
    """

    query = CandidateQuery.from_name(
        occurrence.full_name, state=occurrence.state, county=occurrence.county
    )
    candidates = find_candidates(repositories, query, config)
    best = candidates[0] if candidates else None

    if best is not None and best.confidence >= config.match_threshold:
        return _link(repositories, query, occurrence, best)
    if best is not None and best.confidence >= config.review_threshold:
        return _queue(repositories, query, occurrence, candidates, config)
    return _create(repositories, query, occurrence, config)


def _link(
    repositories: ResolutionRepositories,
    query: CandidateQuery,
    occurrence: NameOccurrence,
    best: Candidate,
) -> Resolution:
    canonical = best.canonical
    variant_id: UUID | None = None
    if not canonical.is_spelled(query.full_name) and not repositories.variants.exists(
        canonical.id, query.full_name
    ):
        variant = NameVariant.for_canonical(
            canonical,
            query.full_name,
            match_method=MatchMethod.AUTO_SOUNDEX,
            match_confidence=best.confidence,
            source_type=occurrence.source_type,
            source_url=occurrence.source_url,
            unconfirmed_person_id=occurrence.unconfirmed_person_id,
            created_by=occurrence.created_by,
        )
        if repositories.variants.add(variant):
            variant_id = variant.id
    log.debug(
        "Matched %r to %s (%s) at %.2f",
        query.full_name,
        canonical.canonical_name,
        canonical.id,
        best.confidence,
    )
    return Resolution(
        action=ResolutionAction.MATCHED,
        confidence=best.confidence,
        canonical_id=canonical.id,
        candidates=(best,),
        variant_id=variant_id,
    )


def _queue(
    repositories: ResolutionRepositories,
    query: CandidateQuery,
    occurrence: NameOccurrence,
    candidates: list[Candidate],
    config: ResolutionConfig,
) -> Resolution:
    queued = tuple(candidates[: config.queue_candidate_limit])
    best = queued[0]
    item = repositories.review_queue.find_pending(query.full_name, occurrence.source_url)
    if item is None:
        item = ReviewQueueItem(
            unconfirmed_name=query.full_name,
            candidates=tuple(
                QueueCandidate(canonical_id=c.canonical_id, score=c.confidence) for c in queued
            ),
            source_url=occurrence.source_url,
            source_context=occurrence.source_context,
            location_context=occurrence.location_context,
            unconfirmed_person_id=occurrence.unconfirmed_person_id,
            priority=queue_priority(best.confidence),
        )
        repositories.review_queue.add(item)
        log.debug(
            "Queued %r for review at %.2f (priority %d)",
            query.full_name,
            best.confidence,
            item.priority,
        )
    else:
        log.debug("%r already pending review as %s", query.full_name, item.id)
    return Resolution(
        action=ResolutionAction.QUEUED_FOR_REVIEW,
        confidence=best.confidence,
        candidates=queued,
        queue_item_id=item.id,
    )


def _create(
    repositories: ResolutionRepositories,
    query: CandidateQuery,
    occurrence: NameOccurrence,
    config: ResolutionConfig,
) -> Resolution:
    confidence = occurrence.confidence
    if confidence is None:
        confidence = config.default_canonical_confidence
    canonical = CanonicalPerson.create(
        query.full_name,
        person_type=occurrence.person_type,
        sex=occurrence.sex,
        birth_year_estimate=occurrence.birth_year,
        primary_state=occurrence.state,
        primary_county=occurrence.county,
        verification_status=VerificationStatus.AUTO_CREATED,
        confidence_score=confidence,
        created_by=occurrence.created_by,
    )
    repositories.canonicals.add(canonical)
    log.debug("Created canonical %s for %r", canonical.id, query.full_name)
    return Resolution(
        action=ResolutionAction.CREATED_NEW,
        confidence=NEW_CANONICAL_CONFIDENCE,
        canonical_id=canonical.id,
    )
