"""Read-side queries: similar-name search, details and store statistics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from genresolve.domain.errors import CanonicalNotFoundError
from genresolve.domain.model import QueueStatus
from genresolve.domain.resolution.review import load_queue_item

if TYPE_CHECKING:
    from uuid import UUID

    from genresolve.domain.model import (
        CanonicalPerson,
        NameVariant,
        ReviewQueueItem,
        UnconfirmedLead,
    )
    from genresolve.domain.ports import ResolutionRepositories


@dataclass(frozen=True, slots=True)
class SimilarNames:
    canonical: tuple[CanonicalPerson, ...]
    variants: tuple[tuple[NameVariant, str], ...]
    unconfirmed: tuple[UnconfirmedLead, ...]

    @property
    def total(self) -> int:
        return len(self.canonical) + len(self.variants) + len(self.unconfirmed)


@dataclass(frozen=True, slots=True)
class CanonicalDetail:
    canonical: CanonicalPerson
    variants: tuple[NameVariant, ...]


@dataclass(frozen=True, slots=True)
class QueueItemDetail:
    item: ReviewQueueItem
    candidates: tuple[tuple[CanonicalPerson, float], ...]


@dataclass(frozen=True, slots=True)
class ResolutionStats:
    canonical_persons: int
    name_variants: int
    pending_queue_items: int
    resolved_queue_items: int
    unconfirmed_persons: int


def search_similar(
    repositories: ResolutionRepositories, text: str, *, limit: int
) -> SimilarNames:
    """Substring and Soundex search across canonicals, variants and raw leads.

    Variants come paired with the name of the canonical they point at; leads are
    passed through uninterpreted.
    """

    return SimilarNames(
        canonical=tuple(repositories.canonicals.search(text, limit=limit)),
        variants=tuple(repositories.variants.search(text, limit=limit)),
        unconfirmed=tuple(repositories.unconfirmed.search(text, limit=limit)),
    )


def canonical_detail(repositories: ResolutionRepositories, canonical_id: UUID) -> CanonicalDetail:
    canonical = repositories.canonicals.get(canonical_id)
    if canonical is None:
        raise CanonicalNotFoundError(canonical_id)
    variants = repositories.variants.for_canonical(canonical_id)
    return CanonicalDetail(canonical=canonical, variants=tuple(variants))


def queue_item_detail(repositories: ResolutionRepositories, queue_id: UUID) -> QueueItemDetail:
    """A queue item with its candidate canonicals in stored order.

    Candidates whose canonical no longer exists are left out.
    """

    item = load_queue_item(repositories, queue_id)
    found = {
        canonical.id: canonical
        for canonical in repositories.canonicals.get_many(c.canonical_id for c in item.candidates)
    }
    candidates = tuple(
        (found[c.canonical_id], c.score) for c in item.candidates if c.canonical_id in found
    )
    return QueueItemDetail(item=item, candidates=candidates)


def collect_stats(repositories: ResolutionRepositories) -> ResolutionStats:
    return ResolutionStats(
        canonical_persons=repositories.canonicals.count(),
        name_variants=repositories.variants.count(),
        pending_queue_items=repositories.review_queue.count(status=QueueStatus.PENDING),
        resolved_queue_items=repositories.review_queue.count(status=QueueStatus.RESOLVED),
        unconfirmed_persons=repositories.unconfirmed.count(),
    )
