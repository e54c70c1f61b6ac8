"""Ports for persisting canonical persons, variants and review queue items."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from genresolve.domain.model import (
    CanonicalPerson,
    NameVariant,
    QueueStatus,
    ReviewQueueItem,
    UnconfirmedLead,
)

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from genresolve.domain.resolution.candidates import CandidateQuery, RetrievedCandidate


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class CanonicalPersonRepository(Repository[CanonicalPerson], Protocol):
    """Persistence contract for canonical persons."""

    def get(self, canonical_id: UUID) -> CanonicalPerson | None: ...

    def get_many(self, canonical_ids: Iterable[UUID]) -> list[CanonicalPerson]: ...

    def find_candidates(
        self, query: CandidateQuery, *, limit: int
    ) -> list[RetrievedCandidate]: ...

    def search(self, text: str, *, limit: int) -> list[CanonicalPerson]: ...

    def count(self) -> int: ...


@runtime_checkable
class NameVariantRepository(Protocol):
    """Persistence contract for name variants.

    ``add`` ignores a duplicate ``(canonical_id, lower(variant_name))`` and reports
    whether a row was written.
    """

    def add(self, entity: NameVariant) -> bool: ...

    def exists(self, canonical_id: UUID, variant_name: str) -> bool: ...

    def get_by_name(self, canonical_id: UUID, variant_name: str) -> NameVariant | None: ...

    def for_canonical(self, canonical_id: UUID) -> list[NameVariant]: ...

    def find_candidates(
        self, query: CandidateQuery, *, limit: int
    ) -> list[RetrievedCandidate]: ...

    def search(self, text: str, *, limit: int) -> list[tuple[NameVariant, str]]: ...

    def count(self) -> int: ...


@runtime_checkable
class ReviewQueueRepository(Repository[ReviewQueueItem], Protocol):
    """Persistence contract for review queue items."""

    def get(self, queue_id: UUID) -> ReviewQueueItem | None: ...

    def find_pending(
        self, unconfirmed_name: str, source_url: str | None
    ) -> ReviewQueueItem | None: ...

    def list_by_status(self, *, status: QueueStatus, limit: int) -> list[ReviewQueueItem]: ...

    def count(self, *, status: QueueStatus) -> int: ...


@runtime_checkable
class UnconfirmedLeadRepository(Protocol):
    """Read-only access to scraper-owned unconfirmed leads."""

    def page(self, *, offset: int, limit: int) -> list[UnconfirmedLead]: ...

    def search(self, text: str, *, limit: int) -> list[UnconfirmedLead]: ...

    def count(self) -> int: ...
