from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import pytest

from genresolve.domain.errors import (
    CanonicalNotFoundError,
    QueueItemNotFoundError,
    QueueTransitionError,
)
from genresolve.domain.model import (
    MatchMethod,
    QueueResolution,
    QueueStatus,
    ResolutionType,
    VerificationStatus,
)
from genresolve.domain.resolution import HUMAN_CONFIRMED_CONFIDENCE, service
from tests.helpers.people import DOCUMENT_URL, make_occurrence

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from genresolve.adapters.sqlalchemy.unit_of_work import SqlAlchemyResolutionUnitOfWork
    from genresolve.domain.model import CanonicalPerson

    type UowFactory = Callable[[], SqlAlchemyResolutionUnitOfWork]


@pytest.fixture
def queued(sqlite_unit_of_work: UowFactory) -> tuple[CanonicalPerson, UUID]:
    """Sally Swailes on file and "Sarah Swailes" waiting for review."""

    swailes = service.create_canonical("Sally Swailes", unit_of_work_factory=sqlite_unit_of_work)
    resolution = service.resolve_or_create(
        make_occurrence("Sarah Swailes", source_url=DOCUMENT_URL, unconfirmed_person_id="42"),
        unit_of_work_factory=sqlite_unit_of_work,
    )
    assert resolution.queue_item_id is not None
    return swailes, resolution.queue_item_id


def test_linking_records_confirmed_variant(
    sqlite_unit_of_work: UowFactory, queued: tuple[CanonicalPerson, UUID]
) -> None:
    swailes, queue_id = queued

    item = service.resolve_queue_item(
        queue_id,
        QueueResolution.linked_existing(swailes.id, resolved_by="reviewer1"),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert item.status is QueueStatus.RESOLVED
    assert item.resolution_type is ResolutionType.LINKED_EXISTING
    assert item.resolved_canonical_id == swailes.id
    assert item.resolved_by == "reviewer1"
    assert item.resolved_at is not None

    variants = service.canonical_detail(
        swailes.id, unit_of_work_factory=sqlite_unit_of_work
    ).variants
    assert [v.variant_name for v in variants] == ["Sarah Swailes"]
    assert variants[0].match_method is MatchMethod.HUMAN_CONFIRMED
    assert variants[0].match_confidence == HUMAN_CONFIRMED_CONFIDENCE
    assert variants[0].unconfirmed_person_id == "42"
    assert variants[0].created_by == "reviewer1"

    stats = service.stats(unit_of_work_factory=sqlite_unit_of_work)
    assert (stats.pending_queue_items, stats.resolved_queue_items) == (0, 1)


def test_resolved_item_cannot_be_resolved_again(
    sqlite_unit_of_work: UowFactory, queued: tuple[CanonicalPerson, UUID]
) -> None:
    swailes, queue_id = queued
    service.resolve_queue_item(
        queue_id,
        QueueResolution.linked_existing(swailes.id),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    with pytest.raises(QueueTransitionError):
        service.resolve_queue_item(
            queue_id, QueueResolution.not_a_person(), unit_of_work_factory=sqlite_unit_of_work
        )
    with pytest.raises(QueueTransitionError):
        service.dismiss_queue_item(queue_id, unit_of_work_factory=sqlite_unit_of_work)


def test_linking_to_missing_canonical_leaves_item_pending(
    sqlite_unit_of_work: UowFactory, queued: tuple[CanonicalPerson, UUID]
) -> None:
    _, queue_id = queued

    with pytest.raises(CanonicalNotFoundError):
        service.resolve_queue_item(
            queue_id,
            QueueResolution.linked_existing(uuid.uuid4()),
            unit_of_work_factory=sqlite_unit_of_work,
        )

    detail = service.queue_item(queue_id, unit_of_work_factory=sqlite_unit_of_work)
    assert detail.item.is_pending


def test_created_new_builds_confirmed_canonical(
    sqlite_unit_of_work: UowFactory, queued: tuple[CanonicalPerson, UUID]
) -> None:
    _, queue_id = queued

    item = service.resolve_queue_item(
        queue_id,
        QueueResolution.created_new(resolved_by="reviewer2", notes="different plantation"),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert item.resolution_type is ResolutionType.CREATED_NEW
    assert item.resolved_canonical_id is not None
    assert item.resolution_notes == "different plantation"
    created = service.canonical_detail(
        item.resolved_canonical_id, unit_of_work_factory=sqlite_unit_of_work
    ).canonical
    assert created.canonical_name == "Sarah Swailes"
    assert created.verification_status is VerificationStatus.HUMAN_CONFIRMED
    assert created.created_by == "reviewer2"


def test_created_new_with_existing_canonical(
    sqlite_unit_of_work: UowFactory, queued: tuple[CanonicalPerson, UUID]
) -> None:
    _, queue_id = queued
    sarah = service.create_canonical("Sarah Swailes", unit_of_work_factory=sqlite_unit_of_work)

    item = service.resolve_queue_item(
        queue_id, QueueResolution.created_new(sarah.id), unit_of_work_factory=sqlite_unit_of_work
    )

    assert item.resolved_canonical_id == sarah.id
    assert service.stats(unit_of_work_factory=sqlite_unit_of_work).canonical_persons == 2


def test_not_a_person_writes_no_variant(
    sqlite_unit_of_work: UowFactory, queued: tuple[CanonicalPerson, UUID]
) -> None:
    _, queue_id = queued

    item = service.resolve_queue_item(
        queue_id,
        QueueResolution.not_a_person(resolved_by="reviewer1", notes="a ship name"),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert item.resolution_type is ResolutionType.NOT_A_PERSON
    assert item.resolved_canonical_id is None
    assert service.stats(unit_of_work_factory=sqlite_unit_of_work).name_variants == 0


def test_dismissed_item_leaves_pending_list(
    sqlite_unit_of_work: UowFactory, queued: tuple[CanonicalPerson, UUID]
) -> None:
    _, queue_id = queued

    item = service.dismiss_queue_item(
        queue_id, unit_of_work_factory=sqlite_unit_of_work, dismissed_by="reviewer3"
    )

    assert item.status is QueueStatus.DISMISSED
    assert service.queue_items(unit_of_work_factory=sqlite_unit_of_work) == []
    dismissed = service.queue_items(
        unit_of_work_factory=sqlite_unit_of_work, status=QueueStatus.DISMISSED
    )
    assert [i.id for i in dismissed] == [queue_id]


def test_resolved_occurrence_queues_again_only_for_new_item(
    sqlite_unit_of_work: UowFactory, queued: tuple[CanonicalPerson, UUID]
) -> None:
    _, queue_id = queued
    service.resolve_queue_item(
        queue_id,
        QueueResolution.deferred("check 1860 census"),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    again = service.resolve_or_create(
        make_occurrence("Sarah Swailes", source_url=DOCUMENT_URL),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert again.queue_item_id not in {None, queue_id}


def test_unknown_queue_item(sqlite_unit_of_work: UowFactory) -> None:
    missing = uuid.uuid4()

    with pytest.raises(QueueItemNotFoundError):
        service.queue_item(missing, unit_of_work_factory=sqlite_unit_of_work)
    with pytest.raises(QueueItemNotFoundError):
        service.dismiss_queue_item(missing, unit_of_work_factory=sqlite_unit_of_work)
