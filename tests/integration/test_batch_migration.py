from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from genresolve.app import resolution_stats, run_batch_resolution
from genresolve.config import BatchConfig
from genresolve.domain.batch_resolution import BATCH_SOURCE_TYPE
from genresolve.domain.errors import StoreUnavailableError
from genresolve.domain.resolution import service
from tests.helpers.people import insert_leads

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.engine import Engine

    from genresolve.adapters.sqlalchemy.unit_of_work import SqlAlchemyResolutionUnitOfWork
    from genresolve.domain.batch_resolution import BatchProgress

    type UowFactory = Callable[[], SqlAlchemyResolutionUnitOfWork]

LEADS = [
    {
        "lead_id": 1,
        "full_name": "Sally Swailes",
        "person_type": "enslaved",
        "gender": "F",
        "locations": "Montgomery County, Maryland",
        "source_url": "https://archive.example.org/doc/1",
    },
    {
        "lead_id": 2,
        "full_name": "Sally Swailer",
        "locations": "Montgomery County, Maryland",
        "source_url": "https://archive.example.org/doc/2",
    },
    {"lead_id": 3, "full_name": "William Key", "person_type": "slaveholder"},
    {"lead_id": 4, "full_name": "A"},
    {"lead_id": 5, "full_name": "   "},
    {"lead_id": 6, "full_name": "1850"},
    {"lead_id": 7, "full_name": "Sarah Swailes", "source_url": "https://archive.example.org/7"},
]


@pytest.fixture
def leads(scraper_tables: Engine) -> Engine:
    insert_leads(scraper_tables, LEADS)
    return scraper_tables


def test_batch_resolves_every_lead(leads: Engine, sqlite_unit_of_work: UowFactory) -> None:
    reports: list[int] = []

    def on_progress(progress: BatchProgress) -> None:
        reports.append(progress.processed)

    result = run_batch_resolution(
        unit_of_work_factory=sqlite_unit_of_work,
        batch=BatchConfig(batch_size=3, progress_every=2),
        on_progress=on_progress,
    )

    progress = result.progress
    assert progress.processed == 4
    assert (progress.linked, progress.queued, progress.created) == (1, 1, 2)
    assert progress.skipped == 3
    assert progress.errors == 0
    assert reports == [2, 4]

    assert result.initial.canonical_persons == 0
    assert result.initial.unconfirmed_persons == len(LEADS)
    assert result.final.canonical_persons == 2
    assert result.final.name_variants == 1
    assert result.final.pending_queue_items == 1
    assert result.final.unconfirmed_persons == len(LEADS)


def test_batch_records_provenance(leads: Engine, sqlite_unit_of_work: UowFactory) -> None:
    run_batch_resolution(unit_of_work_factory=sqlite_unit_of_work, batch=BatchConfig())

    found = service.search_similar("Swail", unit_of_work_factory=sqlite_unit_of_work)

    [(variant, canonical_name)] = found.variants
    assert canonical_name == "Sally Swailes"
    assert variant.source_type == BATCH_SOURCE_TYPE
    assert variant.unconfirmed_person_id == "2"
    assert variant.source_url == "https://archive.example.org/doc/2"
    sally = next(p for p in found.canonical if p.canonical_name == "Sally Swailes")
    assert (sally.primary_county, sally.primary_state) == ("Montgomery", "Maryland")


def test_batch_window_honours_offset_and_limit(
    leads: Engine, sqlite_unit_of_work: UowFactory
) -> None:
    head = run_batch_resolution(
        unit_of_work_factory=sqlite_unit_of_work,
        batch=BatchConfig(batch_size=10, max_records=2),
    )
    tail = run_batch_resolution(
        unit_of_work_factory=sqlite_unit_of_work,
        batch=BatchConfig(batch_size=2, start_offset=2),
    )

    assert (head.progress.processed, head.progress.created, head.progress.linked) == (2, 1, 1)
    assert tail.progress.processed == 2
    assert tail.progress.skipped == 3
    assert tail.final.canonical_persons == 2
    assert tail.final.pending_queue_items == 1


def test_rerun_adds_nothing_new(leads: Engine, sqlite_unit_of_work: UowFactory) -> None:
    run_batch_resolution(unit_of_work_factory=sqlite_unit_of_work, batch=BatchConfig())

    second = run_batch_resolution(unit_of_work_factory=sqlite_unit_of_work, batch=BatchConfig())

    assert second.progress.created == 0
    assert second.final.canonical_persons == second.initial.canonical_persons
    assert second.final.name_variants == second.initial.name_variants
    assert second.final.pending_queue_items == 1


def test_batch_without_lead_table_aborts(sqlite_unit_of_work: UowFactory) -> None:
    with pytest.raises(StoreUnavailableError):
        run_batch_resolution(unit_of_work_factory=sqlite_unit_of_work, batch=BatchConfig())


def test_resolution_stats_uses_given_factory(sqlite_unit_of_work: UowFactory) -> None:
    service.create_canonical("Sally Swailes", unit_of_work_factory=sqlite_unit_of_work)

    assert resolution_stats(unit_of_work_factory=sqlite_unit_of_work).canonical_persons == 1
