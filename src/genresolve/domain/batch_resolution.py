"""Batch resolution of scraper-owned unconfirmed leads."""

from __future__ import annotations

import logging
import re
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from genresolve.config import BatchConfig, ResolutionConfig
from genresolve.domain.errors import ConstraintViolationError, InvalidNameError
from genresolve.domain.model import NameOccurrence, PersonType, ResolutionAction, Sex
from genresolve.domain.names import normalize_name
from genresolve.domain.resolution.service import resolve_or_create, stats

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from concurrent.futures import Future

    from genresolve.domain.model import UnconfirmedLead
    from genresolve.domain.ports import ResolutionUnitOfWork
    from genresolve.domain.resolution.search import ResolutionStats

log = logging.getLogger(__name__)

BATCH_SOURCE_TYPE = "batch_migration"
MIN_NAME_LENGTH = 2

_HAS_LETTER = re.compile(r"[A-Za-z]")
_COUNTY_SUFFIX = re.compile(r"\s+County$", re.IGNORECASE)


@dataclass(slots=True)
class BatchProgress:
    """Running counters of a batch run."""

    processed: int = 0
    linked: int = 0
    queued: int = 0
    created: int = 0
    skipped: int = 0
    errors: int = 0
    started: float = field(default_factory=time.monotonic)

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.started

    @property
    def rate(self) -> float:
        elapsed = self.elapsed
        return self.processed / elapsed if elapsed > 0 else 0.0

    def record(self, action: ResolutionAction) -> None:
        self.processed += 1
        match action:
            case ResolutionAction.MATCHED:
                self.linked += 1
            case ResolutionAction.QUEUED_FOR_REVIEW:
                self.queued += 1
            case ResolutionAction.CREATED_NEW:
                self.created += 1


@dataclass(frozen=True, slots=True)
class BatchResolutionResult:
    progress: BatchProgress
    initial: ResolutionStats
    final: ResolutionStats


def parse_location(locations: str | None) -> tuple[str | None, str | None]:
    """Split ``"Montgomery County, Maryland"`` into ``("Montgomery", "Maryland")``.

    Returns ``(county, state)``; a single part is taken as the county.
    """

    if not locations or not locations.strip():
        return None, None
    parts = [part.strip() for part in locations.split(",")]
    if len(parts) >= 2:  # noqa: PLR2004
        return _COUNTY_SUFFIX.sub("", parts[0]) or None, parts[1] or None
    return locations.strip(), None


def occurrence_from_lead(lead: UnconfirmedLead) -> NameOccurrence | None:
    """Translate a lead; ``None`` for names too short or without letters."""

    name = normalize_name(lead.full_name)
    if len(name) < MIN_NAME_LENGTH or not _HAS_LETTER.search(name):
        return None
    county, state = parse_location(lead.locations)
    return NameOccurrence(
        full_name=name,
        sex=Sex.parse(lead.gender),
        birth_year=lead.birth_year,
        person_type=PersonType.parse(lead.person_type) or PersonType.UNKNOWN,
        state=state,
        county=county,
        source_type=BATCH_SOURCE_TYPE,
        source_url=lead.source_url,
        unconfirmed_person_id=lead.lead_id,
    )


def iter_lead_pages(
    unit_of_work_factory: Callable[[], ResolutionUnitOfWork],
    batch: BatchConfig,
) -> Iterator[list[UnconfirmedLead]]:
    """Page through leads by ``lead_id`` from ``start_offset``, at most ``max_records``."""

    offset = batch.start_offset
    remaining = batch.max_records
    while remaining is None or remaining > 0:
        limit = batch.batch_size if remaining is None else min(batch.batch_size, remaining)
        with unit_of_work_factory() as uow:
            page = uow.repositories.unconfirmed.page(offset=offset, limit=limit)
        log.debug("Read %d leads at offset %d", len(page), offset)
        if page:
            yield page
        if len(page) < limit:
            return
        offset += len(page)
        if remaining is not None:
            remaining -= len(page)


def _resolve_lead(
    lead: UnconfirmedLead,
    unit_of_work_factory: Callable[[], ResolutionUnitOfWork],
    config: ResolutionConfig,
) -> ResolutionAction | None:
    occurrence = occurrence_from_lead(lead)
    if occurrence is None:
        return None
    try:
        return resolve_or_create(
            occurrence, unit_of_work_factory=unit_of_work_factory, config=config
        ).action
    except ConstraintViolationError:
        # a concurrent worker created the canonical first; the second pass finds it
        log.debug("Retrying lead %s after a constraint violation", lead.lead_id)
        return resolve_or_create(
            occurrence, unit_of_work_factory=unit_of_work_factory, config=config
        ).action


def _tally(
    progress: BatchProgress,
    lead: UnconfirmedLead,
    future: Future[ResolutionAction | None],
    batch: BatchConfig,
    on_progress: Callable[[BatchProgress], None] | None,
) -> None:
    try:
        action = future.result()
    except InvalidNameError:
        action = None
    except ConstraintViolationError as exc:
        progress.errors += 1
        log.warning("Lead %s failed after retry: %s", lead.lead_id, exc)
        return
    if action is None:
        progress.skipped += 1
        return
    progress.record(action)
    if on_progress is not None and progress.processed % batch.progress_every == 0:
        on_progress(progress)


def resolve_unconfirmed_leads(
    *,
    unit_of_work_factory: Callable[[], ResolutionUnitOfWork],
    config: ResolutionConfig | None = None,
    batch: BatchConfig | None = None,
    on_progress: Callable[[BatchProgress], None] | None = None,
) -> BatchResolutionResult:
    """Feed unconfirmed leads through the resolver, one transaction per lead.

    Invalid names count as skipped and a constraint violation that survives one retry
    counts as an error; ``StoreUnavailableError`` aborts the run. ``on_progress`` is
    called every ``batch.progress_every`` processed leads.
    """

    resolution_config = config or ResolutionConfig()
    batch_config = batch or BatchConfig()
    initial = stats(unit_of_work_factory=unit_of_work_factory)
    progress = BatchProgress()

    def handle(lead: UnconfirmedLead) -> ResolutionAction | None:
        return _resolve_lead(lead, unit_of_work_factory, resolution_config)

    with ThreadPoolExecutor(max_workers=max(1, batch_config.workers)) as executor:
        for page in iter_lead_pages(unit_of_work_factory, batch_config):
            futures = [(lead, executor.submit(handle, lead)) for lead in page]
            for lead, future in futures:
                _tally(progress, lead, future, batch_config, on_progress)

    final = stats(unit_of_work_factory=unit_of_work_factory)
    log.info(
        "Batch resolution finished: processed=%d linked=%d queued=%d new=%d skipped=%d "
        "errors=%d",
        progress.processed,
        progress.linked,
        progress.queued,
        progress.created,
        progress.skipped,
        progress.errors,
    )
    return BatchResolutionResult(progress=progress, initial=initial, final=final)
