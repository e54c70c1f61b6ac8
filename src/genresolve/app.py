"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from genresolve.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyResolutionUnitOfWork,
    is_started,
    startup,
)
from genresolve.config import get_batch_config, get_resolution_config
from genresolve.domain.batch_resolution import (
    BatchProgress,
    BatchResolutionResult,
    resolve_unconfirmed_leads,
)
from genresolve.domain.ports.unit_of_work import ResolutionUnitOfWork
from genresolve.domain.resolution import service

if TYPE_CHECKING:
    from genresolve.config import BatchConfig, ResolutionConfig
    from genresolve.domain.resolution.search import ResolutionStats

UnitOfWorkFactory = Callable[[], ResolutionUnitOfWork]


log = getLogger(__name__)


def _ensure_started(unit_of_work_factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if unit_of_work_factory is not None:
        return unit_of_work_factory
    if not is_started():
        startup()
    return SqlAlchemyResolutionUnitOfWork


def run_batch_resolution(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: ResolutionConfig | None = None,
    batch: BatchConfig | None = None,
    on_progress: Callable[[BatchProgress], None] | None = None,
) -> BatchResolutionResult:
    """Resolve unconfirmed leads using the configured adapters."""

    effective_uow = _ensure_started(unit_of_work_factory)
    effective_config = config or get_resolution_config()
    effective_batch = batch or get_batch_config()
    log.info(
        "Starting batch resolution: batch_size=%s, start_offset=%s, max_records=%s, workers=%s",
        effective_batch.batch_size,
        effective_batch.start_offset,
        effective_batch.max_records,
        effective_batch.workers,
    )
    return resolve_unconfirmed_leads(
        unit_of_work_factory=effective_uow,
        config=effective_config,
        batch=effective_batch,
        on_progress=on_progress,
    )


def resolution_stats(*, unit_of_work_factory: UnitOfWorkFactory | None = None) -> ResolutionStats:
    """Current store counts using the configured adapters."""

    return service.stats(unit_of_work_factory=_ensure_started(unit_of_work_factory))
