"""Defaults for the batch resolution driver."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_BATCH_SIZE = 1000
DEFAULT_START_OFFSET = 0
DEFAULT_PROGRESS_EVERY = 100
DEFAULT_WORKERS = 1


@dataclass(frozen=True, slots=True)
class BatchConfig:
    batch_size: int = DEFAULT_BATCH_SIZE
    start_offset: int = DEFAULT_START_OFFSET
    max_records: int | None = None
    progress_every: int = DEFAULT_PROGRESS_EVERY
    workers: int = DEFAULT_WORKERS


def get_batch_config() -> BatchConfig:
    return BatchConfig()
