# ruff: noqa: T201
from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from genresolve.app import run_batch_resolution
from genresolve.config import (
    BatchConfig,
    ConfigurationError,
    configure_logging,
    get_batch_config,
    get_resolution_config,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from genresolve.domain.batch_resolution import BatchProgress
    from genresolve.domain.resolution.search import ResolutionStats

log = logging.getLogger(__name__)

INTERRUPTED_EXIT_CODE = 130


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="genresolve",
        description="Resolve unconfirmed name occurrences to canonical persons",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help="Number of unconfirmed records to read per page (defaults to config)",
    )
    parser.add_argument(
        "--start-offset",
        type=int,
        default=None,
        help="Number of unconfirmed records to skip before starting",
    )
    parser.add_argument(
        "--max-records",
        type=int,
        default=None,
        help="Maximum number of unconfirmed records to read (default: all)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of worker threads, each resolving in its own transaction",
    )
    return parser.parse_args(list(argv))


def _batch_config(args: argparse.Namespace) -> BatchConfig:
    defaults = get_batch_config()
    batch = BatchConfig(
        batch_size=args.batch_size if args.batch_size is not None else defaults.batch_size,
        start_offset=args.start_offset if args.start_offset is not None else defaults.start_offset,
        max_records=args.max_records if args.max_records is not None else defaults.max_records,
        progress_every=defaults.progress_every,
        workers=args.workers if args.workers is not None else defaults.workers,
    )
    if batch.batch_size < 1:
        raise ValueError("Batch size must be positive")
    if batch.start_offset < 0:
        raise ValueError("Start offset must be non-negative")
    if batch.max_records is not None and batch.max_records < 0:
        raise ValueError("Max records must be non-negative")
    if batch.workers < 1:
        raise ValueError("Workers must be positive")
    return batch


def format_progress(progress: BatchProgress) -> str:
    return (
        f"{progress.processed} processed | {progress.linked} linked | "
        f"{progress.queued} queued | {progress.created} new | "
        f"{progress.skipped} skipped | {progress.rate:.1f}/sec"
    )


def _print_progress(progress: BatchProgress) -> None:
    print(format_progress(progress), flush=True)


def _print_counts(title: str, counts: ResolutionStats) -> None:
    print(title)
    print(f"  Canonical persons: {counts.canonical_persons}")
    print(f"  Name variants: {counts.name_variants}")
    print(
        f"  Queue items: {counts.pending_queue_items} pending, "
        f"{counts.resolved_queue_items} resolved"
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Batch resolution entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        batch = _batch_config(parsed_args)
        config = get_resolution_config()
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        result = run_batch_resolution(config=config, batch=batch, on_progress=_print_progress)
    except Exception:
        log.exception("Fatal error during batch resolution")
        sys.exit(1)

    progress = result.progress
    print(f"Finished in {progress.elapsed:.1f}s: {format_progress(progress)}")
    if progress.errors:
        print(f"  Errors: {progress.errors}")
    _print_counts("Before:", result.initial)
    _print_counts("After:", result.final)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Stop on SIGINT (Ctrl+C), reporting the interrupted run as a failure."""
    log.info("Interrupted by user (Ctrl+C)")
    sys.exit(INTERRUPTED_EXIT_CODE)


def entrypoint() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    entrypoint()
