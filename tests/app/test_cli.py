from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from genresolve.config.batch import DEFAULT_BATCH_SIZE, DEFAULT_PROGRESS_EVERY
from genresolve.domain.batch_resolution import BatchProgress, BatchResolutionResult
from genresolve.domain.errors import StoreUnavailableError
from genresolve.domain.resolution import ResolutionStats
from genresolve.ui import cli as cli_module

if TYPE_CHECKING:
    from collections.abc import Callable

    from genresolve.config import BatchConfig


def _stats(canonicals: int, variants: int, pending: int, resolved: int) -> ResolutionStats:
    return ResolutionStats(
        canonical_persons=canonicals,
        name_variants=variants,
        pending_queue_items=pending,
        resolved_queue_items=resolved,
        unconfirmed_persons=7,
    )


def _fake_run(captured: dict[str, object]) -> Callable[..., BatchResolutionResult]:
    def fake_run(
        *,
        batch: BatchConfig,
        on_progress: Callable[[BatchProgress], None],
        **kwargs: object,
    ) -> BatchResolutionResult:
        captured.update(kwargs, batch=batch)
        progress = BatchProgress(processed=4, linked=1, queued=1, created=2, skipped=3)
        on_progress(progress)
        return BatchResolutionResult(
            progress=progress,
            initial=_stats(0, 0, 0, 0),
            final=_stats(2, 1, 1, 0),
        )

    return fake_run


def test_cli_defaults(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    captured: dict[str, object] = {}
    monkeypatch.setattr(cli_module, "run_batch_resolution", _fake_run(captured))

    cli_module.main([])

    batch = captured["batch"]
    assert isinstance(batch, cli_module.BatchConfig)
    assert batch.batch_size == DEFAULT_BATCH_SIZE
    assert batch.start_offset == 0
    assert batch.max_records is None
    assert batch.progress_every == DEFAULT_PROGRESS_EVERY
    assert batch.workers == 1

    out = capsys.readouterr().out
    assert "4 processed | 1 linked | 1 queued | 2 new | 3 skipped |" in out
    assert "Before:" in out
    assert "After:" in out
    assert "  Canonical persons: 2" in out
    assert "  Queue items: 1 pending, 0 resolved" in out
    assert "Errors" not in out


def test_cli_with_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}
    monkeypatch.setattr(cli_module, "run_batch_resolution", _fake_run(captured))

    cli_module.main(
        ["--batch-size", "50", "--start-offset", "100", "--max-records", "10", "--workers", "4"]
    )

    batch = captured["batch"]
    assert isinstance(batch, cli_module.BatchConfig)
    assert (batch.batch_size, batch.start_offset, batch.max_records, batch.workers) == (
        50,
        100,
        10,
        4,
    )


@pytest.mark.parametrize(
    "argv",
    [
        ["--batch-size", "0"],
        ["--start-offset", "-1"],
        ["--max-records", "-5"],
        ["--workers", "0"],
        ["--batch-size", "many"],
    ],
)
def test_cli_rejects_invalid_arguments(monkeypatch: pytest.MonkeyPatch, argv: list[str]) -> None:
    monkeypatch.setattr(cli_module, "run_batch_resolution", _fake_run({}))

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(argv)

    assert excinfo.value.code == 2


def test_cli_rejects_invalid_thresholds(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli_module, "run_batch_resolution", _fake_run({}))
    monkeypatch.setenv("GENRESOLVE_MATCH_THRESHOLD", "high")

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main([])

    assert excinfo.value.code == 2


def test_cli_exits_nonzero_when_store_unavailable(monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_run(**_: object) -> BatchResolutionResult:
        raise StoreUnavailableError("Store unavailable: connection refused")

    monkeypatch.setattr(cli_module, "run_batch_resolution", failing_run)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main([])

    assert excinfo.value.code == 1


def test_format_progress_reports_rate() -> None:
    progress = BatchProgress(processed=10, linked=4, queued=3, created=2, skipped=1)

    line = cli_module.format_progress(progress)

    assert line.startswith("10 processed | 4 linked | 3 queued | 2 new | 1 skipped | ")
    assert line.endswith("/sec")


def test_interrupt_exits_with_failure_code() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.sigint_handler(2, None)

    assert excinfo.value.code == cli_module.INTERRUPTED_EXIT_CODE == 130
