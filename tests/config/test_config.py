from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from genresolve.config import (
    ConfigurationError,
    ResolutionConfig,
    configure_logging,
    get_database_config,
    get_resolution_config,
    get_storage_config,
)

if TYPE_CHECKING:
    from pathlib import Path


def test_resolution_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "GENRESOLVE_MATCH_THRESHOLD",
        "GENRESOLVE_REVIEW_THRESHOLD",
        "GENRESOLVE_MIN_SIMILARITY",
    ):
        monkeypatch.delenv(name, raising=False)

    config = get_resolution_config()

    assert config == ResolutionConfig()
    assert (config.match_threshold, config.review_threshold) == (0.85, 0.60)
    assert config.min_similarity == 0.60
    assert config.candidate_limit == 10
    assert config.queue_candidate_limit == 5


def test_resolution_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GENRESOLVE_MATCH_THRESHOLD", " 0.9 ")
    monkeypatch.setenv("GENRESOLVE_REVIEW_THRESHOLD", "0.7")
    monkeypatch.setenv("GENRESOLVE_MIN_SIMILARITY", "   ")

    config = get_resolution_config()

    assert config.match_threshold == 0.9
    assert config.review_threshold == 0.7
    assert config.min_similarity == 0.60


def test_resolution_rejects_non_numbers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GENRESOLVE_REVIEW_THRESHOLD", "low")

    with pytest.raises(ConfigurationError, match="GENRESOLVE_REVIEW_THRESHOLD"):
        get_resolution_config()


def test_resolution_rejects_inverted_thresholds() -> None:
    with pytest.raises(ConfigurationError, match="must not exceed"):
        ResolutionConfig(match_threshold=0.6, review_threshold=0.8)
    with pytest.raises(ConfigurationError, match="within"):
        ResolutionConfig(match_threshold=1.2)


def test_database_uri_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "postgresql+psycopg://localhost/genealogy")
    monkeypatch.setenv("GENRESOLVE_ISOLATION_LEVEL", "READ COMMITTED")

    database = get_database_config()

    assert database.uri == "postgresql+psycopg://localhost/genealogy"
    assert database.isolation_level == "READ COMMITTED"


def test_database_defaults_to_sqlite_in_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.delenv("GENRESOLVE_ISOLATION_LEVEL", raising=False)
    monkeypatch.setenv("GENRESOLVE_DATA_DIR", str(tmp_path / "data"))

    database = get_database_config()

    assert database.uri == f"sqlite+pysqlite:///{tmp_path.resolve() / 'data' / 'genresolve.db'}"
    assert database.isolation_level is None
    assert (tmp_path / "data").is_dir()
    assert get_storage_config().database_path(ensure=False).name == "genresolve.db"


def test_logging_level_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GENRESOLVE_LOG_LEVEL", "debug")

    configure_logging(force=True)

    assert logging.getLogger().level == logging.DEBUG
    configure_logging(level=logging.INFO, force=True)


def test_logging_rejects_unknown_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GENRESOLVE_LOG_LEVEL", "chatty")

    with pytest.raises(ConfigurationError, match="GENRESOLVE_LOG_LEVEL"):
        configure_logging(force=True)
