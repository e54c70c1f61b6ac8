from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from genresolve.adapters.sqlalchemy import create_scraper_tables, start_mappers
from genresolve.adapters.sqlalchemy.migrations import upgrade_head
from genresolve.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyResolutionUnitOfWork,
    shutdown,
    startup,
)

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    # one shared connection, so worker threads see the same in-memory database
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def scraper_tables(sqlite_engine: Engine) -> Engine:
    """The engine with the scraper-owned lead table created alongside ours."""

    create_scraper_tables(sqlite_engine)
    return sqlite_engine


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyResolutionUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyResolutionUnitOfWork:
        return SqlAlchemyResolutionUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()
