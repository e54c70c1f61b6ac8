"""SQLAlchemy-backed unit of work for identity resolution."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.exc import DBAPIError, IntegrityError, InterfaceError, OperationalError
from sqlalchemy.orm import Session, sessionmaker

from genresolve.adapters.sqlalchemy.mappings import start_mappers
from genresolve.adapters.sqlalchemy.migrations import upgrade_head
from genresolve.adapters.sqlalchemy.repositories import (
    SqlAlchemyCanonicalPersonRepository,
    SqlAlchemyNameVariantRepository,
    SqlAlchemyReviewQueueRepository,
    SqlAlchemyUnconfirmedLeadRepository,
)
from genresolve.config import get_database_config
from genresolve.domain.errors import ConstraintViolationError, StoreUnavailableError
from genresolve.domain.ports.unit_of_work import RepositoryCollection, ResolutionRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call genresolve.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    isolation_level: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the engine, run migrations and prepare the session factory."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    resolved_engine = engine
    if resolved_engine is None:
        database = get_database_config()
        options: dict[str, str] = {}
        level = isolation_level or database.isolation_level
        if level:
            options["isolation_level"] = level
        resolved_engine = create_engine(database_uri or database.uri, future=True, **options)

    start_mappers()
    try:
        upgrade_head(engine=resolved_engine)
    except (OperationalError, InterfaceError) as exc:
        raise StoreUnavailableError(f"Could not migrate the store: {exc.orig}") from exc

    log.info("SQLAlchemy adapter started on %s", resolved_engine.url.render_as_string())
    _STATE.engine = resolved_engine


def configured_engine() -> Engine | None:
    """Return the engine currently managed by the adapter (if any)."""

    return _STATE.engine


def is_started() -> bool:
    """Return whether the adapter has been initialised."""

    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


def _translate(exc: BaseException) -> Exception | None:
    if isinstance(exc, IntegrityError):
        return ConstraintViolationError(f"Store constraint violated: {exc.orig}")
    if isinstance(exc, (OperationalError, InterfaceError)) or (
        isinstance(exc, DBAPIError) and exc.connection_invalidated
    ):
        return StoreUnavailableError(f"Store unavailable: {exc.orig}")
    return None


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """Generic SQLAlchemy unit of work with pluggable repository collections.

    Leaving the block with an exception rolls back. Database errors surface as
    ``ConstraintViolationError`` or ``StoreUnavailableError``.
    """

    def __init__(self) -> None:
        self.session_factory: sessionmaker[Session] = _STATE.session_factory
        self._session: Session | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        self.session = self.session_factory()
        self._repositories = self._build_repositories(self.session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        try:
            if exc_type is not None:
                self.rollback()
        finally:
            self.session.close()
            self.session = None
        if exc_value is not None:
            translated = _translate(exc_value)
            if translated is not None:
                raise translated from exc_value
        return False

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> TRepositories:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: Session | None) -> None:
        if self._session is not None and session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = session


class SqlAlchemyResolutionUnitOfWork(BaseSqlAlchemyUnitOfWork[ResolutionRepositories]):
    """Unit of work managing SQLAlchemy sessions for identity resolution."""

    def _build_repositories(self, session: Session) -> ResolutionRepositories:
        return ResolutionRepositories(
            canonicals=SqlAlchemyCanonicalPersonRepository(session),
            variants=SqlAlchemyNameVariantRepository(session),
            review_queue=SqlAlchemyReviewQueueRepository(session),
            unconfirmed=SqlAlchemyUnconfirmedLeadRepository(session),
        )


if TYPE_CHECKING:
    from genresolve.domain.ports.unit_of_work import ResolutionUnitOfWork

    _uow_check: ResolutionUnitOfWork = SqlAlchemyResolutionUnitOfWork()
