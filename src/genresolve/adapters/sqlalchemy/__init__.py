"""SQLAlchemy adapter package for genresolve."""

from __future__ import annotations

from .mappings import mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyCanonicalPersonRepository,
    SqlAlchemyNameVariantRepository,
    SqlAlchemyReviewQueueRepository,
    SqlAlchemyUnconfirmedLeadRepository,
)
from .unconfirmed import create_scraper_tables, scraper_metadata
from .unit_of_work import (
    SqlAlchemyResolutionUnitOfWork,
    StartupError,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyCanonicalPersonRepository",
    "SqlAlchemyNameVariantRepository",
    "SqlAlchemyResolutionUnitOfWork",
    "SqlAlchemyReviewQueueRepository",
    "SqlAlchemyUnconfirmedLeadRepository",
    "StartupError",
    "create_scraper_tables",
    "mapper_registry",
    "scraper_metadata",
    "shutdown",
    "start_mappers",
    "startup",
]
