"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import (
    CanonicalPersonRepository,
    NameVariantRepository,
    Repository,
    ReviewQueueRepository,
    UnconfirmedLeadRepository,
)
from .unit_of_work import (
    RepositoryCollection,
    ResolutionRepositories,
    ResolutionUnitOfWork,
    UnitOfWork,
)

__all__ = [
    "CanonicalPersonRepository",
    "NameVariantRepository",
    "Repository",
    "RepositoryCollection",
    "ResolutionRepositories",
    "ResolutionUnitOfWork",
    "ReviewQueueRepository",
    "UnconfirmedLeadRepository",
    "UnitOfWork",
]
