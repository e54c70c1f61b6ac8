"""SQLAlchemy mapping metadata for the identity resolution model."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import UTC, datetime
from enum import StrEnum
from functools import cache
from typing import Any, cast

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    Uuid,
    func,
    orm,
)
from sqlalchemy.orm import configure_mappers

from genresolve.domain.model import (
    CanonicalPerson,
    MatchMethod,
    NameVariant,
    PersonType,
    QueueCandidate,
    QueueStatus,
    ResolutionType,
    ReviewQueueItem,
    Sex,
    VerificationStatus,
)

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


def _enum_values(enum_cls: type[StrEnum]) -> list[str]:
    return [member.value for member in enum_cls]


def _enum(enum_cls: type[StrEnum]) -> Enum:
    """Non-native enum column persisting member values rather than names."""
    return Enum(enum_cls, native_enum=False, values_callable=_enum_values, length=32)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class QueueCandidatesType(TypeDecorator[tuple[QueueCandidate, ...]]):
    """Ordered ``(canonical_id, score)`` pairs stored as a JSON list."""

    impl = Text
    cache_ok = True

    def process_bind_param(
        self, value: tuple[QueueCandidate, ...] | None, dialect: Dialect
    ) -> str | None:
        _ = dialect
        if value is None:
            return None
        payload = [
            {"canonical_id": str(candidate.canonical_id), "score": candidate.score}
            for candidate in value
        ]
        return json.dumps(payload)

    def process_result_value(
        self, value: str | None, dialect: Dialect
    ) -> tuple[QueueCandidate, ...]:
        _ = dialect
        if value is None:
            return ()
        loaded = json.loads(value)
        if not isinstance(loaded, list):
            return ()
        items = cast(list[Any], loaded)
        candidates: list[QueueCandidate] = []
        for item in items:
            if isinstance(item, dict):
                entry = cast(dict[str, Any], item)
                candidates.append(
                    QueueCandidate(
                        canonical_id=uuid.UUID(str(entry["canonical_id"])),
                        score=float(entry["score"]),
                    )
                )
        return tuple(candidates)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Core tables -----------------------------------------------------------------

canonical_person_table = Table(
    "canonical_persons",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("canonical_name", Text, nullable=False),
    Column("first", Text, nullable=False, default=""),
    Column("middle", Text, nullable=False, default=""),
    Column("last", Text, nullable=False, default=""),
    Column("suffix", Text, nullable=False, default=""),
    Column("first_soundex", String(4), nullable=False, default=""),
    Column("last_soundex", String(4), nullable=False, default=""),
    Column("first_metaphone", String(8), nullable=False, default=""),
    Column("last_metaphone", String(8), nullable=False, default=""),
    Column("person_type", _enum(PersonType), nullable=False),
    Column("sex", _enum(Sex), nullable=True),
    Column("birth_year_estimate", Integer, nullable=True),
    Column("death_year_estimate", Integer, nullable=True),
    Column("primary_state", Text, nullable=True),
    Column("primary_county", Text, nullable=True),
    Column(
        "verification_status",
        _enum(VerificationStatus),
        nullable=False,
    ),
    Column("confidence_score", Float, nullable=False),
    Column("created_by", String(255), nullable=True),
    Column("created_at", UTCDateTime(), nullable=False, server_default=func.now()),
    Column("updated_at", UTCDateTime(), nullable=False, server_default=func.now()),
    Index("ix_canonical_persons_first_soundex", "first_soundex"),
    Index("ix_canonical_persons_last_soundex", "last_soundex"),
    Index("ix_canonical_persons_first_metaphone", "first_metaphone"),
    Index("ix_canonical_persons_last_metaphone", "last_metaphone"),
    Index("ix_canonical_persons_location", "primary_state", "primary_county"),
)

# functional indexes need the column objects, so they are attached after the table
Index("ix_canonical_persons_name_lower", func.lower(canonical_person_table.c.canonical_name))
Index("ix_canonical_persons_last_lower", func.lower(canonical_person_table.c.last))
Index(
    "ix_canonical_persons_initials",
    func.upper(func.substr(canonical_person_table.c.first, 1, 1)),
    func.upper(func.substr(canonical_person_table.c.last, 1, 1)),
)

name_variant_table = Table(
    "name_variants",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "canonical_id",
        UUIDColumnType,
        ForeignKey("canonical_persons.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("variant_name", Text, nullable=False),
    Column("first", Text, nullable=False, default=""),
    Column("last", Text, nullable=False, default=""),
    Column("first_soundex", String(4), nullable=False, default=""),
    Column("last_soundex", String(4), nullable=False, default=""),
    Column("first_metaphone", String(8), nullable=False, default=""),
    Column("last_metaphone", String(8), nullable=False, default=""),
    Column("source_type", String(50), nullable=True),
    Column("source_url", Text, nullable=True),
    Column("unconfirmed_person_id", String(64), nullable=True),
    Column("match_method", _enum(MatchMethod), nullable=False),
    Column("match_confidence", Float, nullable=False),
    Column("levenshtein_distance", Integer, nullable=False),
    Column("created_by", String(255), nullable=True),
    Column("created_at", UTCDateTime(), nullable=False, server_default=func.now()),
    Index("ix_name_variants_canonical_id", "canonical_id"),
    Index("ix_name_variants_last_soundex", "last_soundex"),
    Index("ix_name_variants_last_metaphone", "last_metaphone"),
)

Index(
    "uq_name_variants_canonical_name",
    name_variant_table.c.canonical_id,
    func.lower(name_variant_table.c.variant_name),
    unique=True,
)
Index(
    "ix_name_variants_initials",
    func.upper(func.substr(name_variant_table.c.first, 1, 1)),
    func.upper(func.substr(name_variant_table.c.last, 1, 1)),
)

name_match_queue_table = Table(
    "name_match_queue",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("unconfirmed_name", Text, nullable=False),
    Column("unconfirmed_person_id", String(64), nullable=True),
    Column("candidates", QueueCandidatesType(), nullable=False),
    Column("source_url", Text, nullable=True),
    Column("source_context", Text, nullable=True),
    Column("location_context", Text, nullable=True),
    Column("priority", Integer, nullable=False),
    Column("status", _enum(QueueStatus), nullable=False),
    Column("resolution_type", _enum(ResolutionType), nullable=True),
    Column("resolved_canonical_id", UUIDColumnType, nullable=True),
    Column("resolved_by", String(255), nullable=True),
    Column("resolved_at", UTCDateTime(), nullable=True),
    Column("resolution_notes", Text, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False, server_default=func.now()),
    Index("ix_name_match_queue_status_priority", "status", "priority"),
)

Index(
    "ix_name_match_queue_name_lower",
    func.lower(name_match_queue_table.c.unconfirmed_name),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(CanonicalPerson, canonical_person_table)
    mapper_registry.map_imperatively(NameVariant, name_variant_table)
    mapper_registry.map_imperatively(ReviewQueueItem, name_match_queue_table)

    configure_mappers()
    return mapper_registry
