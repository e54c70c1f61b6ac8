"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, case, func, inspect, or_, select
from sqlalchemy.dialects import postgresql, sqlite

from genresolve.adapters.sqlalchemy.mappings import (
    canonical_person_table,
    name_match_queue_table,
    name_variant_table,
)
from genresolve.adapters.sqlalchemy.unconfirmed import unconfirmed_person_table
from genresolve.domain.model import (
    CanonicalPerson,
    MatchType,
    NameVariant,
    QueueStatus,
    ReviewQueueItem,
    UnconfirmedLead,
)
from genresolve.domain.names import PhoneticKeys, normalize_name, parse_name
from genresolve.domain.resolution.candidates import (
    LENGTH_WINDOW,
    VARIANT_MATCH_SCORE,
    RetrievedCandidate,
)

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from sqlalchemy import ColumnElement, Table
    from sqlalchemy.orm import Session

    from genresolve.domain.resolution.candidates import CandidateQuery

log = logging.getLogger(__name__)

# integer match_score bonuses, applied independently
EXACT_NAME_BONUS = 100
SOUNDEX_BONUS = 30
METAPHONE_BONUS = 25
EXACT_COMPONENT_BONUS = 40
INITIAL_BONUS = 15

_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _initial(column: Any) -> ColumnElement[Any]:
    return func.upper(func.substr(column, 1, 1))


def _has_table(session: Session, table: Table) -> bool:
    return inspect(session.connection()).has_table(table.name, schema=table.schema)


def _count(session: Session, table: Table, *criteria: ColumnElement[bool]) -> int:
    """``COUNT(*)`` that degrades to 0 when the table is missing."""

    if not _has_table(session, table):
        log.warning("Table %s does not exist, reporting 0", table.name)
        return 0
    stmt = select(func.count()).select_from(table).where(*criteria)
    return int(session.execute(stmt).scalar_one())


class _ComponentMatch:
    """SQL predicates comparing one name component of a table against a query."""

    def __init__(
        self,
        component: str,
        soundex_key: str,
        metaphone_key: str,
        *,
        column: Any,
        soundex_column: Any,
        metaphone_column: Any,
    ) -> None:
        # empty keys compare literally: a missing surname matches other missing surnames
        self.component = component
        self.column = column
        self.soundex: ColumnElement[bool] = soundex_column == soundex_key
        self.metaphone: ColumnElement[bool] = metaphone_column == metaphone_key
        self.exact: ColumnElement[bool] = func.lower(column) == component.lower()
        self.initial: ColumnElement[bool] = _initial(column) == component[:1].upper()

    def length_window(self) -> ColumnElement[bool]:
        return func.abs(func.length(self.column) - len(self.component)) <= LENGTH_WINDOW


def _component_matches(table: Table, query: CandidateQuery) -> tuple[_ComponentMatch, ...]:
    keys: PhoneticKeys = query.keys
    first = _ComponentMatch(
        query.parsed.first,
        keys.first_soundex,
        keys.first_metaphone,
        column=table.c.first,
        soundex_column=table.c.first_soundex,
        metaphone_column=table.c.first_metaphone,
    )
    last = _ComponentMatch(
        query.parsed.last,
        keys.last_soundex,
        keys.last_metaphone,
        column=table.c.last,
        soundex_column=table.c.last_soundex,
        metaphone_column=table.c.last_metaphone,
    )
    return first, last


class SqlAlchemyCanonicalPersonRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: CanonicalPerson) -> None:
        self.session.add(entity)

    def get(self, canonical_id: UUID) -> CanonicalPerson | None:
        return self.session.get(CanonicalPerson, canonical_id)

    def get_many(self, canonical_ids: Iterable[UUID]) -> list[CanonicalPerson]:
        ids = list(canonical_ids)
        if not ids:
            return []
        stmt = select(CanonicalPerson).where(canonical_person_table.c.id.in_(ids))
        return list(self.session.execute(stmt).scalars())

    def find_candidates(self, query: CandidateQuery, *, limit: int) -> list[RetrievedCandidate]:
        """Rows matching any retrieval predicate, labelled and scored in SQL."""

        table = canonical_person_table
        first, last = _component_matches(table, query)
        exact = func.lower(table.c.canonical_name) == query.full_name.lower()

        match_type = case(
            (exact, MatchType.EXACT.value),
            (and_(first.soundex, last.soundex), MatchType.SOUNDEX.value),
            (and_(first.metaphone, last.metaphone), MatchType.METAPHONE.value),
            (last.soundex, MatchType.SOUNDEX_LAST_ONLY.value),
            (and_(last.initial, first.initial), MatchType.FIRST_LETTER.value),
            else_=MatchType.FUZZY.value,
        ).label("match_type")

        match_score = (
            case((exact, EXACT_NAME_BONUS), else_=0)
            + case((last.soundex, SOUNDEX_BONUS), else_=0)
            + case((first.soundex, SOUNDEX_BONUS), else_=0)
            + case((last.metaphone, METAPHONE_BONUS), else_=0)
            + case((first.metaphone, METAPHONE_BONUS), else_=0)
            + case((last.exact, EXACT_COMPONENT_BONUS), else_=0)
            + case((first.exact, EXACT_COMPONENT_BONUS), else_=0)
            + case((last.initial, INITIAL_BONUS), else_=0)
            + case((first.initial, INITIAL_BONUS), else_=0)
        ).label("match_score")

        window = and_(last.initial, first.initial, last.length_window())
        predicate = or_(exact, last.soundex, last.metaphone, last.exact, window)

        stmt = (
            select(CanonicalPerson, match_type, match_score)
            .where(predicate)
            .order_by(match_score.desc(), table.c.id)
            .limit(limit)
        )
        return [
            RetrievedCandidate(
                canonical=canonical,
                match_type=MatchType(label),
                match_score=int(score),
            )
            for canonical, label, score in self.session.execute(stmt).tuples()
        ]

    def search(self, text: str, *, limit: int) -> list[CanonicalPerson]:
        table = canonical_person_table
        parsed = parse_name(text)
        keys = PhoneticKeys.for_name(parsed)
        criteria: list[ColumnElement[bool]] = [
            table.c.canonical_name.icontains(normalize_name(text), autoescape=True)
        ]
        if parsed.last:
            criteria.append(table.c.last_soundex == keys.last_soundex)
        if parsed.first:
            criteria.append(table.c.first_soundex == keys.first_soundex)
        stmt = (
            select(CanonicalPerson)
            .where(or_(*criteria))
            .order_by(table.c.canonical_name, table.c.id)
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars())

    def count(self) -> int:
        return _count(self.session, canonical_person_table)


class SqlAlchemyNameVariantRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: NameVariant) -> bool:
        """Insert unless ``(canonical_id, lower(variant_name))`` exists; report a write."""

        # pending canonicals must reach the database before rows referencing them
        self.session.flush()
        insert = _UPSERT_INSERTS.get(self.session.get_bind().dialect.name)
        if insert is None:
            if self.exists(entity.canonical_id, entity.variant_name):
                return False
            self.session.add(entity)
            self.session.flush()
            return True

        values = {column.key: getattr(entity, column.key) for column in name_variant_table.c}
        stmt = insert(name_variant_table).values(**values).on_conflict_do_nothing()
        result = self.session.execute(stmt)
        inserted = result.rowcount > 0
        if not inserted:
            log.debug(
                "Variant %r of %s already recorded", entity.variant_name, entity.canonical_id
            )
        return inserted

    def exists(self, canonical_id: UUID, variant_name: str) -> bool:
        return self.get_by_name(canonical_id, variant_name) is not None

    def get_by_name(self, canonical_id: UUID, variant_name: str) -> NameVariant | None:
        table = name_variant_table
        stmt = (
            select(NameVariant)
            .where(table.c.canonical_id == canonical_id)
            .where(func.lower(table.c.variant_name) == variant_name.lower())
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def for_canonical(self, canonical_id: UUID) -> list[NameVariant]:
        table = name_variant_table
        stmt = (
            select(NameVariant)
            .where(table.c.canonical_id == canonical_id)
            .order_by(table.c.created_at.desc(), table.c.id)
        )
        return list(self.session.execute(stmt).scalars())

    def find_candidates(self, query: CandidateQuery, *, limit: int) -> list[RetrievedCandidate]:
        """Canonicals reached through a known spelling, at a fixed score."""

        variants = name_variant_table
        first, last = _component_matches(variants, query)
        predicate = or_(
            func.lower(variants.c.variant_name) == query.full_name.lower(),
            last.soundex,
            and_(last.initial, first.initial),
        )
        stmt = (
            select(CanonicalPerson)
            .join(variants, variants.c.canonical_id == canonical_person_table.c.id)
            .where(predicate)
            .distinct()
            .order_by(canonical_person_table.c.id)
            .limit(limit)
        )
        return [
            RetrievedCandidate(
                canonical=canonical,
                match_type=MatchType.VARIANT,
                match_score=VARIANT_MATCH_SCORE,
            )
            for canonical in self.session.execute(stmt).scalars()
        ]

    def search(self, text: str, *, limit: int) -> list[tuple[NameVariant, str]]:
        variants = name_variant_table
        parsed = parse_name(text)
        criteria: list[ColumnElement[bool]] = [
            variants.c.variant_name.icontains(normalize_name(text), autoescape=True)
        ]
        if parsed.last:
            criteria.append(variants.c.last_soundex == PhoneticKeys.for_name(parsed).last_soundex)
        stmt = (
            select(NameVariant, canonical_person_table.c.canonical_name)
            .join(canonical_person_table, variants.c.canonical_id == canonical_person_table.c.id)
            .where(or_(*criteria))
            .order_by(variants.c.variant_name, variants.c.id)
            .limit(limit)
        )
        return [(variant, name) for variant, name in self.session.execute(stmt).tuples()]

    def count(self) -> int:
        return _count(self.session, name_variant_table)


class SqlAlchemyReviewQueueRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: ReviewQueueItem) -> None:
        self.session.add(entity)

    def get(self, queue_id: UUID) -> ReviewQueueItem | None:
        return self.session.get(ReviewQueueItem, queue_id)

    def find_pending(
        self, unconfirmed_name: str, source_url: str | None
    ) -> ReviewQueueItem | None:
        table = name_match_queue_table
        same_source = (
            table.c.source_url.is_(None) if source_url is None else table.c.source_url == source_url
        )
        stmt = (
            select(ReviewQueueItem)
            .where(table.c.status == QueueStatus.PENDING)
            .where(func.lower(table.c.unconfirmed_name) == unconfirmed_name.lower())
            .where(same_source)
            .order_by(table.c.created_at, table.c.id)
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def list_by_status(self, *, status: QueueStatus, limit: int) -> list[ReviewQueueItem]:
        table = name_match_queue_table
        stmt = (
            select(ReviewQueueItem)
            .where(table.c.status == status)
            .order_by(table.c.priority.desc(), table.c.created_at.asc(), table.c.id)
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars())

    def count(self, *, status: QueueStatus) -> int:
        table = name_match_queue_table
        return _count(self.session, table, table.c.status == status)


class SqlAlchemyUnconfirmedLeadRepository:
    """Reads the scraper-owned lead table; it is never written here."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def page(self, *, offset: int, limit: int) -> list[UnconfirmedLead]:
        table = unconfirmed_person_table
        stmt = select(table).order_by(table.c.lead_id).offset(offset).limit(limit)
        return [_lead_from_row(row) for row in self.session.execute(stmt).mappings()]

    def search(self, text: str, *, limit: int) -> list[UnconfirmedLead]:
        table = unconfirmed_person_table
        if not _has_table(self.session, table):
            log.warning("Table %s does not exist, no leads searched", table.name)
            return []
        stmt = (
            select(table)
            .where(table.c.full_name.icontains(normalize_name(text), autoescape=True))
            .order_by(table.c.lead_id)
            .limit(limit)
        )
        return [_lead_from_row(row) for row in self.session.execute(stmt).mappings()]

    def count(self) -> int:
        return _count(self.session, unconfirmed_person_table)


def _lead_from_row(row: Any) -> UnconfirmedLead:
    return UnconfirmedLead(
        lead_id=str(row["lead_id"]),
        full_name=row["full_name"],
        person_type=row["person_type"],
        gender=row["gender"],
        birth_year=row["birth_year"],
        locations=row["locations"],
        source_url=row["source_url"],
        source_type=row["source_type"],
    )
