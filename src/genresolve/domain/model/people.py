"""Canonical persons and the spellings that point at them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from genresolve.domain.errors import InvalidNameError
from genresolve.domain.model.entity import Entity, utcnow
from genresolve.domain.model.enums import MatchMethod, PersonType, VerificationStatus
from genresolve.domain.names import PhoneticKeys, parse_name, require_name
from genresolve.domain.phonetics import levenshtein

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from genresolve.domain.model.enums import Sex
    from genresolve.domain.names import ParsedName


@dataclass(eq=False, kw_only=True)
class CanonicalPerson(Entity):
    """The system's single record of belief about one historical individual.

    Parsed components and phonetic keys are derived from ``canonical_name``; use
    :meth:`create` and :meth:`rename` rather than setting them by hand.
    """

    canonical_name: str
    first: str = ""
    middle: str = ""
    last: str = ""
    suffix: str = ""

    first_soundex: str = ""
    last_soundex: str = ""
    first_metaphone: str = ""
    last_metaphone: str = ""

    person_type: PersonType = PersonType.ENSLAVED
    sex: Sex | None = None
    birth_year_estimate: int | None = None
    death_year_estimate: int | None = None
    primary_state: str | None = None
    primary_county: str | None = None

    verification_status: VerificationStatus = VerificationStatus.AUTO_CREATED
    confidence_score: float = 0.5

    created_by: str | None = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @classmethod
    def create(
        cls,
        full_name: str,
        *,
        person_type: PersonType | None = None,
        sex: Sex | None = None,
        birth_year_estimate: int | None = None,
        primary_state: str | None = None,
        primary_county: str | None = None,
        verification_status: VerificationStatus = VerificationStatus.AUTO_CREATED,
        confidence_score: float = 0.5,
        created_by: str | None = None,
    ) -> CanonicalPerson:
        if not 0.0 <= confidence_score <= 1.0:
            raise ValueError(f"confidence_score must be within [0, 1], got {confidence_score}")
        person = cls(
            canonical_name="",
            person_type=person_type or PersonType.ENSLAVED,
            sex=sex,
            birth_year_estimate=birth_year_estimate,
            primary_state=primary_state or None,
            primary_county=primary_county or None,
            verification_status=verification_status,
            confidence_score=confidence_score,
            created_by=created_by,
        )
        person.rename(full_name)
        person.updated_at = person.created_at
        return person

    def rename(self, full_name: str) -> None:
        """Change the authoritative spelling, re-deriving components and keys."""

        name = require_name(full_name)
        parsed = parse_name(name)
        if not parsed.first and not parsed.last:
            raise InvalidNameError(f"Name {name!r} has neither a first nor a last component")
        keys = PhoneticKeys.for_name(parsed)

        self.canonical_name = name
        self.first = parsed.first
        self.middle = parsed.middle
        self.last = parsed.last
        self.suffix = parsed.suffix
        self.first_soundex = keys.first_soundex
        self.last_soundex = keys.last_soundex
        self.first_metaphone = keys.first_metaphone
        self.last_metaphone = keys.last_metaphone
        self.updated_at = utcnow()

    @property
    def phonetic_keys(self) -> PhoneticKeys:
        return PhoneticKeys(
            first_soundex=self.first_soundex,
            last_soundex=self.last_soundex,
            first_metaphone=self.first_metaphone,
            last_metaphone=self.last_metaphone,
        )

    def is_spelled(self, name: str) -> bool:
        """Case-insensitive comparison against the authoritative spelling."""
        return self.canonical_name.lower() == name.lower()


@dataclass(eq=False, kw_only=True)
class NameVariant(Entity):
    """A non-authoritative spelling referring to exactly one canonical person."""

    canonical_id: UUID
    variant_name: str
    first: str = ""
    last: str = ""

    first_soundex: str = ""
    last_soundex: str = ""
    first_metaphone: str = ""
    last_metaphone: str = ""

    source_type: str | None = None
    source_url: str | None = None
    unconfirmed_person_id: str | None = None

    match_method: MatchMethod = MatchMethod.AUTO
    match_confidence: float = 0.0
    levenshtein_distance: int = 0

    created_by: str | None = None
    created_at: datetime = field(default_factory=utcnow)

    @classmethod
    def for_canonical(
        cls,
        canonical: CanonicalPerson,
        variant_name: str,
        *,
        match_method: MatchMethod,
        match_confidence: float,
        source_type: str | None = None,
        source_url: str | None = None,
        unconfirmed_person_id: str | None = None,
        created_by: str | None = None,
    ) -> NameVariant:
        """Build a variant of ``canonical``.

        Raises ``InvalidNameError`` for blank names and when the
        spelling equals the canonical name, which would be a degenerate self-variant.
        """

        name = require_name(variant_name)
        if canonical.is_spelled(name):
            raise InvalidNameError(f"{name!r} is the canonical spelling, not a variant")
        if not 0.0 <= match_confidence <= 1.0:
            raise ValueError(f"match_confidence must be within [0, 1], got {match_confidence}")
        parsed: ParsedName = parse_name(name)
        keys = PhoneticKeys.for_name(parsed)
        return cls(
            canonical_id=canonical.id,
            variant_name=name,
            first=parsed.first,
            last=parsed.last,
            first_soundex=keys.first_soundex,
            last_soundex=keys.last_soundex,
            first_metaphone=keys.first_metaphone,
            last_metaphone=keys.last_metaphone,
            source_type=source_type,
            source_url=source_url,
            unconfirmed_person_id=unconfirmed_person_id,
            match_method=match_method,
            match_confidence=match_confidence,
            levenshtein_distance=levenshtein(canonical.canonical_name, name),
            created_by=created_by,
        )
