"""Input records handed to the resolver by scrapers and importers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from genresolve.domain.model.enums import PersonType, Sex


@dataclass(frozen=True, slots=True, kw_only=True)
class NameOccurrence:
    """One appearance of a name in a source document.

    ``full_name`` may be OCR-garbled; everything else is optional provenance.
    ``confidence`` overrides the confidence of a canonical created from it.
    """

    full_name: str
    sex: Sex | None = None
    birth_year: int | None = None
    person_type: PersonType | None = None
    state: str | None = None
    county: str | None = None
    source_type: str | None = None
    source_url: str | None = None
    source_context: str | None = None
    created_by: str | None = None
    unconfirmed_person_id: str | None = None
    confidence: float | None = None

    @property
    def location_context(self) -> str | None:
        parts = [part for part in (self.county, self.state) if part]
        return ", ".join(parts) or None


@dataclass(frozen=True, slots=True, kw_only=True)
class UnconfirmedLead:
    """A raw row from the scraper-owned ``unconfirmed_persons`` table, uninterpreted."""

    lead_id: str
    full_name: str | None
    person_type: str | None = None
    gender: str | None = None
    birth_year: int | None = None
    locations: str | None = None
    source_url: str | None = None
    source_type: str | None = None
