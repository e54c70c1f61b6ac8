"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class PersonType(StrEnum):
    ENSLAVED = "enslaved"
    SLAVEHOLDER = "slaveholder"
    DESCENDANT = "descendant"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str | None) -> PersonType | None:
        """Map scraper vocabulary onto a person type; ``None`` stays ``None``."""
        if value is None or not value.strip():
            return None
        key = value.strip().lower()
        return _PERSON_TYPE_ALIASES.get(key, cls.UNKNOWN)


_PERSON_TYPE_ALIASES: dict[str, PersonType] = {
    "enslaved": PersonType.ENSLAVED,
    "slave": PersonType.ENSLAVED,
    "enslaved_person": PersonType.ENSLAVED,
    "slaveholder": PersonType.SLAVEHOLDER,
    "enslaver": PersonType.SLAVEHOLDER,
    "owner": PersonType.SLAVEHOLDER,
    "slave_owner": PersonType.SLAVEHOLDER,
    "descendant": PersonType.DESCENDANT,
    "unknown": PersonType.UNKNOWN,
}


class Sex(StrEnum):
    MALE = "male"
    FEMALE = "female"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str | None) -> Sex | None:
        if value is None or not value.strip():
            return None
        key = value.strip().lower()
        if key in {"m", "male", "man", "boy"}:
            return cls.MALE
        if key in {"f", "female", "woman", "girl"}:
            return cls.FEMALE
        return cls.UNKNOWN


class VerificationStatus(StrEnum):
    AUTO_CREATED = "auto_created"
    HUMAN_CONFIRMED = "human_confirmed"
    VERIFIED_SCHOLARLY = "verified_scholarly"


class MatchMethod(StrEnum):
    EXACT = "exact"
    SOUNDEX = "soundex"
    METAPHONE = "metaphone"
    FUZZY = "fuzzy"
    HUMAN_CONFIRMED = "human_confirmed"
    AUTO = "auto"
    AUTO_SOUNDEX = "auto_soundex"


class MatchType(StrEnum):
    """How a candidate was retrieved, first matching rule wins."""

    EXACT = "exact"
    SOUNDEX = "soundex"
    METAPHONE = "metaphone"
    SOUNDEX_LAST_ONLY = "soundex_last_only"
    FIRST_LETTER = "first_letter"
    FUZZY = "fuzzy"
    VARIANT = "variant"


class QueueStatus(StrEnum):
    PENDING = "pending"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


class ResolutionType(StrEnum):
    LINKED_EXISTING = "linked_existing"
    CREATED_NEW = "created_new"
    NOT_A_PERSON = "not_a_person"
    DEFERRED = "deferred"


class ResolutionAction(StrEnum):
    MATCHED = "matched"
    QUEUED_FOR_REVIEW = "queued_for_review"
    CREATED_NEW = "created_new"
