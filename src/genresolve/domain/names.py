"""Name normalisation, parsing and phonetic key derivation."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

from genresolve.domain.errors import InvalidNameError
from genresolve.domain.phonetics import metaphone, soundex

NAME_SUFFIXES: Final[frozenset[str]] = frozenset({"JR", "SR", "II", "III", "IV", "V"})

_WHITESPACE: Final[re.Pattern[str]] = re.compile(r"\s+")
_SUFFIX_PUNCTUATION: Final[re.Pattern[str]] = re.compile(r"[.,]")


@dataclass(frozen=True, slots=True)
class ParsedName:
    first: str = ""
    middle: str = ""
    last: str = ""
    suffix: str = ""

    @property
    def first_initial(self) -> str:
        return self.first[:1].upper()

    @property
    def last_initial(self) -> str:
        return self.last[:1].upper()


@dataclass(frozen=True, slots=True)
class PhoneticKeys:
    first_soundex: str
    last_soundex: str
    first_metaphone: str
    last_metaphone: str

    @classmethod
    def for_name(cls, parsed: ParsedName) -> PhoneticKeys:
        return cls(
            first_soundex=soundex(parsed.first),
            last_soundex=soundex(parsed.last),
            first_metaphone=metaphone(parsed.first),
            last_metaphone=metaphone(parsed.last),
        )


@dataclass(frozen=True, slots=True)
class NameAnalysis:
    """Parsed components and phonetic keys of a name, for reviewers and tooling."""

    full_name: str
    parsed: ParsedName
    keys: PhoneticKeys


def normalize_name(full_name: str | None) -> str:
    """Trim and collapse internal whitespace (newlines included)."""

    if not full_name:
        return ""
    return _WHITESPACE.sub(" ", full_name).strip()


def require_name(full_name: str | None) -> str:
    """Return the normalised name, raising ``InvalidNameError`` when it is blank."""

    normalized = normalize_name(full_name)
    if not normalized:
        raise InvalidNameError("Name must not be empty or whitespace-only")
    return normalized


def parse_name(full_name: str | None) -> ParsedName:
    """Split a full name into first, middle, last and suffix.

    A trailing generational suffix (``Jr.``, ``III`` ...) is detached first; one
    remaining token is a first name, two are first and last, and anything in between
    the first and last of three or more tokens is the middle name.
    """

    normalized = normalize_name(full_name)
    if not normalized:
        return ParsedName()

    tokens = normalized.split(" ")
    suffix = ""
    if _SUFFIX_PUNCTUATION.sub("", tokens[-1].upper()) in NAME_SUFFIXES:
        suffix = tokens.pop()

    if not tokens:
        return ParsedName()
    if len(tokens) == 1:
        return ParsedName(first=tokens[0], suffix=suffix)
    return ParsedName(
        first=tokens[0],
        middle=" ".join(tokens[1:-1]),
        last=tokens[-1],
        suffix=suffix,
    )


def join_name(parsed: ParsedName) -> str:
    """Inverse of :func:`parse_name` for names it produced."""

    parts = (parsed.first, parsed.middle, parsed.last, parsed.suffix)
    return " ".join(part for part in parts if part)


def analyze_name(full_name: str) -> NameAnalysis:
    normalized = require_name(full_name)
    parsed = parse_name(normalized)
    return NameAnalysis(full_name=normalized, parsed=parsed, keys=PhoneticKeys.for_name(parsed))
