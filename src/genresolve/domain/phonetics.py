"""Phonetic keys and edit distance for anglicized historical names.

All functions here are pure. The code tables are module constants built once at
import time.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Final

from rapidfuzz.distance import Levenshtein

SOUNDEX_LENGTH: Final[int] = 4
METAPHONE_LENGTH: Final[int] = 8

_NON_LETTERS: Final[re.Pattern[str]] = re.compile(r"[^A-Z]")

SOUNDEX_CODES: Final[MappingProxyType[str, int]] = MappingProxyType(
    {
        **dict.fromkeys("BFPV", 1),
        **dict.fromkeys("CGJKQSXZ", 2),
        **dict.fromkeys("DT", 3),
        "L": 4,
        **dict.fromkeys("MN", 5),
        "R": 6,
    }
)

# (pattern, replacement) pairs; each rewrite applies to its first match only.
METAPHONE_REWRITES: Final[tuple[tuple[re.Pattern[str], str], ...]] = tuple(
    (re.compile(pattern), replacement)
    for pattern, replacement in (
        (r"^KN", "N"),
        (r"^GN", "N"),
        (r"^PN", "N"),
        (r"^WR", "R"),
        (r"^WH", "W"),
        (r"MB$", "M"),
        (r"X", "KS"),
        (r"SCH", "SK"),
        (r"PH", "F"),
        (r"CK", "K"),
        (r"SH", "X"),
        (r"TH", "0"),
        (r"C(?=[IEY])", "S"),
        (r"C", "K"),
        (r"Q", "K"),
        (r"G(?=[IEY])", "J"),
        (r"G", "K"),
        (r"GH", ""),
    )
)

_VOWELS: Final[re.Pattern[str]] = re.compile(r"[AEIOU]")


def _letters(name: str | None) -> str:
    if not name:
        return ""
    return _NON_LETTERS.sub("", name.upper())


def soundex(name: str | None) -> str:
    """American Soundex: first letter plus three digits, zero padded.

    A digit is emitted only when it differs from the code of the last coded letter
    seen (the first letter included); uncoded letters do not reset that memory.

    >>> soundex("Swailes"), soundex("Swales")
    ('S420', 'S420')
    """

    letters = _letters(name)
    if not letters:
        return ""

    result = [letters[0]]
    previous = SOUNDEX_CODES.get(letters[0], 0)
    for letter in letters[1:]:
        if len(result) == SOUNDEX_LENGTH:
            break
        code = SOUNDEX_CODES.get(letter, 0)
        if code and code != previous:
            result.append(str(code))
        if code:
            previous = code

    return "".join(result).ljust(SOUNDEX_LENGTH, "0")


def metaphone(name: str | None) -> str:
    """Simplified Metaphone key, at most eight characters."""

    encoded = _letters(name)
    if not encoded:
        return ""

    for pattern, replacement in METAPHONE_REWRITES:
        encoded = pattern.sub(replacement, encoded, count=1)
    if not encoded:
        return ""

    collapsed = [encoded[0]]
    for char in encoded[1:]:
        if char != collapsed[-1]:
            collapsed.append(char)

    result = collapsed[0] + _VOWELS.sub("", "".join(collapsed[1:]))
    return result[:METAPHONE_LENGTH]


def levenshtein(a: str | None, b: str | None) -> int:
    """Case-insensitive edit distance with unit insert/delete/substitute costs."""

    return Levenshtein.distance((a or "").lower(), (b or "").lower())


def similarity(a: str | None, b: str | None) -> float:
    """``1 - lev(a, b) / max(len(a), len(b))``; identical empty strings are 1.0."""

    longest = max(len(a or ""), len(b or ""))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein(a, b) / longest
