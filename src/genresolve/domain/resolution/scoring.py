"""Confidence that a canonical person is the one a queried name refers to.

The model is additive and deliberately double-counts phonetic and lexical agreement:
on anglicized 19th-century names each is weak evidence alone. Weights are kept in
hundredths so that sums compare exactly against thresholds.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from genresolve.domain.phonetics import similarity

if TYPE_CHECKING:
    from genresolve.domain.model import CanonicalPerson
    from genresolve.domain.resolution.candidates import CandidateQuery

SOUNDEX_WEIGHT: Final[int] = 25
EXACT_COMPONENT_WEIGHT: Final[int] = 15
INITIAL_WEIGHT: Final[int] = 10
FULL_SCORE: Final[int] = 100

# (minimum similarity, bonus), first satisfied row wins
SIMILARITY_BONUSES: Final[tuple[tuple[float, int], ...]] = (
    (0.90, 50),
    (0.85, 40),
    (0.80, 30),
    (0.70, 20),
    (0.60, 10),
)


def similarity_bonus(sim: float) -> int:
    for minimum, bonus in SIMILARITY_BONUSES:
        if sim >= minimum:
            return bonus
    return 0


def _component_points(
    query_component: str,
    query_soundex: str,
    candidate_component: str,
    candidate_soundex: str,
) -> int:
    # components compare literally, so two missing surnames agree
    points = 0
    if candidate_soundex == query_soundex:
        points += SOUNDEX_WEIGHT
    if candidate_component.lower() == query_component.lower():
        points += EXACT_COMPONENT_WEIGHT
    if candidate_component[:1].upper() == query_component[:1].upper():
        points += INITIAL_WEIGHT
    return points


def score_points(candidate: CanonicalPerson, query: CandidateQuery) -> int:
    """Unclamped score in hundredths."""

    if candidate.is_spelled(query.full_name):
        return FULL_SCORE

    points = _component_points(
        query.parsed.last, query.keys.last_soundex, candidate.last, candidate.last_soundex
    )
    points += _component_points(
        query.parsed.first, query.keys.first_soundex, candidate.first, candidate.first_soundex
    )
    points += similarity_bonus(similarity(candidate.canonical_name, query.full_name))
    return points


def score_candidate(candidate: CanonicalPerson, query: CandidateQuery) -> float:
    """Confidence in [0, 1]; an exact case-insensitive spelling scores exactly 1.0."""

    return max(0, min(FULL_SCORE, score_points(candidate, query))) / FULL_SCORE
