"""Candidate search: retrieve, merge, filter and rank canonical persons for a name."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from genresolve.domain.model import MatchType
from genresolve.domain.names import PhoneticKeys, parse_name, require_name
from genresolve.domain.phonetics import levenshtein, similarity
from genresolve.domain.resolution.scoring import score_points

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from genresolve.config import ResolutionConfig
    from genresolve.domain.model import CanonicalPerson
    from genresolve.domain.names import ParsedName
    from genresolve.domain.ports import ResolutionRepositories

log = logging.getLogger(__name__)

LENGTH_WINDOW = 2
VARIANT_MATCH_SCORE = 80

# labels that survive the similarity filter regardless of edit distance
_ALWAYS_KEPT = frozenset({MatchType.EXACT, MatchType.SOUNDEX})


@dataclass(frozen=True, slots=True)
class CandidateQuery:
    """A query name with everything the retrieval predicates compare against."""

    full_name: str
    parsed: ParsedName
    keys: PhoneticKeys
    state: str | None = None
    county: str | None = None

    @classmethod
    def from_name(
        cls, full_name: str, *, state: str | None = None, county: str | None = None
    ) -> CandidateQuery:
        name = require_name(full_name)
        parsed = parse_name(name)
        return cls(
            full_name=name,
            parsed=parsed,
            keys=PhoneticKeys.for_name(parsed),
            state=state,
            county=county,
        )

    @property
    def has_surname(self) -> bool:
        return bool(self.parsed.last)


@dataclass(frozen=True, slots=True)
class RetrievedCandidate:
    """A store row matched by at least one retrieval predicate."""

    canonical: CanonicalPerson
    match_type: MatchType
    match_score: int


@dataclass(frozen=True, slots=True)
class Candidate:
    canonical: CanonicalPerson
    match_type: MatchType
    match_score: int
    confidence: float
    levenshtein_distance: int
    similarity: float

    @property
    def canonical_id(self) -> UUID:
        return self.canonical.id


def merge_retrieved(*groups: Iterable[RetrievedCandidate]) -> list[RetrievedCandidate]:
    """Union candidate groups by canonical id, keeping the higher ``match_score``."""

    merged: dict[UUID, RetrievedCandidate] = {}
    for group in groups:
        for retrieved in group:
            current = merged.get(retrieved.canonical.id)
            if current is None or retrieved.match_score > current.match_score:
                merged[retrieved.canonical.id] = retrieved
    return list(merged.values())


def rank_candidates(
    query: CandidateQuery,
    retrieved: Iterable[RetrievedCandidate],
    *,
    min_similarity: float,
    limit: int,
) -> list[Candidate]:
    """Score, filter by edit-distance similarity and order best first.

    Ties on confidence fall back to the raw ``match_score`` and then the canonical id,
    so the order is deterministic.
    """

    scored: list[tuple[int, Candidate]] = []
    for row in retrieved:
        name = row.canonical.canonical_name
        distance = levenshtein(name, query.full_name)
        sim = similarity(name, query.full_name)
        if sim < min_similarity and row.match_type not in _ALWAYS_KEPT:
            continue
        points = max(0, min(100, score_points(row.canonical, query)))
        candidate = Candidate(
            canonical=row.canonical,
            match_type=row.match_type,
            match_score=row.match_score,
            confidence=points / 100,
            levenshtein_distance=distance,
            similarity=sim,
        )
        scored.append((points, candidate))

    scored.sort(key=lambda item: (-item[0], -item[1].match_score, str(item[1].canonical_id)))
    return [candidate for _, candidate in scored[:limit]]


def find_candidates(
    repositories: ResolutionRepositories,
    query: CandidateQuery,
    config: ResolutionConfig,
) -> list[Candidate]:
    """Ranked candidates for ``query`` (at most ``config.candidate_limit``)."""

    from_canonicals = repositories.canonicals.find_candidates(
        query, limit=config.canonical_retrieval_limit
    )
    from_variants = repositories.variants.find_candidates(
        query, limit=config.variant_retrieval_limit
    )
    candidates = rank_candidates(
        query,
        merge_retrieved(from_canonicals, from_variants),
        min_similarity=config.min_similarity,
        limit=config.candidate_limit,
    )
    log.debug(
        "Candidates for %r: %d retrieved, %d via variants, %d ranked",
        query.full_name,
        len(from_canonicals),
        len(from_variants),
        len(candidates),
    )
    return candidates
