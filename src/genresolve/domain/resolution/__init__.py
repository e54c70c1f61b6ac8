"""Identity resolution: candidate search, scoring, review queue and the resolver."""

from __future__ import annotations

from .candidates import Candidate, CandidateQuery, RetrievedCandidate
from .resolver import Resolution, resolve_occurrence
from .review import HUMAN_CONFIRMED_CONFIDENCE, queue_priority
from .scoring import score_candidate
from .search import CanonicalDetail, QueueItemDetail, ResolutionStats, SimilarNames
from .service import (
    BatchOutcome,
    add_variant,
    canonical_detail,
    create_canonical,
    dismiss_queue_item,
    find_candidates,
    queue_item,
    queue_items,
    resolve_batch,
    resolve_or_create,
    resolve_queue_item,
    search_similar,
    stats,
)

__all__ = [
    "HUMAN_CONFIRMED_CONFIDENCE",
    "BatchOutcome",
    "Candidate",
    "CandidateQuery",
    "CanonicalDetail",
    "QueueItemDetail",
    "Resolution",
    "ResolutionStats",
    "RetrievedCandidate",
    "SimilarNames",
    "add_variant",
    "canonical_detail",
    "create_canonical",
    "dismiss_queue_item",
    "find_candidates",
    "queue_item",
    "queue_items",
    "queue_priority",
    "resolve_batch",
    "resolve_occurrence",
    "resolve_or_create",
    "resolve_queue_item",
    "score_candidate",
    "search_similar",
    "stats",
]
