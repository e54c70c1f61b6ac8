"""Thresholds and limits for identity resolution."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_float
from .errors import ConfigurationError

DEFAULT_MATCH_THRESHOLD = 0.85
DEFAULT_REVIEW_THRESHOLD = 0.60
DEFAULT_MIN_SIMILARITY = 0.60
DEFAULT_CANDIDATE_LIMIT = 10
DEFAULT_QUEUE_CANDIDATE_LIMIT = 5
DEFAULT_CANONICAL_RETRIEVAL_LIMIT = 20
DEFAULT_VARIANT_RETRIEVAL_LIMIT = 10
DEFAULT_CANONICAL_CONFIDENCE = 0.50
DEFAULT_SEARCH_LIMIT = 20
DEFAULT_QUEUE_PAGE_SIZE = 50


@dataclass(frozen=True, slots=True)
class ResolutionConfig:
    """Decision thresholds used by the resolver.

    ``match_threshold`` and above links automatically, ``review_threshold`` up to
    (excluding) ``match_threshold`` goes to the review queue, anything lower creates a
    new canonical person.
    """

    match_threshold: float = DEFAULT_MATCH_THRESHOLD
    review_threshold: float = DEFAULT_REVIEW_THRESHOLD
    min_similarity: float = DEFAULT_MIN_SIMILARITY
    candidate_limit: int = DEFAULT_CANDIDATE_LIMIT
    queue_candidate_limit: int = DEFAULT_QUEUE_CANDIDATE_LIMIT
    canonical_retrieval_limit: int = DEFAULT_CANONICAL_RETRIEVAL_LIMIT
    variant_retrieval_limit: int = DEFAULT_VARIANT_RETRIEVAL_LIMIT
    default_canonical_confidence: float = DEFAULT_CANONICAL_CONFIDENCE

    def __post_init__(self) -> None:
        for name in ("match_threshold", "review_threshold", "min_similarity"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must be within [0, 1], got {value}")
        if self.review_threshold > self.match_threshold:
            raise ConfigurationError("review_threshold must not exceed match_threshold")
        if self.candidate_limit < 1 or self.queue_candidate_limit < 1:
            raise ConfigurationError("candidate limits must be positive")


def get_resolution_config() -> ResolutionConfig:
    return ResolutionConfig(
        match_threshold=optional_env_float(
            "GENRESOLVE_MATCH_THRESHOLD", DEFAULT_MATCH_THRESHOLD
        ),
        review_threshold=optional_env_float(
            "GENRESOLVE_REVIEW_THRESHOLD", DEFAULT_REVIEW_THRESHOLD
        ),
        min_similarity=optional_env_float("GENRESOLVE_MIN_SIMILARITY", DEFAULT_MIN_SIMILARITY),
    )
