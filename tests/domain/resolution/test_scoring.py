from __future__ import annotations

import pytest

from genresolve.domain.resolution.review import queue_priority
from genresolve.domain.resolution.scoring import score_candidate, score_points, similarity_bonus
from tests.helpers.people import make_canonical, make_query


@pytest.mark.parametrize(
    ("sim", "bonus"),
    [(1.0, 50), (0.90, 50), (0.89, 40), (0.85, 40), (0.80, 30), (0.70, 20), (0.60, 10), (0.59, 0)],
)
def test_similarity_bonus_bands(sim: float, bonus: int) -> None:
    assert similarity_bonus(sim) == bonus


def test_exact_spelling_scores_one_regardless_of_case() -> None:
    canonical = make_canonical("Sally Swailes")

    assert score_candidate(canonical, make_query("SALLY swailes")) == 1.0


def test_one_letter_ocr_slip_is_capped_at_one() -> None:
    canonical = make_canonical("Sally Swailes")
    query = make_query("Sally Swailer")

    # first name agrees fully, surname only by initial, similarity 0.92
    assert score_points(canonical, query) == 110
    assert score_candidate(canonical, query) == 1.0


def test_different_first_name_lands_in_review_band() -> None:
    query = make_query("Sarah Swailes")

    assert score_candidate(make_canonical("Sally Swailes"), query) == pytest.approx(0.80)
    assert score_candidate(make_canonical("Sally Swales"), query) == pytest.approx(0.55)


def test_unrelated_name_scores_zero() -> None:
    assert score_candidate(make_canonical("Sally Swailes"), make_query("William Key")) == 0.0


def test_missing_surnames_agree_with_each_other() -> None:
    # both surnames empty: soundex, exact component and initial all agree
    assert score_points(make_canonical("Sally"), make_query("Sallie")) == 95

    # only one side has a surname, so only the first name agrees
    assert score_points(make_canonical("Sally Swailes"), make_query("Sally")) == 50
    assert score_points(make_canonical("Sally"), make_query("Sally Swailes")) == 50


def test_score_is_symmetric_in_component_agreement() -> None:
    a = make_canonical("Sally Swailes")
    b = make_canonical("Sally Swales")

    assert score_candidate(a, make_query("Sally Swales")) == score_candidate(
        b, make_query("Sally Swailes")
    )


@pytest.mark.parametrize(
    ("confidence", "priority"),
    [
        (0.84, 8),
        (0.80, 8),
        (0.79, 6),
        (0.70, 6),
        (0.69, 4),
        (0.60, 4),
        (0.59, 3),
        (0.85, 3),
        (None, 3),
    ],
)
def test_queue_priority_bands(confidence: float | None, priority: int) -> None:
    assert queue_priority(confidence) == priority
