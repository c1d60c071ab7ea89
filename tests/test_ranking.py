"""
Unit tests for scoring, ordering and reason annotation.
"""

import pytest

from mentormatch.errors import DimensionMismatchError
from mentormatch.recommendation.ranking import (
    SEMANTIC_MATCH_REASON,
    match_reason,
    matched_areas,
    mentor_sort_key,
    rank_mentors,
)


def mentor(mentor_id, embedding, areas=None):
    return {
        "id": mentor_id,
        "research_areas": areas or [],
        "embedding": embedding,
        "embedding_source": None,
    }


def test_equal_scores_are_ordered_by_mentor_id() -> None:
    # B and A score identically; C scores lower.
    student = [1.0, 0.0]
    mentors = [
        mentor(3, [0.5, 0.5]),
        mentor(2, [0.9, 0.43588989]),
        mentor(1, [0.9, 0.43588989]),
    ]

    ranking = rank_mentors(["ml"], student, mentors)

    assert [entry["mentor"]["id"] for entry in ranking] == [1, 2, 3]
    assert ranking[0]["score"] == pytest.approx(0.9)
    assert ranking[0]["score"] == ranking[1]["score"]


def test_integer_ids_sort_numerically_and_before_strings() -> None:
    ids = ["b", 10, "a", 9]
    assert sorted(ids, key=mentor_sort_key) == [9, 10, "a", "b"]


def test_mentors_without_embedding_are_left_out() -> None:
    ranking = rank_mentors(["ml"], [1.0, 0.0], [mentor(1, None), mentor(2, [1.0, 0.0])])
    assert [entry["mentor"]["id"] for entry in ranking] == [2]


def test_degenerate_mentor_is_skipped() -> None:
    ranking = rank_mentors(["ml"], [1.0, 0.0], [mentor(1, [0.0, 0.0]), mentor(2, [0.0, 1.0])])
    assert [entry["mentor"]["id"] for entry in ranking] == [2]


def test_dimension_mismatch_is_not_swallowed() -> None:
    with pytest.raises(DimensionMismatchError):
        rank_mentors(["ml"], [1.0, 0.0], [mentor(1, [1.0, 0.0, 0.0])])


def test_reason_lists_shared_areas_case_insensitively() -> None:
    # Student wrote "ml"; mentor lists "ML".
    assert matched_areas(["ml", "nlp"], ["ML", "Robotics"]) == ["ml"]
    assert match_reason(["ml", "nlp"], ["ML", "Robotics"]) == "Matched areas: ml"


def test_reason_keeps_student_keyword_order() -> None:
    assert match_reason(["vision", "ml"], ["ML", "Vision"]) == "Matched areas: vision, ml"


def test_reason_falls_back_to_semantic_match() -> None:
    assert match_reason(["ml"], ["Vision"]) == SEMANTIC_MATCH_REASON


def test_ranking_entries_carry_reason() -> None:
    ranking = rank_mentors(
        ["ml"], [1.0, 0.0], [mentor(1, [1.0, 0.0], ["ML"]), mentor(2, [0.0, 1.0], ["Art"])]
    )

    assert [entry["reason"] for entry in ranking] == ["Matched areas: ml", "Semantic match"]
