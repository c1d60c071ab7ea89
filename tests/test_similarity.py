"""
Unit tests for cosine similarity.

These tests verify:
    - identity and antipode of unit vectors,
    - symmetry,
    - the zero-vector and dimension-mismatch failures.
"""

import math

import pytest

from mentormatch.errors import DegenerateVectorError, DimensionMismatchError
from mentormatch.similarity import cosine_similarity

UNIT_VECTORS = [
    [1.0, 0.0, 0.0],
    [0.6, 0.8],
    [1 / math.sqrt(3)] * 3,
    [0.5, -0.5, 0.5, -0.5],
]


@pytest.mark.parametrize("v", UNIT_VECTORS)
def test_vector_with_itself_scores_one(v) -> None:
    assert cosine_similarity(v, v) == pytest.approx(1.0)


@pytest.mark.parametrize("v", UNIT_VECTORS)
def test_vector_with_its_negation_scores_minus_one(v) -> None:
    assert cosine_similarity(v, [-x for x in v]) == pytest.approx(-1.0)


def test_similarity_is_symmetric() -> None:
    a = [0.3, -1.2, 4.0]
    b = [2.5, 0.1, -0.7]
    assert cosine_similarity(a, b) == cosine_similarity(b, a)


def test_orthogonal_vectors_score_zero() -> None:
    assert cosine_similarity([1.0, 0.0], [0.0, 3.0]) == pytest.approx(0.0)


def test_magnitude_does_not_change_score() -> None:
    assert cosine_similarity([1.0, 2.0], [10.0, 20.0]) == pytest.approx(1.0)


def test_result_stays_within_bounds() -> None:
    v = [0.1] * 1000
    assert -1.0 <= cosine_similarity(v, v) <= 1.0


def test_zero_vector_raises_instead_of_nan() -> None:
    with pytest.raises(DegenerateVectorError):
        cosine_similarity([0.0, 0.0], [1.0, 2.0])

    with pytest.raises(DegenerateVectorError):
        cosine_similarity([1.0, 2.0], [0.0, 0.0])


def test_dimension_mismatch_is_fatal() -> None:
    with pytest.raises(DimensionMismatchError) as excinfo:
        cosine_similarity([1.0, 0.0, 0.0], [1.0, 0.0])

    assert excinfo.value.expected == 3
    assert excinfo.value.actual == 2
