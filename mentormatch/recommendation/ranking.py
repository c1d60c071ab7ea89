"""
Scoring, ranking and reason annotation.

Given a student vector and the embedded mentors, this module produces the
ranked list that both strategies consume:

    1. score every mentor that has an embedding (cosine similarity)
    2. sort by score descending, ties by mentor id ascending
    3. annotate each entry with the research areas it shares with the student

Mentors without an embedding never appear. A mentor whose vector is
degenerate (zero norm) is logged and left out of the ranking rather than
scored as zero.
"""

import logging
from typing import List, Tuple

from mentormatch.errors import DegenerateVectorError
from mentormatch.profiles import mentor_sort_key
from mentormatch.similarity import cosine_similarity
from mentormatch.types import EmbeddingVector, MentorProfile, ScoredMentor

logger = logging.getLogger(__name__)

SEMANTIC_MATCH_REASON = "Semantic match"


def matched_areas(keywords: List[str], research_areas: List[str]) -> List[str]:
    """
    Return the student keywords that also appear among the mentor's areas.

    Comparison ignores case ("ml" matches "ML"); the student's spelling and
    keyword order are kept in the result.
    """
    areas = {area.casefold() for area in research_areas}
    return [keyword for keyword in keywords if keyword.casefold() in areas]


def match_reason(keywords: List[str], research_areas: List[str]) -> str:
    """Human-readable reason for a recommendation."""
    shared = matched_areas(keywords, research_areas)
    if not shared:
        return SEMANTIC_MATCH_REASON
    return f"Matched areas: {', '.join(shared)}"


def score_mentors(
    student_vector: EmbeddingVector, mentors: List[MentorProfile]
) -> List[Tuple[MentorProfile, float]]:
    """
    Compute cosine similarity between the student and each embedded mentor.

    DimensionMismatchError is not caught: a student vector and a mentor
    vector of different size means the provider changed under us.
    """
    scored = []
    for mentor in mentors:
        embedding = mentor["embedding"]
        if embedding is None:
            continue
        try:
            score = cosine_similarity(student_vector, embedding)
        except DegenerateVectorError:
            logger.warning("Skipping mentor %s: degenerate embedding", mentor["id"])
            continue
        scored.append((mentor, score))
    return scored


def rank_mentors(
    student_keywords: List[str],
    student_vector: EmbeddingVector,
    mentors: List[MentorProfile],
) -> List[ScoredMentor]:
    """
    Score, sort and annotate mentors for one student.

    Returns
    -------
    list[ScoredMentor]
        Highest score first. Equal scores are ordered by mentor id ascending.
    """
    scored = score_mentors(student_vector, mentors)
    scored.sort(key=lambda pair: (-pair[1], mentor_sort_key(pair[0]["id"])))

    return [
        {
            "mentor": mentor,
            "score": score,
            "reason": match_reason(student_keywords, mentor["research_areas"]),
        }
        for mentor, score in scored
    ]
