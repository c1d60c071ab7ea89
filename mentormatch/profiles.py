"""
Profile normalization at the data-model boundary.

Supabase rows for students and mentors store token fields (skills,
interests, research_areas) either as arrays or as comma-joined strings,
depending on which client wrote them. This module converts raw rows into
StudentProfile / MentorProfile snapshots exactly once, on load, so the
ranking and cache code only ever sees `List[str]`.

It also decodes mentor embeddings: pgvector columns come back from PostgREST
as strings like "[0.1,0.2,0.3]".
"""

import hashlib
import json
from typing import Any, Dict, Iterable, List, Optional, Tuple

from mentormatch.types import EmbeddingVector, MentorProfile, RecordId, StudentProfile


def mentor_sort_key(mentor_id: RecordId) -> Tuple[int, Any]:
    """
    Ascending sort key for mentor ids.

    Integer ids sort numerically (9 before 10) and ahead of string ids, which
    sort lexicographically, so mixed id types still order deterministically.
    """
    if isinstance(mentor_id, int):
        return (0, mentor_id)
    return (1, str(mentor_id))


def normalize_tokens(value: Any) -> List[str]:
    """
    Convert an array-or-string token field into an ordered list of tokens.

    Strings are split on commas. Every segment is trimmed and empty segments
    are dropped. None yields an empty list.

    Examples
    --------
    >>> normalize_tokens("ML, Robotics, ")
    ['ML', 'Robotics']
    >>> normalize_tokens(["nlp", " ", "vision "])
    ['nlp', 'vision']
    """
    if value is None:
        return []

    if isinstance(value, str):
        segments: Iterable[Any] = value.split(",")
    else:
        segments = value

    tokens = []
    for segment in segments:
        if segment is None:
            continue
        text = str(segment).strip()
        if text:
            tokens.append(text)
    return tokens


def build_keyword_set(*token_lists: List[str]) -> List[str]:
    """
    Union several token lists, keeping the first occurrence of each token.

    Order is preserved; duplicates are detected by exact string equality.
    """
    seen = set()
    keywords = []
    for tokens in token_lists:
        for token in tokens:
            if token and token not in seen:
                seen.add(token)
                keywords.append(token)
    return keywords


def decode_embedding(value: Any) -> Optional[EmbeddingVector]:
    """
    Decode a stored embedding into a list of floats.

    Accepts a list (JSON array column) or the text form PostgREST returns
    for pgvector columns. Empty or missing values yield None.
    """
    if value is None:
        return None

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        value = json.loads(text)

    vector = [float(x) for x in value]
    return vector or None


def embedding_source_hash(tokens: List[str]) -> str:
    """
    Fingerprint the research-area tokens an embedding was computed from.

    Stored next to the embedding so a later edit of research_areas can be
    detected and the embedding recomputed.
    """
    joined = "\n".join(tokens)
    return hashlib.sha256(joined.encode("utf-8")).hexdigest()


def load_student_profile(row: Dict[str, Any]) -> StudentProfile:
    """Build an immutable StudentProfile snapshot from a `student_details` row."""
    skills = normalize_tokens(row.get("skills"))
    interests = normalize_tokens(row.get("interests"))
    return {
        "id": row["id"],
        "skills": skills,
        "interests": interests,
        "keywords": build_keyword_set(skills, interests),
    }


def load_mentor_profile(row: Dict[str, Any]) -> MentorProfile:
    """Build a MentorProfile from a `mentor_details` row."""
    return {
        "id": row["id"],
        "research_areas": normalize_tokens(row.get("research_areas")),
        "embedding": decode_embedding(row.get("embedding")),
        "embedding_source": row.get("embedding_source"),
    }
