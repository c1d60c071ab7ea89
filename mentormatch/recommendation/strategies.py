"""
Output strategies for the recommendation generator.

Two policies exist and are kept apart on purpose, because they write to
different tables and fail differently:

    • AdvisoryRanking
        Persists the top-K ranked mentors as recommendations. Does not
        consume mentor capacity. Never fails for lack of capacity.

    • CapacityConstrainedAssignment
        Binds the student to the best-ranked mentor that still has room
        (assignment count strictly below `capacity`). Persists one
        recommendation and one assignment, or raises NoCapacityAvailable
        and persists nothing. If the assignment write fails, the
        recommendation written just before it is deleted again.

The generator picks one by configuration (MENTORMATCH_STRATEGY) through
build_strategy().

Capacity race
-------------
The capacity read and the assignment write run under a lock owned by the
strategy instance, so requests served by the same process cannot both take
a mentor's last seat. Separate processes are not coordinated: across
processes the capacity is a soft cap, and `mentormatch assignments
reconcile` reports mentors that ended up over it.
"""

import threading
from typing import List, Optional

from mentormatch.config import DEFAULT_MENTOR_CAPACITY, DEFAULT_TOP_K
from mentormatch.errors import ConfigurationError, NoCapacityAvailable, StoreError
from mentormatch.store import AssignmentStore
from mentormatch.types import RecommendationRecord, RecordId, ScoredMentor


def _to_record(student_id: RecordId, entry: ScoredMentor) -> RecommendationRecord:
    return {
        "student_id": student_id,
        "mentor_id": entry["mentor"]["id"],
        "score": entry["score"],
        "reason": entry["reason"],
    }


class AssignmentStrategy:
    """Common interface for generator output strategies."""

    name = "base"

    def cached(
        self, store: AssignmentStore, student_id: RecordId
    ) -> Optional[List[RecommendationRecord]]:
        """Return the stored result for `student_id`, or None if there is none."""
        raise NotImplementedError

    def apply(
        self, store: AssignmentStore, student_id: RecordId, ranking: List[ScoredMentor]
    ) -> List[RecommendationRecord]:
        """Persist the result derived from `ranking` and return it."""
        raise NotImplementedError


class AdvisoryRanking(AssignmentStrategy):
    """Keep the `top_k` highest-ranked mentors as advisory recommendations."""

    name = "advisory"

    def __init__(self, top_k: int = DEFAULT_TOP_K) -> None:
        if top_k < 1:
            raise ConfigurationError(f"top_k must be >= 1, got {top_k}")
        self.top_k = top_k

    def cached(
        self, store: AssignmentStore, student_id: RecordId
    ) -> Optional[List[RecommendationRecord]]:
        existing = store.get(student_id)
        return existing or None

    def apply(
        self, store: AssignmentStore, student_id: RecordId, ranking: List[ScoredMentor]
    ) -> List[RecommendationRecord]:
        records = [_to_record(student_id, entry) for entry in ranking[: self.top_k]]
        if not records:
            return []
        return store.upsert_recommendations(records)


class CapacityConstrainedAssignment(AssignmentStrategy):
    """Bind the student to the first ranked mentor with remaining capacity."""

    name = "binding"

    def __init__(self, capacity: int = DEFAULT_MENTOR_CAPACITY) -> None:
        if capacity < 1:
            raise ConfigurationError(f"capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self._lock = threading.Lock()

    def cached(
        self, store: AssignmentStore, student_id: RecordId
    ) -> Optional[List[RecommendationRecord]]:
        assignment = store.get_assignment(student_id)
        if assignment is None:
            return None

        for record in store.get(student_id):
            if record["mentor_id"] == assignment["mentor_id"]:
                return [record]

        # Assignment written by an older version, without its recommendation row.
        return [
            {
                "student_id": assignment["student_id"],
                "mentor_id": assignment["mentor_id"],
                "score": assignment["score"],
                "reason": None,
            }
        ]

    def apply(
        self, store: AssignmentStore, student_id: RecordId, ranking: List[ScoredMentor]
    ) -> List[RecommendationRecord]:
        with self._lock:
            chosen = None
            for entry in ranking:
                if store.count_for_mentor(entry["mentor"]["id"]) < self.capacity:
                    chosen = entry
                    break

            if chosen is None:
                raise NoCapacityAvailable(
                    f"No mentors currently available for student {student_id}"
                )

            mentor_id = chosen["mentor"]["id"]
            written = store.upsert_recommendations([_to_record(student_id, chosen)])
            try:
                store.upsert_assignment(
                    {"student_id": student_id, "mentor_id": mentor_id, "score": chosen["score"]}
                )
            except StoreError:
                # Without its assignment the recommendation row must not remain.
                store.delete_recommendation(student_id, mentor_id)
                raise

        return written


def build_strategy(
    name: str,
    capacity: int = DEFAULT_MENTOR_CAPACITY,
    top_k: int = DEFAULT_TOP_K,
) -> AssignmentStrategy:
    """Instantiate the strategy named by configuration ("advisory" or "binding")."""
    if name == AdvisoryRanking.name:
        return AdvisoryRanking(top_k=top_k)
    if name == CapacityConstrainedAssignment.name:
        return CapacityConstrainedAssignment(capacity=capacity)
    raise ConfigurationError(f"Unknown strategy {name!r}; expected 'advisory' or 'binding'")
