"""
AssignmentStore: persistence of recommendation results.

Two uniqueness scopes live here and must not be mixed up:

    • recommendations   unique on (student_id, mentor_id), many per student
    • assigned_mentors  unique on student_id, at most one per student

The store converts between Supabase rows and the RecommendationRecord /
AssignmentRecord TypedDicts, stamps created_at on new recommendations, and
delegates all I/O to SupabaseClient.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from mentormatch.profiles import mentor_sort_key
from mentormatch.supabase_client import SupabaseClient
from mentormatch.types import AssignmentRecord, RecommendationRecord, RecordId


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _to_recommendation(row: Dict[str, Any]) -> RecommendationRecord:
    record: RecommendationRecord = {
        "student_id": row["student_id"],
        "mentor_id": row["mentor_id"],
        "score": float(row["score"]),
        "reason": row.get("reason"),
    }
    if row.get("created_at"):
        record["created_at"] = row["created_at"]
    return record


def _to_assignment(row: Dict[str, Any]) -> AssignmentRecord:
    return {
        "student_id": row["student_id"],
        "mentor_id": row["mentor_id"],
        "score": float(row["score"]),
    }


class AssignmentStore:
    """Read and write recommendation and assignment records for students."""

    def __init__(self, client: SupabaseClient) -> None:
        self.client = client

    def get(self, student_id: RecordId) -> List[RecommendationRecord]:
        """
        Return the student's stored recommendations, highest score first.

        Equal scores are ordered by mentor id ascending, the same order a
        fresh ranking produces, whatever order the store returned rows in.
        """
        rows = self.client.get_recommendations(student_id)
        records = [_to_recommendation(row) for row in rows]
        records.sort(key=lambda r: (-r["score"], mentor_sort_key(r["mentor_id"])))
        return records

    def get_assignment(self, student_id: RecordId) -> Optional[AssignmentRecord]:
        row = self.client.get_assignment(student_id)
        return _to_assignment(row) if row else None

    def count_for_mentor(self, mentor_id: RecordId) -> int:
        return self.client.count_assignments(mentor_id)

    def upsert_recommendations(
        self, records: List[RecommendationRecord]
    ) -> List[RecommendationRecord]:
        """
        Upsert recommendation records keyed by (student_id, mentor_id).

        Records without created_at are stamped with the current UTC time.
        The records are returned as written.
        """
        stamped: List[RecommendationRecord] = []
        for record in records:
            row = dict(record)
            row.setdefault("created_at", utc_timestamp())
            stamped.append(_to_recommendation(row))

        self.client.upsert_recommendations([dict(r) for r in stamped])
        return stamped

    def delete_recommendation(self, student_id: RecordId, mentor_id: RecordId) -> None:
        self.client.delete_recommendation(student_id, mentor_id)

    def upsert_assignment(self, record: AssignmentRecord) -> AssignmentRecord:
        """Upsert the binding assignment keyed by student_id."""
        self.client.upsert_assignment(dict(record))
        return record
