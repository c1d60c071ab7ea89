"""
Supabase client wrapper for the recommendation engine.

This wrapper gives the rest of mentormatch a small, typed surface over the
Supabase Python SDK. Only the operations the engine needs are exposed:

    • select-by-id              (get_student, get_assignment)
    • select-all-with-filter    (list_mentors, list_embedded_mentors)
    • update-one-field          (update_mentor_embedding)
    • delete-by-key             (delete_recommendation)
    • upsert-with-conflict      (upsert_recommendations, upsert_assignment)
    • count-matching-filter     (count_assignments)

It supports two modes:

    • real mode: every call goes to the injected client.
    • dry-run mode: reads still go to the injected client, writes are
      skipped and the payload that would have been written is returned.
      This lets `mentormatch recommend run --dry-run` show real rankings
      without mutating the store.

The injected client only has to satisfy SupabaseClientInterface in
mentormatch/types.py: the real SDK and the in-memory test double both do.
"""

from typing import Any, Dict, List, Optional, TypeVar, cast

from mentormatch.errors import StoreError
from mentormatch.types import RecordId

T = TypeVar("T", bound=Dict[str, Any])

STUDENTS_TABLE = "student_details"
MENTORS_TABLE = "mentor_details"
RECOMMENDATIONS_TABLE = "recommendations"
ASSIGNMENTS_TABLE = "assigned_mentors"

RECOMMENDATION_CONFLICT_TARGET = "student_id,mentor_id"
ASSIGNMENT_CONFLICT_TARGET = "student_id"

# ---------------------------------------------------------------------------
# Helpers: normalize Supabase responses
# ---------------------------------------------------------------------------


def _extract_data(resp: Any) -> List[T]:
    """
    Normalize Supabase responses across real SDK objects and test doubles.

    Always returns a list of row dictionaries.
    Raises StoreError on any Supabase error.
    """
    # Dict-style response (test stubs)
    if isinstance(resp, dict):
        status = resp.get("status", 200)
        if status >= 400 or resp.get("error"):
            raise StoreError(f"Supabase error: {resp.get('error') or resp}")
        data = resp.get("data") or []
        return cast(List[T], data if isinstance(data, list) else [data])

    # SDK-style response
    error = getattr(resp, "error", None)
    if error:
        raise StoreError(f"Supabase error: {error}")

    data = getattr(resp, "data", None)
    if data is None:
        return []

    if isinstance(data, list):
        return cast(List[T], data)

    return cast(List[T], [data])


def _extract_count(resp: Any) -> int:
    """
    Read the exact row count from a `select(..., count="exact")` response.

    Falls back to the number of returned rows when the response carries no
    count (some test doubles, older SDK versions).
    """
    rows = _extract_data(resp)
    count = resp.get("count") if isinstance(resp, dict) else getattr(resp, "count", None)
    if count is None:
        return len(rows)
    return int(count)


# ---------------------------------------------------------------------------
# Main wrapper class
# ---------------------------------------------------------------------------


class SupabaseClient:
    """
    A thin, dependency-injected wrapper around a Supabase-compatible client.

    Parameters
    ----------
    client : Any
        A Supabase-compatible client (real SDK or test double).
    dry_run : bool
        If True, writes are skipped and their payloads are echoed back.
    """

    def __init__(self, client: Any = None, dry_run: bool = False) -> None:
        self.client = client
        self.dry_run = dry_run

        # Payloads skipped in dry-run mode, in call order, keyed by table.
        self.skipped_writes: List[Dict[str, Any]] = []

    @classmethod
    def from_settings(cls, settings: Any, dry_run: bool = False) -> "SupabaseClient":
        """
        Factory constructor for production usage.

        Creates the official SDK client from SUPABASE_URL / SUPABASE_KEY.
        """
        from supabase import create_client

        url, key = settings.require_supabase_credentials()
        return cls(create_client(url, key), dry_run=dry_run)

    def _require_client(self) -> Any:
        """Return the configured Supabase client or raise a RuntimeError."""
        if self.client is None:
            raise RuntimeError("Supabase client is not configured")
        return self.client

    def _skip_write(self, table: str, payload: Any) -> None:
        self.skipped_writes.append({"table": table, "payload": payload})

    # ------------------------------------------------------------------
    # Students
    # ------------------------------------------------------------------
    def get_student(self, student_id: RecordId) -> Optional[Dict[str, Any]]:
        """Return the `student_details` row for `student_id`, or None."""
        client = self._require_client()
        resp = client.table(STUDENTS_TABLE).select("*").eq("id", student_id).limit(1).execute()
        rows: List[Dict[str, Any]] = _extract_data(resp)
        return rows[0] if rows else None

    # ------------------------------------------------------------------
    # Mentors
    # ------------------------------------------------------------------
    def list_mentors(self) -> List[Dict[str, Any]]:
        """Return every `mentor_details` row."""
        client = self._require_client()
        resp = client.table(MENTORS_TABLE).select("*").execute()
        return _extract_data(resp)

    def list_embedded_mentors(self) -> List[Dict[str, Any]]:
        """Return mentor rows whose embedding column is not null."""
        client = self._require_client()
        resp = client.table(MENTORS_TABLE).select("*").not_.is_("embedding", "null").execute()
        return _extract_data(resp)

    def update_mentor_embedding(
        self,
        mentor_id: RecordId,
        embedding: List[float],
        embedding_source: Optional[str] = None,
    ) -> None:
        """
        Persist an embedding (and the hash of the tokens it came from) onto
        one mentor row.
        """
        payload: Dict[str, Any] = {"embedding": embedding}
        if embedding_source is not None:
            payload["embedding_source"] = embedding_source

        if self.dry_run:
            self._skip_write(MENTORS_TABLE, {"id": mentor_id, **payload})
            return

        client = self._require_client()
        resp = client.table(MENTORS_TABLE).update(payload).eq("id", mentor_id).execute()
        _extract_data(resp)

    # ------------------------------------------------------------------
    # Recommendations
    # ------------------------------------------------------------------
    def get_recommendations(self, student_id: RecordId) -> List[Dict[str, Any]]:
        """Return the stored recommendation rows for a student."""
        client = self._require_client()
        resp = client.table(RECOMMENDATIONS_TABLE).select("*").eq("student_id", student_id).execute()
        return _extract_data(resp)

    def get_saved_recommendations(self, student_id: RecordId) -> List[Dict[str, Any]]:
        """
        Return a student's recommendations joined with mentor details,
        highest score first.
        """
        client = self._require_client()
        resp = (
            client.table(RECOMMENDATIONS_TABLE)
            .select(f"*, {MENTORS_TABLE}(*)")
            .eq("student_id", student_id)
            .order("score", desc=True)
            .execute()
        )
        return _extract_data(resp)

    def upsert_recommendations(self, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Upsert recommendation rows. Idempotent on (student_id, mentor_id).
        """
        if not records:
            return []

        if self.dry_run:
            self._skip_write(RECOMMENDATIONS_TABLE, records)
            return list(records)

        client = self._require_client()
        resp = (
            client.table(RECOMMENDATIONS_TABLE)
            .upsert(records, on_conflict=RECOMMENDATION_CONFLICT_TARGET)
            .execute()
        )
        return _extract_data(resp)

    def delete_recommendation(self, student_id: RecordId, mentor_id: RecordId) -> None:
        """Delete the recommendation row for one (student_id, mentor_id) pair."""
        if self.dry_run:
            self._skip_write(
                RECOMMENDATIONS_TABLE, {"delete": {"student_id": student_id, "mentor_id": mentor_id}}
            )
            return

        client = self._require_client()
        resp = (
            client.table(RECOMMENDATIONS_TABLE)
            .delete()
            .eq("student_id", student_id)
            .eq("mentor_id", mentor_id)
            .execute()
        )
        _extract_data(resp)

    # ------------------------------------------------------------------
    # Assignments
    # ------------------------------------------------------------------
    def get_assignment(self, student_id: RecordId) -> Optional[Dict[str, Any]]:
        """Return the binding assignment row for a student, or None."""
        client = self._require_client()
        resp = (
            client.table(ASSIGNMENTS_TABLE)
            .select("*")
            .eq("student_id", student_id)
            .limit(1)
            .execute()
        )
        rows: List[Dict[str, Any]] = _extract_data(resp)
        return rows[0] if rows else None

    def count_assignments(self, mentor_id: RecordId) -> int:
        """Return how many students are bound to `mentor_id`."""
        client = self._require_client()
        resp = (
            client.table(ASSIGNMENTS_TABLE)
            .select("student_id", count="exact")
            .eq("mentor_id", mentor_id)
            .execute()
        )
        return _extract_count(resp)

    def get_assigned_students(self, mentor_id: RecordId) -> List[Dict[str, Any]]:
        """Return the assignment rows that reference `mentor_id`."""
        client = self._require_client()
        resp = (
            client.table(ASSIGNMENTS_TABLE)
            .select("student_id, score")
            .eq("mentor_id", mentor_id)
            .execute()
        )
        return _extract_data(resp)

    def list_assignments(self) -> List[Dict[str, Any]]:
        """Return every assignment row."""
        client = self._require_client()
        resp = client.table(ASSIGNMENTS_TABLE).select("*").execute()
        return _extract_data(resp)

    def upsert_assignment(self, record: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Upsert one assignment row. Idempotent on student_id alone, so a
        student is bound to at most one mentor.
        """
        if self.dry_run:
            self._skip_write(ASSIGNMENTS_TABLE, record)
            return [record]

        client = self._require_client()
        resp = (
            client.table(ASSIGNMENTS_TABLE)
            .upsert(record, on_conflict=ASSIGNMENT_CONFLICT_TARGET)
            .execute()
        )
        return _extract_data(resp)
