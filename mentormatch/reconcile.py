"""
Capacity reconciliation for binding assignments.

In-process requests are serialized around the capacity check, but two
processes can still both bind a student to a mentor's last seat. This module
finds mentors whose assignment count exceeds the configured capacity so an
operator can rebalance them.
"""

from collections import defaultdict
from typing import Any, Dict, List

from mentormatch.profiles import mentor_sort_key
from mentormatch.supabase_client import SupabaseClient


def find_over_capacity(client: SupabaseClient, capacity: int) -> List[Dict[str, Any]]:
    """
    List mentors bound to more than `capacity` students.

    Returns
    -------
    list[dict]
        One entry per over-capacity mentor, ordered by mentor id:
        {"mentor_id", "assigned", "capacity", "excess", "students"}.
        Students are listed lowest score first, so the head of the list is
        the natural set to move elsewhere.
    """
    by_mentor: Dict[Any, List[Dict[str, Any]]] = defaultdict(list)
    for row in client.list_assignments():
        by_mentor[row["mentor_id"]].append(row)

    report = []
    for mentor_id in sorted(by_mentor, key=mentor_sort_key):
        rows = by_mentor[mentor_id]
        if len(rows) <= capacity:
            continue
        rows.sort(key=lambda r: float(r.get("score") or 0.0))
        report.append(
            {
                "mentor_id": mentor_id,
                "assigned": len(rows),
                "capacity": capacity,
                "excess": len(rows) - capacity,
                "students": [r["student_id"] for r in rows],
            }
        )
    return report
