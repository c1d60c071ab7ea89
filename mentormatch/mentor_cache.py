"""
Lazy mentor embedding cache.

Mentor embeddings are computed from research-area tokens the first time they
are needed and persisted back onto the `mentor_details` row. Later passes
find the embedding in place and make no provider calls.

Each mentor is an independent unit: one mentor's embedding failure is
recorded and the loop moves on, so mentors that were already embedded (in
this pass or earlier) keep their embedding. Only after the whole pass does
the cache raise EmbeddingUnavailable, which lets the generator abort before
it writes anything.

Staleness: the SHA-256 of the normalized tokens is stored in
`embedding_source`. When a mentor's research areas change, the stored hash
no longer matches and the embedding is recomputed. Rows embedded before the
hash existed (embedding present, embedding_source null) are trusted.
"""

import logging
from typing import Any, Dict, List, Optional

from mentormatch.errors import EmbeddingUnavailable, StoreError
from mentormatch.profiles import embedding_source_hash, load_mentor_profile
from mentormatch.supabase_client import SupabaseClient
from mentormatch.types import EmbeddingProvider, MentorProfile

logger = logging.getLogger(__name__)


# ============================================================================
# CACHE FILL REPORT
# ============================================================================
class CacheFillReport:
    """
    Counters for one cache-fill pass.

    The CLI prints it; tests assert on it; EmbeddingUnavailable carries it
    when a pass ends with failures.
    """

    def __init__(self) -> None:
        # Mentors examined
        self.mentors_processed = 0

        # Mentors embedded in this pass (first time or stale)
        self.mentors_embedded = 0

        # Mentors that already had a fresh embedding
        self.mentors_cached = 0

        # Mentors without usable tokens; they are never ranked
        self.mentors_skipped = 0

        # Per-mentor failures; the pass continues past them
        self.failures: List[Dict[str, Any]] = []

        # Profiles embedded in this pass, carrying their new vectors. In
        # dry-run mode these never reach the store, so readers use them.
        self.embedded: Dict[Any, MentorProfile] = {}

    def to_summary_dict(self) -> Dict[str, Any]:
        return {
            "mentors_processed": self.mentors_processed,
            "mentors_embedded": self.mentors_embedded,
            "mentors_cached": self.mentors_cached,
            "mentors_skipped": self.mentors_skipped,
            "failures": self.failures,
        }


def needs_embedding(mentor: MentorProfile) -> bool:
    """
    Decide whether a mentor must be (re-)embedded.

        • no usable tokens            → False (nothing to embed)
        • no embedding yet            → True
        • stored hash != token hash   → True (research areas changed)
        • otherwise                   → False
    """
    if not mentor["research_areas"]:
        return False

    if mentor["embedding"] is None:
        return True

    stored = mentor["embedding_source"]
    if stored is None:
        return False

    return stored != embedding_source_hash(mentor["research_areas"])


# ============================================================================
# CACHE FILL
# ============================================================================
def ensure_mentor_embeddings(
    client: SupabaseClient,
    embedding_client: EmbeddingProvider,
    mentors: Optional[List[Dict[str, Any]]] = None,
) -> CacheFillReport:
    """
    Make sure every mentor with research areas has a persisted embedding.

    Parameters
    ----------
    client : SupabaseClient
        Store used to read mentors (when `mentors` is None) and persist
        embeddings.
    embedding_client : EmbeddingProvider
        Turns research-area tokens into a pooled vector.
    mentors : list[dict] | None
        Raw `mentor_details` rows. Fetched from the store when omitted.

    Returns
    -------
    CacheFillReport

    Raises
    ------
    EmbeddingUnavailable
        After the full pass, if any mentor could not be embedded or
        persisted. Successful mentors stay persisted.
    DimensionMismatchError
        Immediately; the provider is misconfigured. Any other exception also
        propagates at once.
    """
    report = CacheFillReport()

    rows = mentors if mentors is not None else client.list_mentors()

    for row in rows:
        report.mentors_processed += 1
        mentor = load_mentor_profile(row)

        if not needs_embedding(mentor):
            if mentor["embedding"] is None or not mentor["research_areas"]:
                report.mentors_skipped += 1
            else:
                report.mentors_cached += 1
            continue

        try:
            tokens = mentor["research_areas"]
            embedding = embedding_client.embed(tokens)
            if embedding is None:
                report.mentors_skipped += 1
                continue

            source = embedding_source_hash(tokens)
            client.update_mentor_embedding(mentor["id"], embedding, embedding_source=source)
            report.mentors_embedded += 1
            report.embedded[mentor["id"]] = {
                **mentor,
                "embedding": embedding,
                "embedding_source": source,
            }

        except (EmbeddingUnavailable, StoreError) as e:
            # Non-fatal per mentor: record it and continue with the rest.
            logger.warning("Embedding mentor %s failed: %s", mentor["id"], e)
            report.failures.append({"id": mentor["id"], "error": str(e)})

    if report.failures:
        raise EmbeddingUnavailable(
            f"{len(report.failures)} mentor embedding(s) could not be computed",
            report=report,
        )

    return report
