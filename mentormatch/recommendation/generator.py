# ------------------------------------------------------------
# Recommendation generator
# ------------------------------------------------------------
"""
High-level orchestrator for mentor recommendations.

This module defines the canonical pipeline that turns one student id into
either an advisory top-K list or a binding mentor assignment. It is linear
and explicit so that tests can assert on sequencing and write counts:

    1. cache check          → return the stored result unchanged
    2. mentor embeddings    → fill missing/stale ones (may raise)
    3. student vector       → keyword set → one pooled embedding
    4. scoring + ranking    → ranking.rank_mentors
    5. strategy             → persist and return

Nothing is written before step 5, so every failure in steps 2 to 4 leaves the
recommendation and assignment tables untouched.

The generator does not perform:
    • embedding HTTP calls (delegated to EmbeddingClient)
    • persistence (delegated to AssignmentStore / SupabaseClient)
    • capacity policy (delegated to the strategy)
"""

import logging
from typing import Any, Dict, List, Optional

from mentormatch.embedding import EmbeddingClient
from mentormatch.errors import InsufficientProfileData, StudentNotFoundError
from mentormatch.mentor_cache import CacheFillReport, ensure_mentor_embeddings
from mentormatch.profiles import load_mentor_profile, load_student_profile
from mentormatch.store import AssignmentStore
from mentormatch.supabase_client import SupabaseClient
from mentormatch.types import (
    EmbeddingProvider,
    MentorProfile,
    RecommendationRecord,
    RecordId,
    ScoredMentor,
)

from .ranking import rank_mentors
from .strategies import AssignmentStrategy, build_strategy

logger = logging.getLogger(__name__)


class RecommendationGenerator:
    """
    Generate, persist and serve recommendations for one student at a time.

    Parameters
    ----------
    client : SupabaseClient
        Store wrapper used for profile reads and result writes.
    embedding_client : EmbeddingProvider
        Produces pooled vectors for students and mentors.
    strategy : AssignmentStrategy
        AdvisoryRanking or CapacityConstrainedAssignment.
    """

    def __init__(
        self,
        client: SupabaseClient,
        embedding_client: EmbeddingProvider,
        strategy: AssignmentStrategy,
    ) -> None:
        self.client = client
        self.embedding_client = embedding_client
        self.strategy = strategy
        self.store = AssignmentStore(client)

        # Report of the most recent cache fill, for CLI summaries.
        self.last_cache_report: Optional[CacheFillReport] = None

    @classmethod
    def from_settings(
        cls,
        settings: Any,
        dry_run: bool = False,
        strategy: Optional[str] = None,
        capacity: Optional[int] = None,
        top_k: Optional[int] = None,
    ) -> "RecommendationGenerator":
        """
        Build a generator from mentormatch.config.Settings.

        Keyword overrides take precedence over the environment.
        """
        return cls(
            client=SupabaseClient.from_settings(settings, dry_run=dry_run),
            embedding_client=EmbeddingClient.from_settings(settings),
            strategy=build_strategy(
                strategy or settings.strategy,
                capacity=capacity or settings.mentor_capacity,
                top_k=top_k or settings.top_k,
            ),
        )

    # ------------------------------------------------------------------
    # Caller-facing operation
    # ------------------------------------------------------------------
    def get_or_generate_recommendations(self, student_id: RecordId) -> List[RecommendationRecord]:
        """
        Return the student's result, generating it at most once.

        Raises
        ------
        EmbeddingUnavailable
            The embedding provider failed for a mentor or the student.
        StudentNotFoundError
            No student row exists.
        InsufficientProfileData
            The student has no skills or interests.
        NoCapacityAvailable
            Binding strategy only: every ranked mentor is full.
        """
        cached = self.strategy.cached(self.store, student_id)
        if cached is not None:
            logger.info("Returning stored %s result for student %s", self.strategy.name, student_id)
            return cached

        ranking = self.rank(student_id)
        result = self.strategy.apply(self.store, student_id, ranking)

        logger.info(
            "Generated %d %s recommendation(s) for student %s",
            len(result),
            self.strategy.name,
            student_id,
        )
        return result

    def recommendations_view(self, student_id: RecordId) -> List[Dict[str, Any]]:
        """
        Read path used by API callers: saved recommendations joined with
        mentor details, generating them first when none are stored.
        """
        saved = self.client.get_saved_recommendations(student_id)
        if saved:
            return saved

        self.get_or_generate_recommendations(student_id)
        return self.client.get_saved_recommendations(student_id)

    # ------------------------------------------------------------------
    # Pipeline stages
    # ------------------------------------------------------------------
    def rank(self, student_id: RecordId) -> List[ScoredMentor]:
        """
        Run stages 2 to 4 without consulting or writing any stored result.
        """
        report = ensure_mentor_embeddings(self.client, self.embedding_client)
        self.last_cache_report = report

        row = self.client.get_student(student_id)
        if row is None:
            raise StudentNotFoundError(f"Student {student_id} not found")

        student = load_student_profile(row)
        if not student["keywords"]:
            raise InsufficientProfileData(
                f"Student {student_id} has no skills or interests to match on"
            )

        student_vector = self.embedding_client.embed(student["keywords"])
        if student_vector is None:
            raise InsufficientProfileData(
                f"Student {student_id} has no skills or interests to match on"
            )
        if not any(student_vector):
            raise InsufficientProfileData(
                f"Student {student_id}'s skills and interests embed to a zero vector"
            )

        mentors = self._embedded_mentors(report)
        return rank_mentors(student["keywords"], student_vector, mentors)

    def _embedded_mentors(self, report: CacheFillReport) -> List[MentorProfile]:
        """
        Mentors with an embedding and at least one research area, preferring
        vectors computed in this pass. A mentor whose research areas were
        cleared keeps its stored embedding but is no longer ranked.

        In dry-run mode fresh vectors are never written, so they only exist
        on the report.
        """
        mentors: Dict[Any, MentorProfile] = {}
        for row in self.client.list_embedded_mentors():
            profile = load_mentor_profile(row)
            mentors[profile["id"]] = profile

        mentors.update(report.embedded)
        return [
            m for m in mentors.values() if m["embedding"] is not None and m["research_areas"]
        ]
