"""
mentormatch/types.py

Centralized type definitions for mentormatch.

This module defines the TypedDicts and Protocols shared by the embedding
layer, the Supabase client wrapper, the recommendation engine and the test
doubles. Keeping them in one place gives:

    • a single source of truth for row shapes stored in Supabase
    • clear contracts between the CLI, the generator and the store
    • easy mocking and dependency injection in tests

When a table changes in Supabase, this file should be updated first.
"""

from typing import Any, List, Optional, Protocol, TypedDict, Union

# Supabase rows use integer or UUID primary keys depending on the table.
RecordId = Union[int, str]

EmbeddingVector = List[float]


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------
# Profiles are the normalized, read-once snapshots built from raw rows by
# mentormatch.profiles. Every token field is already an ordered list of
# trimmed, non-empty strings; nothing downstream branches on whether the
# column was stored as an array or as a comma-joined string.
# ---------------------------------------------------------------------------
class StudentProfile(TypedDict):
    id: RecordId
    skills: List[str]
    interests: List[str]
    keywords: List[str]


class MentorProfile(TypedDict):
    id: RecordId
    research_areas: List[str]
    embedding: Optional[EmbeddingVector]
    embedding_source: Optional[str]


# ---------------------------------------------------------------------------
# Persisted results
# ---------------------------------------------------------------------------
# RecommendationRecord is unique per (student_id, mentor_id).
# AssignmentRecord is unique per student_id.
#
# total=False on RecommendationRecord lets the cache path return rows that
# were written before created_at existed.
# ---------------------------------------------------------------------------
class RecommendationRecord(TypedDict, total=False):
    student_id: RecordId
    mentor_id: RecordId
    score: float
    reason: Optional[str]
    created_at: str


class AssignmentRecord(TypedDict):
    student_id: RecordId
    mentor_id: RecordId
    score: float


class ScoredMentor(TypedDict):
    mentor: MentorProfile
    score: float
    reason: str


# ---------------------------------------------------------------------------
# SupabaseExecuteResponse
# ---------------------------------------------------------------------------
# Normalized shape of `.execute()` responses. The real SDK returns an object
# with `.data`, `.count` and sometimes `.error`; the test doubles return
# objects with the same attributes.
# ---------------------------------------------------------------------------
class SupabaseExecuteResponse(TypedDict, total=False):
    status: int
    data: Any
    count: Optional[int]
    error: Optional[Any]


# ---------------------------------------------------------------------------
# SupabaseClientInterface
# ---------------------------------------------------------------------------
# Structural protocol for the subset of the Supabase SDK that
# mentormatch.supabase_client.SupabaseClient relies on:
#
#   client.table("mentor_details").select("*").eq("id", 1).execute()
#   client.table("recommendations").upsert([...], on_conflict="...").execute()
#
# The real SDK, tests.fake_supabase.FakeSupabase and FailingSupabase all
# satisfy it.
# ---------------------------------------------------------------------------
class SupabaseClientInterface(Protocol):
    def table(self, name: str) -> Any:
        """
        Return a query builder for the given table.
        The builder must support select/eq/is_/order/update/upsert/execute.
        """
        ...


# ---------------------------------------------------------------------------
# EmbeddingProvider
# ---------------------------------------------------------------------------
# Anything that can turn ordered tokens into one pooled vector. Implemented
# by mentormatch.embedding.EmbeddingClient and by test stubs.
# ---------------------------------------------------------------------------
class EmbeddingProvider(Protocol):
    def embed(self, tokens: List[str]) -> Optional[EmbeddingVector]: ...
