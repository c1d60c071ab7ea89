"""
Tests for the lazy mentor embedding cache.

These tests verify:
    - a first pass embeds and persists every mentor with research areas
    - a second pass makes zero provider calls
    - mentors without tokens are skipped, never embedded
    - edited research areas invalidate the stored embedding
    - one mentor's failure does not undo the others
"""

import pytest

from mentormatch.errors import DimensionMismatchError, EmbeddingUnavailable
from mentormatch.mentor_cache import ensure_mentor_embeddings, needs_embedding
from mentormatch.profiles import embedding_source_hash, load_mentor_profile
from mentormatch.supabase_client import SupabaseClient
from tests.conftest import StubEmbeddingClient
from tests.fake_supabase import FakeSupabase


def mentor_rows(db: FakeSupabase):
    return {row["id"]: row for row in db.tables["mentor_details"]}


def test_first_pass_embeds_and_persists(fake_db, supabase_client, embedding_client) -> None:
    report = ensure_mentor_embeddings(supabase_client, embedding_client)

    assert report.mentors_processed == 4
    assert report.mentors_embedded == 3
    assert report.mentors_skipped == 1
    assert report.failures == []

    rows = mentor_rows(fake_db)
    assert rows[1]["embedding"] == [0.5, 0.5, 0.0]
    assert rows[1]["embedding_source"] == embedding_source_hash(["ML", "Robotics"])
    assert rows[4]["embedding"] == [0.8, 0.6, 0.0]
    assert rows[3]["embedding"] is None


def test_second_pass_makes_no_provider_calls(fake_db, supabase_client, embedding_client) -> None:
    ensure_mentor_embeddings(supabase_client, embedding_client)
    calls_after_first = embedding_client.calls
    writes_after_first = len(fake_db.writes)

    report = ensure_mentor_embeddings(supabase_client, embedding_client)

    assert embedding_client.calls == calls_after_first
    assert len(fake_db.writes) == writes_after_first
    assert report.mentors_cached == 3
    assert report.mentors_embedded == 0


def test_mentor_without_tokens_is_never_embedded(supabase_client, embedding_client) -> None:
    ensure_mentor_embeddings(supabase_client, embedding_client)

    assert len(embedding_client.requests) == 3
    assert ["ML", "Robotics"] in embedding_client.requests


def test_changed_research_areas_trigger_reembedding(embedding_client) -> None:
    db = FakeSupabase(
        tables={
            "mentor_details": [
                {
                    "id": 1,
                    "research_areas": "ML, Robotics",
                    "embedding": [1.0, 0.0, 0.0],
                    "embedding_source": embedding_source_hash(["ML"]),
                }
            ]
        }
    )

    report = ensure_mentor_embeddings(SupabaseClient(db), embedding_client)

    assert report.mentors_embedded == 1
    assert db.tables["mentor_details"][0]["embedding"] == [0.5, 0.5, 0.0]


def test_legacy_embedding_without_source_hash_is_trusted() -> None:
    mentor = load_mentor_profile(
        {"id": 1, "research_areas": "ML", "embedding": [1.0, 0.0], "embedding_source": None}
    )
    assert needs_embedding(mentor) is False


def test_failure_for_one_mentor_keeps_the_others(fake_db, supabase_client) -> None:
    embedding_client = StubEmbeddingClient(fail_tokens={"vision"})

    with pytest.raises(EmbeddingUnavailable) as excinfo:
        ensure_mentor_embeddings(supabase_client, embedding_client)

    report = excinfo.value.report
    assert [f["id"] for f in report.failures] == [2]
    assert report.mentors_embedded == 2

    rows = mentor_rows(fake_db)
    assert rows[1]["embedding"] is not None
    assert rows[4]["embedding"] is not None
    assert rows[2]["embedding"] is None


def test_store_failure_is_recorded_per_mentor(embedding_client) -> None:
    db = FakeSupabase(
        tables={"mentor_details": [{"id": 1, "research_areas": "ML", "embedding": None}]},
        fail_on={("update", "mentor_details")},
    )

    with pytest.raises(EmbeddingUnavailable) as excinfo:
        ensure_mentor_embeddings(SupabaseClient(db), embedding_client)

    assert excinfo.value.report.failures[0]["id"] == 1


def test_dimension_mismatch_aborts_immediately(supabase_client) -> None:
    embedding_client = StubEmbeddingClient(
        vectors={"ml": [1.0, 0.0], "robotics": [0.0, 1.0, 0.0], "vision": [1.0], "nlp": [1.0]}
    )

    with pytest.raises(DimensionMismatchError):
        ensure_mentor_embeddings(supabase_client, embedding_client)


def test_dry_run_keeps_vectors_on_report_only(fake_db, embedding_client) -> None:
    client = SupabaseClient(fake_db, dry_run=True)

    report = ensure_mentor_embeddings(client, embedding_client)

    assert fake_db.writes == []
    assert sorted(report.embedded) == [1, 2, 4]
    assert report.embedded[4]["embedding"] == [0.8, 0.6, 0.0]
    assert [w["table"] for w in client.skipped_writes] == ["mentor_details"] * 3


class BrokenEmbeddingClient:
    """An embedder with a bug in it, not a provider outage."""

    def embed(self, tokens):
        return {}["missing"]


def test_programming_errors_are_not_reported_as_unavailable(supabase_client) -> None:
    with pytest.raises(KeyError):
        ensure_mentor_embeddings(supabase_client, BrokenEmbeddingClient())


def test_mentor_with_cleared_areas_counts_as_skipped(embedding_client) -> None:
    db = FakeSupabase(
        tables={
            "mentor_details": [
                {
                    "id": 1,
                    "research_areas": "",
                    "embedding": [1.0, 0.0, 0.0],
                    "embedding_source": embedding_source_hash(["ML"]),
                }
            ]
        }
    )

    report = ensure_mentor_embeddings(SupabaseClient(db), embedding_client)

    assert report.mentors_skipped == 1
    assert report.mentors_cached == 0
    assert embedding_client.calls == 0
