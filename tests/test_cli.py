"""
CLI tests.

Each test swaps the client factories in mentormatch.cli.common for the
in-memory FakeSupabase and StubEmbeddingClient, then drives the Typer app
through CliRunner.
"""

import json

import pytest

from mentormatch.cli import common
from mentormatch.cli.main import cli
from mentormatch.supabase_client import SupabaseClient
from tests.conftest import StubEmbeddingClient


@pytest.fixture
def wired(monkeypatch, fake_db, embedding_client):
    """Route every CLI command to the in-memory store and stub embedder."""
    for name in ("MENTORMATCH_STRATEGY", "MENTORMATCH_MENTOR_CAPACITY", "MENTORMATCH_TOP_K"):
        monkeypatch.delenv(name, raising=False)

    monkeypatch.setattr(
        common,
        "build_supabase_client",
        lambda settings, dry_run=False: SupabaseClient(fake_db, dry_run=dry_run),
    )
    monkeypatch.setattr(common, "build_embedding_client", lambda settings: embedding_client)
    return fake_db


def test_recommend_run_prints_ranking(cli_runner, wired) -> None:
    result = cli_runner.invoke(cli, ["recommend", "run", "1"])

    assert result.exit_code == 0, result.output
    lines = result.output.strip().splitlines()
    assert lines[0].startswith("1. mentor 4  score=0.9487  Matched areas: nlp")
    assert lines[1].startswith("2. mentor 1  score=0.8944  Matched areas: ml")
    assert len(wired.tables["recommendations"]) == 3


def test_recommend_run_json(cli_runner, wired) -> None:
    result = cli_runner.invoke(cli, ["recommend", "run", "1", "--json", "--top-k", "1"])

    assert result.exit_code == 0, result.output
    records = json.loads(result.output)
    assert [r["mentor_id"] for r in records] == [4]


def test_recommend_run_dry_run_writes_nothing(cli_runner, wired) -> None:
    result = cli_runner.invoke(cli, ["recommend", "run", "1", "--dry-run"])

    assert result.exit_code == 0, result.output
    assert "[dry-run] Supabase writes skipped." in result.output
    assert wired.writes == []


def test_recommend_run_binding(cli_runner, wired) -> None:
    result = cli_runner.invoke(cli, ["recommend", "run", "1", "--strategy", "binding"])

    assert result.exit_code == 0, result.output
    assert wired.tables["assigned_mentors"][0]["mentor_id"] == 4


def test_insufficient_profile_exit_code(cli_runner, wired) -> None:
    result = cli_runner.invoke(cli, ["recommend", "run", "2"])

    assert result.exit_code == common.EXIT_INSUFFICIENT_PROFILE
    assert "Error:" in result.output


def test_unknown_student_exit_code(cli_runner, wired) -> None:
    result = cli_runner.invoke(cli, ["recommend", "run", "99"])
    assert result.exit_code == common.EXIT_NOT_FOUND


def test_embedding_unavailable_exit_code(cli_runner, wired, monkeypatch) -> None:
    failing = StubEmbeddingClient(fail_tokens={"vision"})
    monkeypatch.setattr(common, "build_embedding_client", lambda settings: failing)

    result = cli_runner.invoke(cli, ["recommend", "run", "1"])

    assert result.exit_code == common.EXIT_EMBEDDING_UNAVAILABLE
    assert wired.tables["recommendations"] == []


def test_no_capacity_exit_code(cli_runner, wired) -> None:
    wired.tables["mentor_details"] = [{"id": 1, "research_areas": "ML", "embedding": None}]
    wired.tables["assigned_mentors"] = [{"student_id": 50, "mentor_id": 1, "score": 1.0}]

    result = cli_runner.invoke(
        cli, ["recommend", "run", "1", "--strategy", "binding", "--capacity", "1"]
    )

    assert result.exit_code == common.EXIT_NO_CAPACITY


def test_invalid_configuration_exit_code(cli_runner, wired, monkeypatch) -> None:
    monkeypatch.setenv("MENTORMATCH_STRATEGY", "greedy")

    result = cli_runner.invoke(cli, ["recommend", "run", "1"])

    assert result.exit_code == common.EXIT_CONFIGURATION


def test_recommend_show_includes_saved_rows(cli_runner, wired) -> None:
    result = cli_runner.invoke(cli, ["recommend", "show", "1", "--json"])

    assert result.exit_code == 0, result.output
    rows = json.loads(result.output)
    assert rows[0]["mentor_details"]["id"] == 4


def test_mentors_embed_prints_summary(cli_runner, wired) -> None:
    result = cli_runner.invoke(cli, ["mentors", "embed"])

    assert result.exit_code == 0, result.output
    assert "=== Mentor Embedding Summary ===" in result.output
    assert "mentors_embedded: 3" in result.output
    assert "mentors_skipped: 1" in result.output


def test_mentors_embed_failure_prints_report(cli_runner, wired, monkeypatch) -> None:
    failing = StubEmbeddingClient(fail_tokens={"vision"})
    monkeypatch.setattr(common, "build_embedding_client", lambda settings: failing)

    result = cli_runner.invoke(cli, ["mentors", "embed"])

    assert result.exit_code == common.EXIT_EMBEDDING_UNAVAILABLE
    assert "mentors_embedded: 2" in result.output
    assert "mentor 2:" in result.output


def test_assignments_list(cli_runner, wired) -> None:
    wired.tables["assigned_mentors"] = [
        {"student_id": 1, "mentor_id": 4, "score": 0.5},
        {"student_id": 2, "mentor_id": 4, "score": 0.9},
    ]

    result = cli_runner.invoke(cli, ["assignments", "list", "4"])

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == [
        "student 2  score=0.9000",
        "student 1  score=0.5000",
    ]


def test_assignments_reconcile(cli_runner, wired) -> None:
    result = cli_runner.invoke(cli, ["assignments", "reconcile", "--capacity", "1"])
    assert result.exit_code == 0
    assert "All mentors within capacity (1)." in result.output

    wired.tables["assigned_mentors"] = [
        {"student_id": 1, "mentor_id": 4, "score": 0.5},
        {"student_id": 2, "mentor_id": 4, "score": 0.9},
    ]

    result = cli_runner.invoke(cli, ["assignments", "reconcile", "--capacity", "1"])

    assert result.exit_code == 1
    assert "mentor 4: 2 assigned (capacity 1, excess 1): 1, 2" in result.output
