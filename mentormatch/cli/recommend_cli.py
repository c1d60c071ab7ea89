"""
Recommendation commands.

    mentormatch recommend run <student_id> [--strategy advisory|binding]
                                           [--capacity N] [--top-k N]
                                           [--dry-run] [--verbose] [--json]
    mentormatch recommend show <student_id>

`run` calls get_or_generate_recommendations(): a student with a stored result
gets it back unchanged. `show` mirrors the API read path and prints saved
recommendations joined with mentor details, generating them first if needed.
"""

import json
from typing import Any, Dict, List, Optional

import typer

from mentormatch.logging_utils import log_verbose
from mentormatch.recommendation import RecommendationGenerator, build_strategy

from . import common

recommend_app = typer.Typer(help="Generate and inspect mentor recommendations for students.")


def _format_record(position: int, record: Dict[str, Any]) -> str:
    reason = record.get("reason") or ""
    return f"{position}. mentor {record['mentor_id']}  score={float(record['score']):.4f}  {reason}"


def _echo_records(records: List[Dict[str, Any]], as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps(records, indent=2, default=str))
        return

    if not records:
        typer.echo("No recommendations.")
        return

    for position, record in enumerate(records, start=1):
        typer.echo(_format_record(position, record))


@recommend_app.command("run")
def run_command(
    student_id: str = typer.Argument(..., help="Identifier of the student row."),
    strategy: Optional[str] = typer.Option(
        None,
        "--strategy",
        help="advisory (top-K list) or binding (one mentor, capacity checked). "
        "Defaults to MENTORMATCH_STRATEGY.",
    ),
    capacity: Optional[int] = typer.Option(
        None, "--capacity", min=1, help="Students per mentor in binding mode."
    ),
    top_k: Optional[int] = typer.Option(
        None, "--top-k", min=1, help="Recommendations kept in advisory mode."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Compute the result without writing to Supabase."
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show high-level progress logs."),
    as_json: bool = typer.Option(False, "--json", help="Print records as JSON."),
) -> None:
    """Return the stored result for a student, or generate and store it."""
    settings = common.load_settings()

    with common.exit_on_error():
        generator = RecommendationGenerator(
            client=common.build_supabase_client(settings, dry_run=dry_run),
            embedding_client=common.build_embedding_client(settings),
            strategy=build_strategy(
                strategy or settings.strategy,
                capacity=capacity or settings.mentor_capacity,
                top_k=top_k or settings.top_k,
            ),
        )
        log_verbose(
            f"Running {generator.strategy.name} recommendations for student {student_id}...",
            verbose,
        )

        records = generator.get_or_generate_recommendations(common.parse_record_id(student_id))

        report = generator.last_cache_report
        if report is None:
            log_verbose("Stored result found; nothing recomputed.", verbose)
        else:
            log_verbose(
                f"Mentor embeddings: {report.mentors_embedded} computed, "
                f"{report.mentors_cached} cached, {report.mentors_skipped} skipped.",
                verbose,
            )

    if dry_run:
        typer.echo("[dry-run] Supabase writes skipped.")

    _echo_records([dict(r) for r in records], as_json)


@recommend_app.command("show")
def show_command(
    student_id: str = typer.Argument(..., help="Identifier of the student row."),
    as_json: bool = typer.Option(False, "--json", help="Print rows as JSON."),
) -> None:
    """Show saved recommendations with mentor details, generating them if none exist."""
    settings = common.load_settings()

    with common.exit_on_error():
        generator = RecommendationGenerator(
            client=common.build_supabase_client(settings),
            embedding_client=common.build_embedding_client(settings),
            strategy=build_strategy(
                settings.strategy,
                capacity=settings.mentor_capacity,
                top_k=settings.top_k,
            ),
        )
        rows = generator.recommendations_view(common.parse_record_id(student_id))

    _echo_records(rows, as_json)
