"""
Mentor commands.

    mentormatch mentors embed [--dry-run] [--verbose]

Fills the mentor embedding cache ahead of time, so the first recommendation
request does not pay for every mentor's embedding.
"""

import typer

from mentormatch.errors import EmbeddingUnavailable
from mentormatch.logging_utils import log_verbose
from mentormatch.mentor_cache import CacheFillReport, ensure_mentor_embeddings

from . import common

mentors_app = typer.Typer(help="Maintain mentor embeddings.")


def _echo_report(report: CacheFillReport) -> None:
    typer.echo("\n=== Mentor Embedding Summary ===")
    for key, value in report.to_summary_dict().items():
        if key == "failures":
            typer.echo(f"{key}: {len(value)}")
            for failure in value:
                typer.echo(f"  - mentor {failure['id']}: {failure['error']}")
        else:
            typer.echo(f"{key}: {value}")


@mentors_app.command("embed")
def embed_command(
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Compute embeddings without writing them to Supabase."
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show high-level progress logs."),
) -> None:
    """Compute and store embeddings for mentors that lack one or whose areas changed."""
    settings = common.load_settings()

    with common.exit_on_error():
        client = common.build_supabase_client(settings, dry_run=dry_run)
        embedding_client = common.build_embedding_client(settings)

        log_verbose("Loading mentors...", verbose)
        try:
            report = ensure_mentor_embeddings(client, embedding_client)
        except EmbeddingUnavailable as e:
            if e.report is not None:
                _echo_report(e.report)
            raise

    _echo_report(report)
    log_verbose(f"Provider calls: {embedding_client.calls}", verbose)
