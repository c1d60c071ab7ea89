"""
Binding assignment commands.

    mentormatch assignments list <mentor_id>
    mentormatch assignments reconcile [--capacity N]

`reconcile` exits with code 1 when some mentor is over capacity, so it can
run as a scheduled check.
"""

from typing import Optional

import typer

from mentormatch.reconcile import find_over_capacity

from . import common

assignments_app = typer.Typer(help="Inspect binding mentor assignments.")


@assignments_app.command("list")
def list_command(
    mentor_id: str = typer.Argument(..., help="Identifier of the mentor row."),
) -> None:
    """List the students bound to a mentor, highest score first."""
    settings = common.load_settings()

    with common.exit_on_error():
        client = common.build_supabase_client(settings)
        rows = client.get_assigned_students(common.parse_record_id(mentor_id))

    if not rows:
        typer.echo("No students assigned.")
        return

    rows.sort(key=lambda r: float(r.get("score") or 0.0), reverse=True)
    for row in rows:
        typer.echo(f"student {row['student_id']}  score={float(row.get('score') or 0.0):.4f}")


@assignments_app.command("reconcile")
def reconcile_command(
    capacity: Optional[int] = typer.Option(
        None, "--capacity", min=1, help="Capacity to check against. Defaults to config."
    ),
) -> None:
    """Report mentors bound to more students than the capacity allows."""
    settings = common.load_settings()
    limit = capacity or settings.mentor_capacity

    with common.exit_on_error():
        client = common.build_supabase_client(settings)
        over = find_over_capacity(client, limit)

    if not over:
        typer.echo(f"All mentors within capacity ({limit}).")
        return

    for entry in over:
        students = ", ".join(str(s) for s in entry["students"])
        typer.echo(
            f"mentor {entry['mentor_id']}: {entry['assigned']} assigned "
            f"(capacity {entry['capacity']}, excess {entry['excess']}): {students}"
        )
    raise typer.Exit(code=1)
