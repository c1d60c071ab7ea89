"""
Root entrypoint for the mentormatch CLI.

This module defines the top-level `mentormatch` command and mounts the
sub-apps from mentormatch/cli/:

    • recommend_cli.py    →  `mentormatch recommend ...`
    • mentors_cli.py      →  `mentormatch mentors ...`
    • assignments_cli.py  →  `mentormatch assignments ...`
"""

from dotenv import load_dotenv
import typer

from mentormatch.logging_utils import configure_logging

from .assignments_cli import assignments_app
from .mentors_cli import mentors_app
from .recommend_cli import recommend_app

# Load environment variables
load_dotenv()

cli = typer.Typer(
    help=(
        "mentormatch command-line interface.\n\n"
        "Match students to mentors by semantic similarity between student "
        "skills/interests and mentor research areas.\n\n"
        "  Fill the mentor embedding cache:\n"
        "      mentormatch mentors embed\n\n"
        "  Recommend or assign mentors for a student:\n"
        "      mentormatch recommend run <student_id> --strategy binding"
    )
)


@cli.callback()
def main() -> None:
    """Configure logging before any sub-command runs."""
    configure_logging()


cli.add_typer(recommend_app, name="recommend")
cli.add_typer(mentors_app, name="mentors")
cli.add_typer(assignments_app, name="assignments")

if __name__ == "__main__":
    cli()
