"""
logging_utils.py

Logging helpers shared by the CLI and the recommendation engine.

Two channels are kept apart:

    • log_verbose() prints short, plain-English progress lines for CLI users
      through Typer, only when --verbose is set.
    • configure_logging() sets up the standard library logger that library
      modules write to via logging.getLogger(__name__). Warnings such as a
      degenerate mentor vector go there, whether or not a CLI is attached.
"""

import logging
import sys

import typer

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def log_verbose(message: str, verbose: bool) -> None:
    """
    Print a high-level progress message when verbose mode is enabled.

    Parameters
    ----------
    message : str
        Human-readable message (e.g., "Embedding student keywords...").
    verbose : bool
        Whether verbose mode is active. When False, this function does nothing.
    """
    if verbose:
        typer.echo(message)


def configure_logging(level: int = logging.INFO) -> None:
    """
    Configure the root logger once for CLI runs.

    httpx logs every request at INFO; it is lowered to WARNING so provider
    calls do not drown the recommendation output.
    """
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
