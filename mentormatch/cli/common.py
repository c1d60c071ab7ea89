"""
Shared helpers for the mentormatch CLI sub-applications.

Dependency creation lives here so every command builds its clients the same
way, and so tests can monkeypatch `build_supabase_client` /
`build_embedding_client` with in-memory doubles.
"""

from contextlib import contextmanager
from typing import Iterator

import typer

from mentormatch.config import Settings
from mentormatch.embedding import EmbeddingClient
from mentormatch.errors import (
    ConfigurationError,
    EmbeddingUnavailable,
    InsufficientProfileData,
    MentorMatchError,
    NoCapacityAvailable,
    StoreError,
    StudentNotFoundError,
)
from mentormatch.supabase_client import SupabaseClient
from mentormatch.types import RecordId

# Distinct exit codes so scripts can tell failures apart.
EXIT_INSUFFICIENT_PROFILE = 2
EXIT_EMBEDDING_UNAVAILABLE = 3
EXIT_NOT_FOUND = 4
EXIT_NO_CAPACITY = 5
EXIT_STORE_ERROR = 6
EXIT_CONFIGURATION = 7

_EXIT_CODES = [
    (InsufficientProfileData, EXIT_INSUFFICIENT_PROFILE),
    (EmbeddingUnavailable, EXIT_EMBEDDING_UNAVAILABLE),
    (StudentNotFoundError, EXIT_NOT_FOUND),
    (NoCapacityAvailable, EXIT_NO_CAPACITY),
    (StoreError, EXIT_STORE_ERROR),
    (ConfigurationError, EXIT_CONFIGURATION),
]


def parse_record_id(value: str) -> RecordId:
    """Treat purely numeric ids as integers, anything else (UUIDs) as strings."""
    text = value.strip()
    return int(text) if text.isdigit() else text


def load_settings() -> Settings:
    try:
        return Settings.from_env()
    except ConfigurationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=EXIT_CONFIGURATION)


def build_supabase_client(settings: Settings, dry_run: bool = False) -> SupabaseClient:
    return SupabaseClient.from_settings(settings, dry_run=dry_run)


def build_embedding_client(settings: Settings) -> EmbeddingClient:
    return EmbeddingClient.from_settings(settings)


@contextmanager
def exit_on_error() -> Iterator[None]:
    """
    Turn domain errors into a one-line message and a distinct exit code.

    Errors outside the MentorMatchError hierarchy are left to propagate.
    """
    try:
        yield
    except MentorMatchError as e:
        code = 1
        for error_type, exit_code in _EXIT_CODES:
            if isinstance(e, error_type):
                code = exit_code
                break
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=code)
