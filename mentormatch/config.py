# mentormatch/config.py

"""
Environment-driven configuration.

Values are loaded from the process environment after python-dotenv has read
the local `.env` file. The defaults describe a local development setup: an
embedding service on localhost:8000 and the advisory strategy.
"""

import os
from typing import Optional

from dotenv import load_dotenv

from mentormatch.errors import ConfigurationError

# Load environment variables from the .env file into the system environment
load_dotenv()

STRATEGIES = ("advisory", "binding")
EMBEDDING_PROVIDERS = ("http", "deterministic")

DEFAULT_EMBEDDING_API_URL = "http://localhost:8000"
DEFAULT_MENTOR_CAPACITY = 3
DEFAULT_TOP_K = 5


def _get_int(name: str, default: int, minimum: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e
    if value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}")
    return value


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")
    return value


def _get_choice(name: str, default: str, choices: tuple) -> str:
    value = (os.getenv(name) or default).strip().lower()
    if value not in choices:
        raise ConfigurationError(f"{name} must be one of {', '.join(choices)}, got {value!r}")
    return value


class Settings:
    """
    Resolved configuration for one process.

    Parameters
    ----------
    supabase_url, supabase_key : str | None
        Supabase credentials. Only required for commands that talk to the store.
    embedding_api_url : str
        Base URL of the embedding service (`POST {url}/embedding`).
    embedding_provider : str
        "http" for the real service, "deterministic" for offline runs.
    embedding_timeout : float
        Per-request timeout in seconds.
    embedding_max_attempts : int
        Attempts for transport-level failures before giving up.
    strategy : str
        "advisory" (top-K list) or "binding" (one mentor, capacity checked).
    mentor_capacity : int
        Maximum students bound to one mentor in binding mode.
    top_k : int
        Number of recommendations kept in advisory mode.
    """

    def __init__(
        self,
        supabase_url: Optional[str] = None,
        supabase_key: Optional[str] = None,
        embedding_api_url: str = DEFAULT_EMBEDDING_API_URL,
        embedding_provider: str = "http",
        embedding_timeout: float = 10.0,
        embedding_max_attempts: int = 3,
        strategy: str = "advisory",
        mentor_capacity: int = DEFAULT_MENTOR_CAPACITY,
        top_k: int = DEFAULT_TOP_K,
    ) -> None:
        self.supabase_url = supabase_url
        self.supabase_key = supabase_key
        self.embedding_api_url = embedding_api_url.rstrip("/")
        self.embedding_provider = embedding_provider
        self.embedding_timeout = embedding_timeout
        self.embedding_max_attempts = embedding_max_attempts
        self.strategy = strategy
        self.mentor_capacity = mentor_capacity
        self.top_k = top_k

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, validating each value."""
        return cls(
            supabase_url=os.getenv("SUPABASE_URL"),
            supabase_key=os.getenv("SUPABASE_KEY"),
            embedding_api_url=os.getenv("EMBEDDING_API_URL") or DEFAULT_EMBEDDING_API_URL,
            embedding_provider=_get_choice(
                "MENTORMATCH_EMBEDDING_PROVIDER", "http", EMBEDDING_PROVIDERS
            ),
            embedding_timeout=_get_float("MENTORMATCH_EMBEDDING_TIMEOUT", 10.0),
            embedding_max_attempts=_get_int("MENTORMATCH_EMBEDDING_MAX_ATTEMPTS", 3, minimum=1),
            strategy=_get_choice("MENTORMATCH_STRATEGY", "advisory", STRATEGIES),
            mentor_capacity=_get_int(
                "MENTORMATCH_MENTOR_CAPACITY", DEFAULT_MENTOR_CAPACITY, minimum=1
            ),
            top_k=_get_int("MENTORMATCH_TOP_K", DEFAULT_TOP_K, minimum=1),
        )

    def require_supabase_credentials(self) -> tuple:
        """Return (url, key) or raise ConfigurationError when either is missing."""
        if not self.supabase_url or not self.supabase_key:
            raise ConfigurationError(
                "Supabase credentials not found. Ensure SUPABASE_URL and SUPABASE_KEY "
                "are set in your environment or .env file."
            )
        return self.supabase_url, self.supabase_key
