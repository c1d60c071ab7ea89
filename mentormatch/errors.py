"""
Exception taxonomy for the recommendation engine.

Every error raised on purpose by mentormatch derives from MentorMatchError, so
callers (the CLI today, an HTTP layer tomorrow) can map each failure to its
own response:

    • EmbeddingUnavailable     → retryable server error
    • InsufficientProfileData  → client-correctable, the profile needs tokens
    • StudentNotFoundError     → not found
    • NoCapacityAvailable      → "no mentors currently available"
    • DegenerateVectorError    → local to one mentor, never reaches callers
    • DimensionMismatchError   → programming/configuration fault
    • StoreError               → Supabase reported an error
    • ConfigurationError       → invalid environment configuration
"""

from typing import Any, Optional


class MentorMatchError(Exception):
    """Base class for all mentormatch errors."""


class ConfigurationError(MentorMatchError):
    """An environment variable holds a value mentormatch cannot use."""


class StoreError(MentorMatchError):
    """The Supabase client returned an error response."""


class EmbeddingUnavailable(MentorMatchError):
    """
    The embedding provider could not produce a usable vector.

    Raised for unreachable providers, timeouts after retries, non-2xx
    responses and malformed payloads. `report` carries the cache-fill report
    when the failure comes from mentor embedding.
    """

    def __init__(self, message: str, report: Optional[Any] = None) -> None:
        super().__init__(message)
        self.report = report


class InsufficientProfileData(MentorMatchError):
    """The student has no usable skill or interest tokens."""


class StudentNotFoundError(MentorMatchError):
    """No student row exists for the requested identifier."""


class NoCapacityAvailable(MentorMatchError):
    """Every ranked mentor is already at capacity."""


class DegenerateVectorError(MentorMatchError):
    """A vector has zero norm, so cosine similarity is undefined."""


class DimensionMismatchError(MentorMatchError):
    """Two vectors that must share a dimension do not."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Embedding dimension mismatch: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual
