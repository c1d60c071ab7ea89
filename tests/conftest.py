"""
Shared pytest configuration for the mentormatch test suite.

All helpers here are deterministic:
    • FakeSupabase keeps tables in memory and logs every write
    • StubEmbeddingClient maps tokens to hand-picked 3-d vectors, so expected
      cosine scores can be worked out on paper
"""

from typing import Dict, List, Optional, Set

import pytest
from typer.testing import CliRunner

from mentormatch.embedding import mean_pool
from mentormatch.errors import EmbeddingUnavailable
from mentormatch.supabase_client import SupabaseClient
from tests.fake_supabase import FakeSupabase

# Token → vector. Lookup is case-insensitive.
TOKEN_VECTORS: Dict[str, List[float]] = {
    "ml": [1.0, 0.0, 0.0],
    "nlp": [0.8, 0.6, 0.0],
    "robotics": [0.0, 1.0, 0.0],
    "vision": [0.0, 0.0, 1.0],
}


class StubEmbeddingClient:
    """
    Deterministic embedding client for unit tests.

    Exposes:
        • .embed(tokens) → mean of the tokens' vectors, None for no tokens
        • .calls → number of provider round-trips
        • .requests → the token lists that were embedded
    """

    def __init__(
        self,
        vectors: Optional[Dict[str, List[float]]] = None,
        fail_tokens: Optional[Set[str]] = None,
    ) -> None:
        self.vectors = {k.casefold(): v for k, v in (vectors or TOKEN_VECTORS).items()}
        self.fail_tokens = {t.casefold() for t in (fail_tokens or set())}
        self.calls = 0
        self.requests: List[List[str]] = []

    def embed(self, tokens: List[str]) -> Optional[List[float]]:
        texts = [t for t in tokens if t and t.strip()]
        if not texts:
            return None

        self.calls += 1
        self.requests.append(list(texts))

        if any(t.casefold() in self.fail_tokens for t in texts):
            raise EmbeddingUnavailable("Simulated provider outage")

        return mean_pool([self.vectors[t.casefold()] for t in texts])


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provides a fresh Typer CliRunner instance for CLI tests."""
    return CliRunner()


@pytest.fixture
def embedding_client() -> StubEmbeddingClient:
    return StubEmbeddingClient()


@pytest.fixture
def fake_db() -> FakeSupabase:
    """
    A small mentoring dataset.

    Students:
        1   skills "ml", interests ["nlp"]
        2   nothing usable
    Mentors:
        1   "ML, Robotics"
        2   ["Vision"]
        3   "  , "          (no usable tokens)
        4   "NLP"
    """
    return FakeSupabase(
        tables={
            "student_details": [
                {"id": 1, "skills": "ml", "interests": ["nlp"]},
                {"id": 2, "skills": " , ", "interests": None},
            ],
            "mentor_details": [
                {"id": 1, "research_areas": "ML, Robotics", "embedding": None},
                {"id": 2, "research_areas": ["Vision"], "embedding": None},
                {"id": 3, "research_areas": "  , ", "embedding": None},
                {"id": 4, "research_areas": "NLP", "embedding": None},
            ],
            "recommendations": [],
            "assigned_mentors": [],
        }
    )


@pytest.fixture
def supabase_client(fake_db: FakeSupabase) -> SupabaseClient:
    return SupabaseClient(fake_db)
