"""
Public API for the embedding subsystem.

Callers can rely on:

    from mentormatch.embedding import EmbeddingClient, mean_pool

without knowing the internal module layout.
"""

from .deterministic import compute_embedding
from .embedding_client import EmbeddingClient, mean_pool

__all__ = [
    "compute_embedding",
    "EmbeddingClient",
    "mean_pool",
]
