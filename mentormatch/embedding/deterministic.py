"""
Deterministic, offline embedding provider.

Used when MENTORMATCH_EMBEDDING_PROVIDER=deterministic, and by dry runs that
should not depend on the embedding service. It turns each token into a
fixed-dimension unit vector derived from the token's UTF-8 bytes, so:

    • the same token always yields the same vector
    • different tokens yield different vectors
    • no network access or API keys are needed

The vectors carry no semantic meaning. Two mentors only score well against a
student when they literally share tokens.
"""

from typing import List

DEFAULT_DIMENSION = 384


def compute_embedding(text: str, dim: int = DEFAULT_DIMENSION) -> List[float]:
    """
    Compute a deterministic, input-sensitive embedding for one token.

    Parameters
    ----------
    text : str
        The token to embed. Case is folded first so "ML" and "ml" coincide.
    dim : int
        Output dimension.

    Returns
    -------
    List[float]
        A unit-length vector of `dim` floats.
    """
    vec = [0.0] * dim

    # Each byte adds a value in [0, 1) at a position that depends on both
    # the byte and its index, so permutations of a token still differ.
    for i, ch in enumerate(text.casefold().encode("utf-8")):
        vec[(i * 31 + ch) % dim] += (ch % 97 + 1) / 97.0

    # `or 1.0` keeps an empty token from dividing by zero.
    norm = sum(x * x for x in vec) ** 0.5 or 1.0
    return [x / norm for x in vec]


def embed_texts(texts: List[str], dim: int = DEFAULT_DIMENSION) -> List[List[float]]:
    """Embed each text independently, mirroring the HTTP provider's contract."""
    return [compute_embedding(text, dim) for text in texts]
