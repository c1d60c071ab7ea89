"""
EmbeddingClient: one pooled vector per ordered list of tokens.

The embedding service embeds each text independently:

    POST {EMBEDDING_API_URL}/embedding
    {"texts": ["ml", "nlp"]}
    → {"embeddings": [[...], [...]]}

EmbeddingClient sends all tokens of one profile in a single request and
combines the returned vectors with an element-wise arithmetic mean. Callers
get either a vector or None (no tokens, so nothing was sent). Every failure
of the provider surfaces as EmbeddingUnavailable; vectors of unequal
dimension surface as DimensionMismatchError.

Transport errors (timeouts, refused connections) are retried with
exponential backoff via tenacity. HTTP status errors and malformed payloads
are not retried.

    client = EmbeddingClient(base_url="http://localhost:8000")
    vector = client.embed(["machine learning", "robotics"])
"""

import logging
import math
from typing import Any, List, Optional

import httpx
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from mentormatch.errors import DimensionMismatchError, EmbeddingUnavailable
from mentormatch.types import EmbeddingVector

from .deterministic import DEFAULT_DIMENSION, embed_texts

logger = logging.getLogger(__name__)

PROVIDERS = ("http", "deterministic")


def mean_pool(vectors: List[List[float]]) -> EmbeddingVector:
    """
    Combine per-token vectors into one by element-wise arithmetic mean.

    Raises
    ------
    ValueError
        If `vectors` is empty.
    DimensionMismatchError
        If any vector's length differs from the first one's.
    """
    if not vectors:
        raise ValueError("mean_pool requires at least one vector")

    dim = len(vectors[0])
    totals = [0.0] * dim
    for vector in vectors:
        if len(vector) != dim:
            raise DimensionMismatchError(dim, len(vector))
        for i, value in enumerate(vector):
            totals[i] += value

    count = len(vectors)
    return [total / count for total in totals]


def _parse_embeddings(payload: Any, expected_count: int) -> List[List[float]]:
    """Validate the provider's JSON body and return its vectors as floats."""
    if not isinstance(payload, dict):
        raise EmbeddingUnavailable("Embedding response is not a JSON object")

    embeddings = payload.get("embeddings")
    if not isinstance(embeddings, list) or not embeddings:
        raise EmbeddingUnavailable("Embedding response has no embeddings")

    if len(embeddings) != expected_count:
        raise EmbeddingUnavailable(
            f"Embedding response has {len(embeddings)} vectors for {expected_count} texts"
        )

    vectors = []
    for raw in embeddings:
        if not isinstance(raw, list) or not raw:
            raise EmbeddingUnavailable("Embedding response contains an empty vector")
        try:
            vector = [float(x) for x in raw]
        except (TypeError, ValueError) as e:
            raise EmbeddingUnavailable("Embedding response contains non-numeric values") from e
        if not all(math.isfinite(x) for x in vector):
            raise EmbeddingUnavailable("Embedding response contains non-finite values")
        vectors.append(vector)

    return vectors


class EmbeddingClient:
    """
    Provider-agnostic embedding client.

    Parameters
    ----------
    provider : str
        "http" (default) calls the embedding service; "deterministic" uses the
        offline stub in deterministic.py.
    base_url : str
        Base URL of the embedding service.
    timeout : float
        Per-request timeout in seconds.
    max_attempts : int
        Attempts for transport-level failures.
    backoff : float
        Multiplier for the exponential wait between attempts (0 disables waiting).
    http_client : httpx.Client | None
        Injected client, mainly for tests (httpx.MockTransport). When omitted
        a client is created per call.
    dimension : int
        Output dimension of the deterministic provider.
    """

    def __init__(
        self,
        provider: str = "http",
        base_url: str = "http://localhost:8000",
        timeout: float = 10.0,
        max_attempts: int = 3,
        backoff: float = 1.0,
        http_client: Optional[httpx.Client] = None,
        dimension: int = DEFAULT_DIMENSION,
    ) -> None:
        if provider not in PROVIDERS:
            raise NotImplementedError(
                f"Provider '{provider}' is not implemented. "
                f"Currently supported: {', '.join(PROVIDERS)}."
            )
        self.provider = provider
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.backoff = backoff
        self.dimension = dimension
        self._http_client = http_client

        # Number of provider round-trips, for CLI summaries and tests.
        self.calls = 0

    @classmethod
    def from_settings(cls, settings: Any) -> "EmbeddingClient":
        """Build a client from mentormatch.config.Settings."""
        return cls(
            provider=settings.embedding_provider,
            base_url=settings.embedding_api_url,
            timeout=settings.embedding_timeout,
            max_attempts=settings.embedding_max_attempts,
        )

    # ------------------------------------------------------------------
    # Canonical embedding method
    # ------------------------------------------------------------------
    def embed(self, tokens: List[str]) -> Optional[EmbeddingVector]:
        """
        Embed ordered tokens into one mean-pooled vector.

        Returns None, without calling the provider, when no non-empty token
        remains. Callers treat None as "nothing to score".

        Raises
        ------
        EmbeddingUnavailable
            The provider failed or returned a malformed payload.
        DimensionMismatchError
            The provider returned vectors of unequal dimension.
        """
        texts = [t for t in tokens if t and t.strip()]
        if not texts:
            return None

        vectors = self.embed_texts(texts)
        return mean_pool(vectors)

    def embed_texts(self, texts: List[str]) -> List[List[float]]:
        """Return one vector per text, in order, from the configured provider."""
        self.calls += 1

        if self.provider == "deterministic":
            return embed_texts(texts, self.dimension)

        return self._request_embeddings(texts)

    # ------------------------------------------------------------------
    # HTTP provider
    # ------------------------------------------------------------------
    def _request_embeddings(self, texts: List[str]) -> List[List[float]]:
        url = f"{self.base_url}/embedding"

        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.backoff, max=10),
            retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError)),
            reraise=True,
        )

        try:
            for attempt in retrying:
                with attempt:
                    response = self._post(url, {"texts": texts})
        except (httpx.TimeoutException, httpx.NetworkError) as e:
            logger.warning("Embedding provider unreachable at %s: %s", url, e)
            raise EmbeddingUnavailable(f"Embedding provider unreachable: {e}") from e
        except httpx.HTTPStatusError as e:
            logger.warning("Embedding provider returned %s", e.response.status_code)
            raise EmbeddingUnavailable(
                f"Embedding provider returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise EmbeddingUnavailable(f"Embedding request failed: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise EmbeddingUnavailable("Embedding response is not valid JSON") from e

        return _parse_embeddings(payload, expected_count=len(texts))

    def _post(self, url: str, body: dict) -> httpx.Response:
        if self._http_client is not None:
            response = self._http_client.post(url, json=body, timeout=self.timeout)
        else:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(url, json=body)
        response.raise_for_status()
        return response
