"""
Deterministic Fallback Embedding Provider

Used when no Gemini credential is configured, and as the automatic fallback
when the Gemini embedding call fails.

Algorithm (must stay bit-for-bit stable, cached vectors depend on it):
1. Normalize the text and split into tokens
2. Token i adds 1/(i+1) to bucket abs(hash32(token)) % 768
3. L2-normalize (an all-zero vector is returned as-is)

This is a positional hashing trick, not a semantic model. It only
approximates the real embedding space when category vectors were built
with the same fallback.
"""
import math
from typing import List, Optional

import structlog

from packages.domain.categorization.schemas import (
    EMBEDDING_DIMENSION,
    EmbeddingResult,
    EmbeddingSource,
)
from packages.domain.categorization.text_normalizer import tokenize

logger = structlog.get_logger()

FALLBACK_MODEL_NAME = "fallback-hash-768"


def hash_string(value: str) -> int:
    """
    Classic 31-multiplier rolling string hash, wrapped to signed 32 bits.

    Iterates UTF-16 code units so astral characters hash the same way as
    in JavaScript-generated fallback vectors. Returns the absolute value.
    """
    h = 0
    data = value.encode("utf-16-le")
    for i in range(0, len(data), 2):
        code_unit = data[i] | (data[i + 1] << 8)
        h = (h * 31 + code_unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def fallback_vector(text: str, dimension: int = EMBEDDING_DIMENSION) -> List[float]:
    """Compute the deterministic fallback embedding for text"""
    vector = [0.0] * dimension

    for position, token in enumerate(tokenize(text or "")):
        bucket = hash_string(token) % dimension
        vector[bucket] += 1.0 / (position + 1)

    magnitude = math.sqrt(sum(v * v for v in vector))
    if magnitude > 0:
        return [v / magnitude for v in vector]
    return vector


class FallbackEmbeddingProvider:
    """
    Deterministic, offline embedding provider.

    Never fails and never touches the network.
    """

    model_name = FALLBACK_MODEL_NAME

    def __init__(self, dimension: int = EMBEDDING_DIMENSION):
        self.dimension = dimension

    async def embed(self, text: str, reason: Optional[str] = None) -> EmbeddingResult:
        """
        Embed text with the hashing fallback.

        Args:
            text: Raw text
            reason: Why the fallback is being used (recorded on the result)
        """
        return EmbeddingResult(
            vector=fallback_vector(text, self.dimension),
            source=EmbeddingSource.FALLBACK,
            fallback_reason=reason,
        )
