"""
Embedding Provider Base Interface

Defines the contract for all embedding providers (Gemini, deterministic fallback).
This allows swapping embedding backends via configuration without changing calling code.
"""
from typing import Protocol

from packages.domain.categorization.schemas import EmbeddingResult


class EmbeddingProvider(Protocol):
    """
    Protocol for embedding providers.

    All providers must return vectors of the same fixed dimension
    (EMBEDDING_DIMENSION) so report vectors can be compared with the
    precomputed category vectors.
    """

    model_name: str

    async def embed(self, text: str) -> EmbeddingResult:
        """
        Embed a single piece of text.

        Args:
            text: Raw report or category text (normalized by the provider)

        Returns:
            EmbeddingResult with the vector and the provider that produced it
        """
        ...
