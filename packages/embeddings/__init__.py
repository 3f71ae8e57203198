"""
Embeddings Package

Provides pluggable embedding providers with a factory.

Main entry point:
    from packages.embeddings import create_embedding_provider

    provider = create_embedding_provider()
    result = await provider.embed("Walang tubig sa Brgy. Irisan")

Available providers:
    - GeminiEmbeddingProvider: Gemini text-embedding-004 (768 dimensions)
    - FallbackEmbeddingProvider: Deterministic hashing embedding (offline)

Configuration via environment:
    - GEMINI_API_KEY: Enables the Gemini provider when set
    - GEMINI_EMBEDDING_MODEL: Embedding model (default: text-embedding-004)
    - EMBEDDING_TIMEOUT_SECONDS: Request timeout (default: 10)
"""
from packages.embeddings.base import EmbeddingProvider
from packages.embeddings.factory import create_embedding_provider
from packages.embeddings.provider_fallback import (
    FALLBACK_MODEL_NAME,
    FallbackEmbeddingProvider,
    fallback_vector,
    hash_string,
)
from packages.embeddings.provider_gemini import GeminiEmbeddingProvider

__all__ = [
    "EmbeddingProvider",
    "FALLBACK_MODEL_NAME",
    "FallbackEmbeddingProvider",
    "GeminiEmbeddingProvider",
    "create_embedding_provider",
    "fallback_vector",
    "hash_string",
]
