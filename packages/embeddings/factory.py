"""
Embedding Provider Factory

Credential presence is the only switch between the Gemini provider and the
deterministic fallback.
"""
from typing import Optional

import httpx
import structlog

from packages.common.config import Settings, get_settings
from packages.embeddings.base import EmbeddingProvider
from packages.embeddings.provider_fallback import FallbackEmbeddingProvider
from packages.embeddings.provider_gemini import GeminiEmbeddingProvider

logger = structlog.get_logger()


def create_embedding_provider(
    settings: Optional[Settings] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> EmbeddingProvider:
    """
    Build the embedding provider for the current configuration.

    Args:
        settings: Application settings (defaults to environment)
        client: Optional shared HTTP client for the remote provider

    Returns:
        GeminiEmbeddingProvider if GEMINI_API_KEY is set, else FallbackEmbeddingProvider
    """
    settings = settings or get_settings()

    if not settings.gemini_api_key:
        logger.warning("gemini_api_key_missing",
                       message="GEMINI_API_KEY not set, using fallback embedding")
        return FallbackEmbeddingProvider()

    return GeminiEmbeddingProvider(
        api_key=settings.gemini_api_key,
        model=settings.gemini_embedding_model,
        base_url=settings.gemini_base_url,
        timeout=settings.embedding_timeout_seconds,
        client=client,
    )
