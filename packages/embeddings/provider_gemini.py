"""
Gemini Embedding Provider

Calls the Gemini embedContent endpoint (text-embedding-004, 768 dimensions).
Any failure is logged and absorbed by the deterministic fallback so that
categorization keeps working while the embedding service is down.
"""
from typing import Optional

import httpx
import structlog

from packages.domain.categorization.schemas import (
    EMBEDDING_DIMENSION,
    EmbeddingResult,
    EmbeddingSource,
)
from packages.domain.categorization.text_normalizer import normalize
from packages.embeddings.provider_fallback import FallbackEmbeddingProvider

logger = structlog.get_logger()


class GeminiEmbeddingProvider:
    """
    Remote embedding provider backed by Google Gemini.

    Usage:
        provider = GeminiEmbeddingProvider(api_key="...")
        result = await provider.embed("Baradong kanal sa Magsaysay Ave")
        print(result.source, len(result.vector))
    """

    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-004",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
        fallback: Optional[FallbackEmbeddingProvider] = None,
    ):
        """
        Initialize Gemini embedding provider.

        Args:
            api_key: Gemini API key
            model: Embedding model name
            base_url: Generative Language API base URL
            timeout: Request timeout in seconds
            client: Shared HTTP client (a short-lived one is used per call if None)
            fallback: Provider used when the remote call fails
        """
        self.api_key = api_key
        self.model_name = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.client = client
        self.fallback = fallback or FallbackEmbeddingProvider()

        logger.info("gemini_embedding_provider_initialized", model=model)

    async def embed(self, text: str) -> EmbeddingResult:
        """
        Embed text remotely, falling back to the hashing embedding on failure.

        Args:
            text: Raw text (normalized before sending)

        Returns:
            EmbeddingResult; source is FALLBACK if the remote call failed
        """
        normalized = normalize(text)

        try:
            vector = await self._request_embedding(normalized)
        except Exception as e:
            logger.error("gemini_embedding_failed",
                         model=self.model_name,
                         error=str(e),
                         message="Falling back to deterministic embedding")
            return await self.fallback.embed(text, reason=f"gemini_error: {e}")

        return EmbeddingResult(vector=vector, source=EmbeddingSource.REMOTE)

    async def _request_embedding(self, normalized_text: str) -> list[float]:
        """POST to embedContent and return the vector, validating its dimension"""
        url = f"{self.base_url}/models/{self.model_name}:embedContent"
        payload = {
            "model": f"models/{self.model_name}",
            "content": {"parts": [{"text": normalized_text}]},
        }
        headers = {"x-goog-api-key": self.api_key, "Content-Type": "application/json"}

        if self.client is not None:
            response = await self.client.post(url, json=payload, headers=headers, timeout=self.timeout)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=payload, headers=headers)

        response.raise_for_status()
        values = response.json()["embedding"]["values"]

        if len(values) != EMBEDDING_DIMENSION:
            raise ValueError(
                f"Embedding has {len(values)} dimensions, expected {EMBEDDING_DIMENSION}"
            )

        return [float(v) for v in values]
