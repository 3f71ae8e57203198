"""
Categorization Service - Orchestrates embedding match + LLM validation

Flow:
1. Embed the report (Gemini, or deterministic fallback)
2. Rank every category by cosine similarity, keep the top 3
3. Confidence gate:
   - top similarity >= 0.8 → accept the embedding match
   - otherwise → ask the LLM to pick among the top 3
4. Assemble a CategoryResult with method provenance and reasoning

Example:
- Input: "Malaking lubak sa kalsada sa Session Road"
- Stage 1 (Embedding): infrastructure 0.82, traffic_transport 0.55, ...
- Stage 2 (Gate): 0.82 >= 0.8 → accepted, no LLM call
- Output: CategoryResult(category_id="infrastructure", method="embedding")

Degraded services never fail a categorization: a dead embedding API falls
back to the hashing embedding and a dead LLM falls back to the top match.
Only empty input and broken category data raise.
"""
from functools import lru_cache
from typing import List, Optional

import structlog
from prometheus_client import Counter

from packages.common.config import Settings, get_settings
from packages.domain.categorization import confidence_gate
from packages.domain.categorization.category_store import CategoryStore
from packages.domain.categorization.confidence_gate import GateDecision
from packages.domain.categorization.exceptions import (
    CategoryDataError,
    EmptyInputError,
    NoCandidatesError,
)
from packages.domain.categorization.llm_validator import LLMValidator
from packages.domain.categorization.schemas import (
    CategorizationMethod,
    CategoryMatch,
    CategoryResult,
    EmbeddingResult,
)
from packages.domain.categorization.similarity import rank
from packages.embeddings.base import EmbeddingProvider
from packages.embeddings.factory import create_embedding_provider
from packages.embeddings.provider_fallback import FALLBACK_MODEL_NAME, FallbackEmbeddingProvider
from packages.llm.factory import create_gemini_provider

logger = structlog.get_logger()

TOP_N = 3

CATEGORIZATIONS = Counter(
    "ayos_categorizations_total",
    "Completed report categorizations",
    ["method", "embedding_source"],
)
LLM_VALIDATIONS = Counter(
    "ayos_llm_validations_total",
    "LLM validation outcomes",
    ["status"],
)


class CategorizationService:
    """
    End-to-end report categorization.

    Usage:
        service = CategorizationService(store, embedding_provider, validator)
        result = await service.categorize("Baha sa Kayang Street tuwing umuulan")
        print(f"{result.category_id} via {result.method.value} ({result.confidence:.0%})")
    """

    def __init__(
        self,
        store: CategoryStore,
        embedding_provider: EmbeddingProvider,
        validator: LLMValidator,
        top_n: int = TOP_N,
    ):
        self.store = store
        self.embedding_provider = embedding_provider
        self.validator = validator
        self.top_n = top_n
        self._fallback_provider = FallbackEmbeddingProvider()
        self._mismatch_logged = False

    async def categorize_by_similarity(self, report_text: str) -> tuple[List[CategoryMatch], EmbeddingResult]:
        """
        Rank categories against the report and keep the top matches.

        Returns:
            (top matches highest first, the report embedding)
        """
        embedding_set = self.store.embedding_set()
        categories = self.store.categories()

        embedding = await self._embed(report_text, embedding_set.model_name)
        if embedding.fallback_reason:
            logger.warning("categorization_using_fallback_embedding",
                           reason=embedding.fallback_reason)

        matches = rank(embedding.vector, embedding_set.embeddings, categories)
        return matches[:self.top_n], embedding

    async def _embed(self, report_text: str, category_model: str) -> EmbeddingResult:
        """
        Embed the report in the same space as the category vectors.

        Category vectors built with the hashing fallback are matched with
        the fallback embedding whatever provider is configured; any other
        model mismatch is a data error.
        """
        provider_model = self.embedding_provider.model_name
        if provider_model == category_model:
            return await self.embedding_provider.embed(report_text)

        if category_model != FALLBACK_MODEL_NAME:
            raise CategoryDataError(
                f"Category embeddings were built with {category_model} but the embedding "
                f"provider is {provider_model}. Regenerate them with "
                "scripts/generate_category_embeddings.py."
            )

        if not self._mismatch_logged:
            logger.error("category_embedding_model_mismatch",
                         category_model=category_model,
                         provider_model=provider_model,
                         message="Using fallback embedding until category embeddings are regenerated")
            self._mismatch_logged = True

        return await self._fallback_provider.embed(
            report_text,
            reason=f"model_mismatch: categories use {category_model}, provider is {provider_model}",
        )

    async def categorize(self, report_text: str) -> CategoryResult:
        """
        Categorize a citizen report.

        Args:
            report_text: Free-text report description

        Returns:
            CategoryResult with the chosen category and its provenance

        Raises:
            EmptyInputError: If the text is empty or whitespace
            NoCandidatesError: If the category set is empty
            CategoryDataError: If the category datasets are broken
        """
        if not report_text or not report_text.strip():
            raise EmptyInputError("Report text cannot be empty")

        logger.info("categorization_started", chars=len(report_text))

        top_matches, embedding = await self.categorize_by_similarity(report_text)

        if not top_matches:
            raise NoCandidatesError("No category matches found")

        best_match = top_matches[0]
        confidence = best_match.similarity
        gate = confidence_gate.evaluate(confidence)

        if gate.decision == GateDecision.ACCEPT:
            result = CategoryResult(
                category_id=best_match.category_id,
                category_name=best_match.category.name,
                confidence=confidence,
                confidence_level=gate.level,
                method=CategorizationMethod.EMBEDDING,
                top_matches=top_matches,
                reasoning=(
                    f"Strong embedding match with {confidence * 100:.1f}% similarity. "
                    f"Keywords and context align well with {best_match.category.name}."
                ),
                requires_review=gate.requires_review,
                embedding_source=embedding.source,
            )
        else:
            logger.info("categorization_escalated_to_llm",
                        confidence=round(confidence, 4),
                        level=gate.level)

            outcome = await self.validator.validate(report_text, top_matches)
            LLM_VALIDATIONS.labels(status=outcome.status.value).inc()

            validated = next(
                (m for m in top_matches if m.category_id == outcome.category_id),
                best_match,
            )

            result = CategoryResult(
                category_id=validated.category_id,
                category_name=validated.category.name,
                confidence=validated.similarity,
                confidence_level=gate.level,
                method=CategorizationMethod.LLM_VALIDATED,
                top_matches=top_matches,
                reasoning=(
                    f'LLM analysis selected "{validated.category.name}" from top '
                    f"{len(top_matches)} candidates. Confidence: {confidence * 100:.1f}%."
                ),
                requires_review=gate.requires_review,
                embedding_source=embedding.source,
                validation_status=outcome.status,
            )

        CATEGORIZATIONS.labels(
            method=result.method.value,
            embedding_source=result.embedding_source.value,
        ).inc()

        logger.info("categorization_complete",
                    category=result.category_id,
                    method=result.method.value,
                    confidence=round(result.confidence, 4),
                    level=result.confidence_level,
                    requires_review=result.requires_review,
                    embedding_source=result.embedding_source.value,
                    validation_status=result.validation_status.value if result.validation_status else None)

        return result


def create_categorization_service(settings: Optional[Settings] = None) -> CategorizationService:
    """Wire a CategorizationService from settings"""
    settings = settings or get_settings()
    return CategorizationService(
        store=CategoryStore(settings.categories_path, settings.category_embeddings_path),
        embedding_provider=create_embedding_provider(settings),
        validator=LLMValidator(create_gemini_provider(settings)),
    )


@lru_cache()
def get_categorization_service() -> CategorizationService:
    """Get the process-wide service (caches live on its CategoryStore)"""
    return create_categorization_service()
