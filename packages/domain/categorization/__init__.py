"""
Categorization Module - assigns citizen reports to government-department categories

Two-stage process:
1. Embedding match: cosine similarity against precomputed category vectors
2. LLM validation: only when the top similarity is below 0.8

Example flow:
- "Malaking lubak sa kalsada sa Session Road" → 0.82 infrastructure → accepted
- "Mabaho at barado ang kanal" → 0.61 waste_sanitation → LLM picks among top 3
- No GEMINI_API_KEY → hashing fallback embedding, LLM step skipped
"""

from packages.domain.categorization.exceptions import (
    CategorizationError,
    CategoryDataError,
    CategoryNotFoundError,
    DimensionMismatchError,
    EmptyInputError,
    NoCandidatesError,
)
from packages.domain.categorization.schemas import (
    EMBEDDING_DIMENSION,
    CategorizationMethod,
    Category,
    CategoryEmbeddingSet,
    CategoryMatch,
    CategoryResult,
    EmbeddingResult,
    EmbeddingSource,
    ValidationOutcome,
    ValidationStatus,
)
from packages.domain.categorization.text_normalizer import normalize

__all__ = [
    'EMBEDDING_DIMENSION',
    'CategorizationError',
    'CategorizationMethod',
    'Category',
    'CategoryDataError',
    'CategoryEmbeddingSet',
    'CategoryMatch',
    'CategoryNotFoundError',
    'CategoryResult',
    'DimensionMismatchError',
    'EmbeddingResult',
    'EmbeddingSource',
    'EmptyInputError',
    'NoCandidatesError',
    'ValidationOutcome',
    'ValidationStatus',
    'normalize',
]
