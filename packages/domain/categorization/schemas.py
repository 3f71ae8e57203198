"""
Data schemas for categorization module
"""
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# Dimension of text-embedding-004 vectors; the fallback embedding matches it
EMBEDDING_DIMENSION = 768


class CategorizationMethod(str, Enum):
    """How the final category was chosen"""
    EMBEDDING = "embedding"            # Top similarity match accepted directly
    LLM_VALIDATED = "llm_validated"    # Escalated to the LLM validator


class EmbeddingSource(str, Enum):
    """Which provider produced a vector"""
    REMOTE = "remote"        # Gemini embedContent
    FALLBACK = "fallback"    # Deterministic hash embedding


class ValidationStatus(str, Enum):
    """Outcome of an LLM validation attempt"""
    ACCEPTED = "accepted"                  # LLM picked one of the candidates
    INVALID_RESPONSE = "invalid_response"  # LLM answered with something else
    PROVIDER_ERROR = "provider_error"      # Call or parsing raised
    SKIPPED = "skipped"                    # No credential configured


class Category(BaseModel):
    """A report category as shipped in report_categories.json"""
    model_config = ConfigDict(frozen=True)

    category_id: str = Field(..., description="Stable unique key (e.g., 'waste_sanitation')")
    name: str = Field(..., description="Human-readable category name")
    text_for_embedding: str = Field(..., description="Canonical description used to embed the category")


class CategoryEmbeddingSet(BaseModel):
    """Precomputed category vectors as shipped in category_embeddings.json"""
    model_config = ConfigDict(frozen=True, populate_by_name=True, protected_namespaces=())

    generated_at: datetime
    model_name: str = Field(..., alias="model")
    embeddings: Dict[str, List[float]]


class EmbeddingResult(BaseModel):
    """A vector plus the provider that actually produced it"""
    vector: List[float]
    source: EmbeddingSource
    fallback_reason: Optional[str] = None


class CategoryMatch(BaseModel):
    """One ranked candidate; produced per call, never persisted"""
    category_id: str
    similarity: float = Field(..., description="Cosine similarity in [-1, 1]")
    category: Category


class ValidationOutcome(BaseModel):
    """Result of asking the LLM to pick among the top matches"""
    category_id: str
    status: ValidationStatus
    raw_response: Optional[str] = None
    detail: Optional[str] = None

    @property
    def fell_back(self) -> bool:
        """True when the top embedding match was used instead of an LLM choice"""
        return self.status != ValidationStatus.ACCEPTED


class CategoryResult(BaseModel):
    """
    Final categorization handed to the report persistence layer.

    top_matches is always the embedding ranking, whichever method
    chose category_id.
    """
    category_id: str
    category_name: str
    confidence: float
    confidence_level: str
    method: CategorizationMethod
    top_matches: List[CategoryMatch]
    reasoning: str
    requires_review: bool = False
    embedding_source: EmbeddingSource
    validation_status: Optional[ValidationStatus] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "category_id": "infrastructure",
                "category_name": "Roads & Infrastructure",
                "confidence": 0.82,
                "confidence_level": "High",
                "method": "embedding",
                "top_matches": [],
                "reasoning": "Strong embedding match with 82.0% similarity. "
                             "Keywords and context align well with Roads & Infrastructure.",
                "requires_review": False,
                "embedding_source": "remote",
                "validation_status": None,
            }
        }
    )
