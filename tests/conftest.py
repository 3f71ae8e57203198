import math
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import pytest

from packages.common.config import Settings
from packages.domain.categorization.category_store import CategoryStore
from packages.domain.categorization.schemas import (
    Category,
    CategoryEmbeddingSet,
    EmbeddingResult,
    EmbeddingSource,
)

DATA_DIR = Path(__file__).resolve().parent.parent / "data"

# Three categories on orthogonal axes of a 4-dimensional space. The fourth
# axis absorbs the remainder so a query can hit exact similarities.
CATEGORY_IDS = ["infrastructure", "traffic_transport", "waste_sanitation"]


def unit_axis(index: int, dimension: int = 4) -> List[float]:
    vector = [0.0] * dimension
    vector[index] = 1.0
    return vector


def query_vector(*similarities: float) -> List[float]:
    """Unit vector whose cosine with category i is similarities[i]"""
    remainder = 1.0 - sum(s * s for s in similarities)
    return list(similarities) + [math.sqrt(max(remainder, 0.0))]


class FakeEmbeddingProvider:
    """Returns a fixed vector and counts calls"""

    model_name = "fake"

    def __init__(self, vector: List[float], source: EmbeddingSource = EmbeddingSource.REMOTE,
                 fallback_reason: Optional[str] = None):
        self.vector = vector
        self.source = source
        self.fallback_reason = fallback_reason
        self.calls: List[str] = []

    async def embed(self, text: str) -> EmbeddingResult:
        self.calls.append(text)
        return EmbeddingResult(vector=self.vector, source=self.source, fallback_reason=self.fallback_reason)


class FakeLlmProvider:
    """Scripted LlmProvider: returns the next response or raises it if it is an exception"""

    def __init__(self, name: str, responses: list):
        self.name = name
        self.responses = list(responses)
        self.calls: List[dict] = []

    async def complete(self, system: str, user: str, json_mode: bool = False) -> str:
        self.calls.append({"system": system, "user": user, "json_mode": json_mode})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def categories() -> List[Category]:
    return [
        Category(category_id="infrastructure", name="Roads & Infrastructure",
                 text_for_embedding="road damage pothole lubak sirang kalsada"),
        Category(category_id="traffic_transport", name="Traffic & Transport",
                 text_for_embedding="traffic congestion trapik illegal parking"),
        Category(category_id="waste_sanitation", name="Waste & Sanitation",
                 text_for_embedding="garbage basura baradong kanal mabaho"),
    ]


@pytest.fixture
def category_store(categories) -> CategoryStore:
    embedding_set = CategoryEmbeddingSet(
        generated_at=datetime(2026, 10, 19, tzinfo=timezone.utc),
        model_name="fake",
        embeddings={category_id: unit_axis(i) for i, category_id in enumerate(CATEGORY_IDS)},
    )
    return CategoryStore.from_data(categories, embedding_set, dimension=4)


@pytest.fixture
def shipped_store() -> CategoryStore:
    return CategoryStore(DATA_DIR / "report_categories.json", DATA_DIR / "category_embeddings.json")


@pytest.fixture
def offline_settings() -> Settings:
    """Settings with no credentials, pointing at the shipped datasets"""
    return Settings(
        _env_file=None,
        gemini_api_key=None,
        groq_api_key=None,
        categories_path=str(DATA_DIR / "report_categories.json"),
        category_embeddings_path=str(DATA_DIR / "category_embeddings.json"),
        barangay_boundaries_path=str(DATA_DIR / "baguio_barangay_boundaries.json"),
    )
