"""
Category Store - read-only category metadata and precomputed embeddings

Both datasets ship with the service (data/report_categories.json and
data/category_embeddings.json). They are loaded on first use and kept for
the life of the store. Concurrent first loads are harmless: the files are
static, so every load yields identical data.
"""
import json
from pathlib import Path
from typing import Dict, List, Optional

import structlog
from pydantic import ValidationError

from packages.domain.categorization.exceptions import (
    CategoryDataError,
    CategoryNotFoundError,
    DimensionMismatchError,
)
from packages.domain.categorization.schemas import (
    EMBEDDING_DIMENSION,
    Category,
    CategoryEmbeddingSet,
)

logger = structlog.get_logger()


class CategoryStore:
    """
    Lazily loaded, cached lookup of categories and their embeddings.

    Usage:
        store = CategoryStore("data/report_categories.json", "data/category_embeddings.json")
        category = store.get("waste_sanitation")
        vectors = store.embedding_set().embeddings
    """

    def __init__(
        self,
        categories_path: Optional[str | Path] = None,
        embeddings_path: Optional[str | Path] = None,
        dimension: int = EMBEDDING_DIMENSION,
    ):
        self.categories_path = Path(categories_path) if categories_path else None
        self.embeddings_path = Path(embeddings_path) if embeddings_path else None
        self.dimension = dimension

        self._categories: Optional[Dict[str, Category]] = None
        self._embedding_set: Optional[CategoryEmbeddingSet] = None

    @classmethod
    def from_data(
        cls,
        categories: List[Category],
        embedding_set: CategoryEmbeddingSet,
        dimension: int = EMBEDDING_DIMENSION,
    ) -> "CategoryStore":
        """Build a pre-populated store (scripts and tests)"""
        store = cls(dimension=dimension)
        store._categories = {c.category_id: c for c in categories}
        store._validate(store._categories, embedding_set)
        store._embedding_set = embedding_set
        return store

    def categories(self) -> Dict[str, Category]:
        """All categories keyed by id"""
        if self._categories is None:
            self._categories = self._load_categories()
        return self._categories

    def embedding_set(self) -> CategoryEmbeddingSet:
        """Precomputed category embeddings, validated against the category list"""
        if self._embedding_set is None:
            embedding_set = self._load_embeddings()
            self._validate(self.categories(), embedding_set)
            self._embedding_set = embedding_set
        return self._embedding_set

    def get(self, category_id: str) -> Category:
        """
        Look up one category.

        Raises:
            CategoryNotFoundError: If the id is unknown
        """
        category = self.categories().get(category_id)
        if category is None:
            raise CategoryNotFoundError(category_id)
        return category

    def clear(self) -> None:
        """Drop cached data so the next access reloads from disk"""
        self._categories = None
        self._embedding_set = None

    def _load_categories(self) -> Dict[str, Category]:
        raw = self._read_json(self.categories_path, "Category data")

        try:
            categories = [Category.model_validate(item) for item in raw]
        except (TypeError, ValidationError) as e:
            raise CategoryDataError(f"Invalid category data in {self.categories_path}: {e}") from e

        logger.info("categories_loaded",
                    path=str(self.categories_path),
                    count=len(categories))

        return {c.category_id: c for c in categories}

    def _load_embeddings(self) -> CategoryEmbeddingSet:
        raw = self._read_json(self.embeddings_path, "Category embeddings")

        try:
            embedding_set = CategoryEmbeddingSet.model_validate(raw)
        except ValidationError as e:
            raise CategoryDataError(f"Invalid category embeddings in {self.embeddings_path}: {e}") from e

        logger.info("category_embeddings_loaded",
                    path=str(self.embeddings_path),
                    model=embedding_set.model_name,
                    generated_at=embedding_set.generated_at.isoformat(),
                    count=len(embedding_set.embeddings))

        return embedding_set

    def _read_json(self, path: Optional[Path], label: str):
        if path is None:
            raise CategoryDataError(f"{label} path is not configured")

        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError as e:
            logger.error("category_dataset_missing", path=str(path))
            raise CategoryDataError(
                f"{label} not found at {path}. "
                "Run scripts/generate_category_embeddings.py to build the embeddings file."
            ) from e
        except json.JSONDecodeError as e:
            raise CategoryDataError(f"{label} at {path} is not valid JSON: {e}") from e

    def _validate(self, categories: Dict[str, Category], embedding_set: CategoryEmbeddingSet) -> None:
        """Every embedding must name a known category and have the shared dimension"""
        for category_id, vector in embedding_set.embeddings.items():
            if category_id not in categories:
                raise CategoryNotFoundError(category_id)
            if len(vector) != self.dimension:
                raise DimensionMismatchError(len(vector), self.dimension)
