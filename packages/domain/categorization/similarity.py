"""
Cosine similarity ranking of categories against a report embedding.
"""
import math
from typing import Dict, List, Mapping, Sequence

from packages.domain.categorization.exceptions import (
    CategoryNotFoundError,
    DimensionMismatchError,
)
from packages.domain.categorization.schemas import Category, CategoryMatch


def cosine_similarity(vec_a: Sequence[float], vec_b: Sequence[float]) -> float:
    """
    Cosine similarity of two vectors.

    Returns 0.0 when either vector has zero magnitude.

    Raises:
        DimensionMismatchError: If the vectors differ in length
    """
    if len(vec_a) != len(vec_b):
        raise DimensionMismatchError(len(vec_a), len(vec_b))

    dot_product = sum(a * b for a, b in zip(vec_a, vec_b))
    magnitude_a = math.sqrt(sum(a * a for a in vec_a))
    magnitude_b = math.sqrt(sum(b * b for b in vec_b))

    if magnitude_a == 0 or magnitude_b == 0:
        return 0.0

    return dot_product / (magnitude_a * magnitude_b)


def rank(
    query_vector: Sequence[float],
    candidates: Mapping[str, Sequence[float]],
    categories: Dict[str, Category],
) -> List[CategoryMatch]:
    """
    Rank every candidate category by similarity to the query.

    Args:
        query_vector: Report embedding
        candidates: category_id -> precomputed category embedding
        categories: category_id -> Category metadata

    Returns:
        All matches, highest similarity first (ties keep candidate order)
    """
    matches = []
    for category_id, vector in candidates.items():
        category = categories.get(category_id)
        if category is None:
            raise CategoryNotFoundError(category_id)

        matches.append(CategoryMatch(
            category_id=category_id,
            similarity=cosine_similarity(query_vector, vector),
            category=category,
        ))

    matches.sort(key=lambda m: m.similarity, reverse=True)
    return matches
