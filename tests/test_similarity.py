import pytest

from conftest import unit_axis
from packages.domain.categorization.exceptions import CategoryNotFoundError, DimensionMismatchError
from packages.domain.categorization.similarity import cosine_similarity, rank


def test_cosine_identical_vectors():
    vector = [0.3, -1.2, 4.0]
    assert cosine_similarity(vector, vector) == pytest.approx(1.0)


def test_cosine_is_symmetric():
    a, b = [1.0, 2.0, 3.0], [-2.0, 0.5, 1.0]
    assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))


def test_cosine_opposite_and_orthogonal():
    assert cosine_similarity([1.0, 0.0], [-1.0, 0.0]) == pytest.approx(-1.0)
    assert cosine_similarity([1.0, 0.0], [0.0, 3.0]) == 0.0


def test_cosine_zero_vector_is_zero():
    assert cosine_similarity([0.0, 0.0, 0.0], [1.0, 2.0, 3.0]) == 0.0
    assert cosine_similarity([1.0, 2.0, 3.0], [0.0, 0.0, 0.0]) == 0.0


def test_cosine_dimension_mismatch():
    with pytest.raises(DimensionMismatchError):
        cosine_similarity([1.0, 2.0], [1.0, 2.0, 3.0])


def test_rank_orders_by_similarity(categories):
    by_id = {c.category_id: c for c in categories}
    candidates = {
        "infrastructure": unit_axis(0),
        "traffic_transport": unit_axis(1),
        "waste_sanitation": unit_axis(2),
    }

    matches = rank([0.2, 0.9, 0.4, 0.0], candidates, by_id)

    assert [m.category_id for m in matches] == ["traffic_transport", "waste_sanitation", "infrastructure"]
    assert matches[0].category.name == "Traffic & Transport"
    assert matches[0].similarity >= matches[1].similarity >= matches[2].similarity


def test_rank_ties_keep_candidate_order(categories):
    by_id = {c.category_id: c for c in categories}
    candidates = {
        "waste_sanitation": unit_axis(0),
        "infrastructure": unit_axis(0),
    }

    matches = rank([1.0, 0.0, 0.0, 0.0], candidates, by_id)
    assert [m.category_id for m in matches] == ["waste_sanitation", "infrastructure"]


def test_rank_unknown_category(categories):
    by_id = {c.category_id: c for c in categories}
    with pytest.raises(CategoryNotFoundError) as exc_info:
        rank([1.0, 0.0, 0.0, 0.0], {"flooding": unit_axis(0)}, by_id)
    assert exc_info.value.category_id == "flooding"


def test_rank_empty_candidates(categories):
    assert rank([1.0, 0.0, 0.0, 0.0], {}, {}) == []
