import json

import pytest
from fastapi.testclient import TestClient

from apps.api.dependencies import get_boundary_repository, get_categorizer, get_issue_analyzer
from apps.api.main import app
from conftest import DATA_DIR, FakeEmbeddingProvider, FakeLlmProvider, query_vector
from packages.domain.analysis import IssueAnalyzer
from packages.domain.categorization.categorization_service import CategorizationService
from packages.domain.categorization.category_store import CategoryStore
from packages.domain.categorization.llm_validator import LLMValidator
from packages.domain.geofence import BoundaryRepository
from packages.llm.base import LlmProviderError
from packages.llm.dual import DualProviderClient


@pytest.fixture
def client():
    app.dependency_overrides[get_boundary_repository] = lambda: BoundaryRepository(
        DATA_DIR / "baguio_barangay_boundaries.json"
    )
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def override_categorizer(service):
    app.dependency_overrides[get_categorizer] = lambda: service


def override_analyzer(primary, secondary=None):
    app.dependency_overrides[get_issue_analyzer] = lambda: IssueAnalyzer(DualProviderClient(primary, secondary))


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_metrics(client):
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "ayos_categorizations_total" in response.text


def test_categorize(client, category_store):
    service = CategorizationService(
        category_store,
        FakeEmbeddingProvider(query_vector(0.82, 0.55, 0.1)),
        LLMValidator(None),
    )
    override_categorizer(service)

    response = client.post("/api/v1/categorization", json={"text": "Malaking lubak sa kalsada sa Session Road"})

    assert response.status_code == 200
    body = response.json()
    assert body["category_id"] == "infrastructure"
    assert body["method"] == "embedding"
    assert body["embedding_source"] == "remote"
    assert len(body["top_matches"]) == 3


def test_categorize_empty_text(client, category_store):
    override_categorizer(CategorizationService(
        category_store, FakeEmbeddingProvider(query_vector(0.9)), LLMValidator(None),
    ))

    response = client.post("/api/v1/categorization", json={"text": "   "})
    assert response.status_code == 400


def test_categorize_missing_text(client):
    response = client.post("/api/v1/categorization", json={})
    assert response.status_code == 422


def test_categorize_broken_dataset(client, tmp_path):
    service = CategorizationService(
        CategoryStore(tmp_path / "missing.json", tmp_path / "missing.json"),
        FakeEmbeddingProvider(query_vector(0.9)),
        LLMValidator(None),
    )
    override_categorizer(service)

    response = client.post("/api/v1/categorization", json={"text": "Baha sa Kayang"})

    assert response.status_code == 500
    assert response.json()["detail"] == "Reference data error"


def test_list_categories(client, shipped_store):
    override_categorizer(CategorizationService(shipped_store, FakeEmbeddingProvider([]), LLMValidator(None)))

    response = client.get("/api/v1/categorization/categories")

    assert response.status_code == 200
    assert len(response.json()) == 8


def test_analyze(client):
    analysis = {"category": "environment", "summary": "Illegal tree cutting", "priority": "high"}
    override_analyzer(FakeLlmProvider("groq", [json.dumps(analysis), "Illegal Tree Cutting at Camp 7"]))

    response = client.post("/api/v1/analysis", json={"description": "May nagpuputol ng pine trees sa Camp 7"})

    assert response.status_code == 200
    body = response.json()
    assert body["category"] == "Environment"
    assert body["department"] == "City Environment Office"
    assert body["title"] == "Illegal Tree Cutting at Camp 7"
    assert body["provider"] == "groq"


def test_analyze_all_providers_down(client):
    override_analyzer(
        FakeLlmProvider("groq", [LlmProviderError("groq", "HTTP 503 - down")]),
        FakeLlmProvider("gemini", [LlmProviderError("gemini", "HTTP 500 - internal")]),
    )

    response = client.post("/api/v1/analysis", json={"description": "Walang ilaw sa poste"})

    assert response.status_code == 502
    assert "primary failed: groq" in response.json()["detail"]


def test_resolve_barangay(client):
    response = client.post("/api/v1/geofence/resolve", json={"longitude": 120.5977, "latitude": 16.4116})

    assert response.status_code == 200
    body = response.json()
    assert body["barangay"] == "Session Road Area"
    assert body["method"] == "polygon"
    assert body["assigned_to"] == "Session Road Area Barangay LGU"


def test_resolve_outside_city(client):
    response = client.post("/api/v1/geofence/resolve", json={"longitude": 120.5977, "latitude": 16.86})

    assert response.status_code == 200
    assert response.json()["barangay"] is None


def test_resolve_rejects_bad_coordinates(client):
    response = client.post("/api/v1/geofence/resolve", json={"longitude": 200, "latitude": 16.4})
    assert response.status_code == 422
