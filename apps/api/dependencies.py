"""
FastAPI dependencies - process-wide services built from settings

Each service is created once and shared; overriding these in
app.dependency_overrides is how tests swap in fakes.
"""
from functools import lru_cache

from packages.common.config import get_settings
from packages.domain.analysis import IssueAnalyzer
from packages.domain.categorization.categorization_service import (
    CategorizationService,
    get_categorization_service,
)
from packages.domain.geofence import BoundaryRepository
from packages.llm.factory import create_dual_client


def get_categorizer() -> CategorizationService:
    return get_categorization_service()


@lru_cache()
def get_issue_analyzer() -> IssueAnalyzer:
    return IssueAnalyzer(create_dual_client(get_settings()))


@lru_cache()
def get_boundary_repository() -> BoundaryRepository:
    return BoundaryRepository(get_settings().barangay_boundaries_path)
