"""
Categorization API - assign a citizen report to a department category
"""
from typing import List

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from apps.api.dependencies import get_categorizer
from packages.domain.categorization import Category, CategoryResult, EmptyInputError
from packages.domain.categorization.categorization_service import CategorizationService

logger = structlog.get_logger()
router = APIRouter()


class CategorizeRequest(BaseModel):
    text: str = Field(..., description="Citizen's report description", max_length=5000)


@router.post("", response_model=CategoryResult)
async def categorize_report(
    request: CategorizeRequest,
    service: CategorizationService = Depends(get_categorizer),
) -> CategoryResult:
    """
    Categorize a report.

    Always returns a category unless the text is empty or the category
    datasets are broken; degraded services lower confidence instead of failing.
    """
    try:
        return await service.categorize(request.text)
    except EmptyInputError as e:
        logger.warning("categorize_rejected", reason=str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/categories", response_model=List[Category])
async def list_categories(
    service: CategorizationService = Depends(get_categorizer),
) -> List[Category]:
    """List the categories reports can be assigned to"""
    return list(service.store.categories().values())
