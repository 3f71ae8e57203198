"""
Issue analysis API - summary, priority, department and title for a new report
"""
import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from apps.api.dependencies import get_issue_analyzer
from packages.domain.analysis import IssueAnalysis, IssueAnalyzer
from packages.domain.categorization import EmptyInputError
from packages.llm import AllProvidersFailedError

logger = structlog.get_logger()
router = APIRouter()


class AnalyzeRequest(BaseModel):
    description: str = Field(..., description="Citizen's report description", max_length=5000)
    with_title: bool = Field(default=True, description="Also generate a short title")


@router.post("", response_model=IssueAnalysis)
async def analyze_issue(
    request: AnalyzeRequest,
    analyzer: IssueAnalyzer = Depends(get_issue_analyzer),
) -> IssueAnalysis:
    """
    Analyze a report with the primary LLM, failing over to the secondary.

    Returns 502 when both providers fail.
    """
    try:
        return await analyzer.analyze(request.description, with_title=request.with_title)
    except EmptyInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except AllProvidersFailedError as e:
        logger.error("issue_analysis_unavailable", failures=e.failures)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to analyze issue with AI. Please try again. ({e})",
        )
