"""
Data schemas for issue analysis
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class IssueCategory(str, Enum):
    """Broad issue category used for department routing"""
    INFRASTRUCTURE = "Infrastructure"
    UTILITIES = "Utilities"
    ENVIRONMENT = "Environment"
    PUBLIC_SAFETY = "Public Safety"
    SOCIAL_SERVICES = "Social Services"
    OTHER = "Other"


class IssuePriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class IssueAnalysis(BaseModel):
    """Structured reading of a citizen's description"""
    category: IssueCategory
    subcategory: str = Field(default="General", description="Specific issue type")
    summary: str = Field(default="No summary provided")
    priority: IssuePriority = IssuePriority.MEDIUM
    suggested_actions: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)
    location: str = Field(default="", description="Location mentioned in the report, if any")
    urgency_assessment: str = Field(default="")
    department: str = Field(..., description="Office the report is routed to")
    title: Optional[str] = Field(default=None, description="Short generated report title")
    provider: str = Field(..., description="LLM provider that produced the analysis")

    class Config:
        json_schema_extra = {
            "example": {
                "category": "Infrastructure",
                "subcategory": "Pothole",
                "summary": "Large pothole on Session Road causing traffic.",
                "priority": "high",
                "suggested_actions": ["Inspect site", "Patch pothole", "Place warning signs"],
                "keywords": ["pothole", "road", "Session Road"],
                "location": "Session Road",
                "urgency_assessment": "Requires immediate attention",
                "department": "DPWH - Roads Division",
                "title": "Large Pothole on Session Road",
                "provider": "groq",
            }
        }
