"""
Issue Analyzer - structured LLM reading of a citizen report

Runs in the reporting wizard before the report is submitted:
1. Dual-provider JSON analysis (Groq first, Gemini on failure)
2. Map free-form category/priority onto the fixed enums
3. Route to a department and derive the urgency wording from priority
4. Generate a short title from the summary

Unlike categorization, analysis fails loudly when both providers fail:
there is no numeric fallback for a summary or suggested actions.
"""
from typing import Any, Dict, Optional

import structlog

from packages.domain.analysis.schemas import IssueAnalysis, IssueCategory, IssuePriority
from packages.domain.categorization.exceptions import EmptyInputError
from packages.llm.base import AllProvidersFailedError
from packages.llm.dual import DualProviderClient

logger = structlog.get_logger()

TITLE_MAX_CHARS = 50

ANALYSIS_SYSTEM_PROMPT = """You are an AI assistant for AYOS, a citizen reporting app in the Philippines.
Analyze the user's description and return ONLY valid JSON with this exact structure:
{
  "category": "infrastructure/utilities/environment/public safety/social services/other",
  "subcategory": "specific issue type",
  "summary": "brief summary",
  "priority": "low/medium/high",
  "suggested_actions": ["action1", "action2", "action3"],
  "keywords": ["keyword1", "keyword2", "keyword3"],
  "location": "extracted location or area",
  "urgency_assessment": "brief urgency description"
}

Return ONLY the JSON object, no other text."""

TITLE_SYSTEM_PROMPT = """You write titles for citizen issue reports.
Return a single short title (at most 8 words) in title case.
No quotes, no punctuation at the end, no explanation."""

_CATEGORY_MAP = {
    "infrastructure": IssueCategory.INFRASTRUCTURE,
    "utilities": IssueCategory.UTILITIES,
    "environment": IssueCategory.ENVIRONMENT,
    "public safety": IssueCategory.PUBLIC_SAFETY,
    "public_safety": IssueCategory.PUBLIC_SAFETY,
    "social services": IssueCategory.SOCIAL_SERVICES,
    "social_services": IssueCategory.SOCIAL_SERVICES,
    "other": IssueCategory.OTHER,
}

_PRIORITY_MAP = {
    "low": IssuePriority.LOW,
    "medium": IssuePriority.MEDIUM,
    "high": IssuePriority.HIGH,
}

DEPARTMENTS = {
    IssueCategory.INFRASTRUCTURE: "DPWH - Roads Division",
    IssueCategory.UTILITIES: "Baguio City Utilities",
    IssueCategory.ENVIRONMENT: "City Environment Office",
    IssueCategory.PUBLIC_SAFETY: "Public Safety Division",
    IssueCategory.SOCIAL_SERVICES: "Social Welfare Department",
    IssueCategory.OTHER: "General Services Office",
}

URGENCY = {
    IssuePriority.HIGH: "Requires immediate attention",
    IssuePriority.MEDIUM: "Should be addressed within days",
    IssuePriority.LOW: "Can be scheduled for regular maintenance",
}


def map_category(value: Optional[str]) -> IssueCategory:
    """Map a free-form category onto IssueCategory (unknown → OTHER)"""
    if not value:
        return IssueCategory.OTHER
    return _CATEGORY_MAP.get(str(value).lower().strip(), IssueCategory.OTHER)


def map_priority(value: Optional[str]) -> IssuePriority:
    """Map a free-form priority onto IssuePriority (unknown → MEDIUM)"""
    if not value:
        return IssuePriority.MEDIUM
    return _PRIORITY_MAP.get(str(value).lower().strip(), IssuePriority.MEDIUM)


def department_for(category: IssueCategory) -> str:
    return DEPARTMENTS.get(category, "Appropriate Department")


def urgency_for(priority: IssuePriority) -> str:
    return URGENCY.get(priority, "Needs assessment")


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item]


class IssueAnalyzer:
    """
    LLM-backed issue analysis with Groq → Gemini failover.

    Usage:
        analyzer = IssueAnalyzer(create_dual_client())
        analysis = await analyzer.analyze("Walang ilaw sa poste sa Legarda Road")
        print(analysis.category, analysis.department, analysis.title)
    """

    def __init__(self, client: DualProviderClient):
        self.client = client

    async def analyze(self, description: str, with_title: bool = True) -> IssueAnalysis:
        """
        Analyze a report description.

        Args:
            description: Citizen's free-text description
            with_title: Also generate a report title

        Returns:
            IssueAnalysis

        Raises:
            EmptyInputError: If the description is empty
            AllProvidersFailedError: If both LLM providers failed
        """
        if not description or not description.strip():
            raise EmptyInputError("Report description cannot be empty")

        logger.info("issue_analysis_started", chars=len(description))

        result = await self.client.complete_json(
            ANALYSIS_SYSTEM_PROMPT,
            f'Analyze this community issue report: "{description}"',
        )
        analysis = self._build_analysis(result.data, result.provider)

        if with_title:
            analysis.title = await self.generate_title(analysis.summary)

        logger.info("issue_analysis_complete",
                    provider=analysis.provider,
                    category=analysis.category.value,
                    priority=analysis.priority.value,
                    department=analysis.department)

        return analysis

    async def generate_title(self, summary: str) -> str:
        """
        Generate a short report title.

        Falls back to the first 50 characters of the summary when no
        provider answers.
        """
        try:
            result = await self.client.complete_text(TITLE_SYSTEM_PROMPT, summary)
        except AllProvidersFailedError as e:
            logger.warning("title_generation_failed", error=str(e))
            return summary[:TITLE_MAX_CHARS].strip() or "Issue Report"

        title = result.text.strip().strip('"').strip("'").strip()
        return title or summary[:TITLE_MAX_CHARS].strip() or "Issue Report"

    def _build_analysis(self, data: Dict[str, Any], provider: str) -> IssueAnalysis:
        category = map_category(data.get("category"))
        priority = map_priority(data.get("priority"))

        return IssueAnalysis(
            category=category,
            subcategory=str(data.get("subcategory") or "General"),
            summary=str(data.get("summary") or "No summary provided"),
            priority=priority,
            suggested_actions=_string_list(data.get("suggested_actions")),
            keywords=_string_list(data.get("keywords")),
            location=str(data.get("location") or ""),
            urgency_assessment=urgency_for(priority),
            department=department_for(category),
            provider=provider,
        )
