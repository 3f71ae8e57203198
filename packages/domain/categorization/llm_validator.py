"""
LLM Validator - second opinion for borderline embedding matches

Given the report and its top embedding candidates, asks an LLM to pick one
category id. The validator never raises for LLM problems: a missing key,
a failed call, or an answer outside the candidate set all resolve to the
top embedding match, with the reason recorded on the ValidationOutcome.
"""
from typing import List, Optional

import structlog

from packages.domain.categorization.schemas import (
    CategoryMatch,
    ValidationOutcome,
    ValidationStatus,
)
from packages.llm.base import LlmProvider

logger = structlog.get_logger()

SYSTEM_PROMPT = "You are a report classification system for a local government unit (LGU)."


def build_validation_prompt(report_text: str, top_matches: List[CategoryMatch]) -> str:
    """
    Build the candidate-selection prompt.

    Args:
        report_text: Original citizen report
        top_matches: Candidates in ranked order

    Returns:
        Prompt asking for exactly one category_id
    """
    category_list = "\n\n".join(
        f"{i}. {m.category_id}: {m.category.name} ({m.similarity * 100:.1f}% similarity)\n"
        f"   Description: {m.category.text_for_embedding}"
        for i, m in enumerate(top_matches, 1)
    )

    return f"""Given this citizen report:
"{report_text}"

Top category matches from embedding similarity analysis:
{category_list}

Based on the report content, return ONLY the single best matching category_id from the list above.
Return just the category_id (e.g., "waste_sanitation"), nothing else - no explanation, no formatting, no punctuation."""


def clean_response(response: str) -> str:
    """Strip quote characters and surrounding whitespace"""
    return response.replace('"', "").replace("'", "").strip()


class LLMValidator:
    """
    Picks one of the top embedding matches with an LLM.

    Usage:
        validator = LLMValidator(provider=create_gemini_provider())
        outcome = await validator.validate(text, top_matches)
        print(outcome.category_id, outcome.status)
    """

    def __init__(self, provider: Optional[LlmProvider] = None):
        """
        Args:
            provider: LLM provider, or None when no credential is configured
        """
        self.provider = provider
        if provider is None:
            logger.warning("llm_validator_disabled",
                           message="No LLM credential configured, validation will use the embedding match")

    async def validate(self, report_text: str, top_matches: List[CategoryMatch]) -> ValidationOutcome:
        """
        Choose the best category among top_matches.

        Args:
            report_text: Original report text
            top_matches: Ranked candidates (at least one)

        Returns:
            ValidationOutcome; category_id is always one of the candidates
        """
        best = top_matches[0].category_id

        if self.provider is None:
            return ValidationOutcome(
                category_id=best,
                status=ValidationStatus.SKIPPED,
                detail="No LLM credential configured",
            )

        prompt = build_validation_prompt(report_text, top_matches)

        try:
            response = await self.provider.complete(SYSTEM_PROMPT, prompt)
        except Exception as e:
            logger.error("llm_validation_failed",
                         provider=self.provider.name,
                         error=str(e),
                         fallback_category=best)
            return ValidationOutcome(
                category_id=best,
                status=ValidationStatus.PROVIDER_ERROR,
                detail=str(e) or type(e).__name__,
            )

        chosen = clean_response(response)
        valid_ids = [m.category_id for m in top_matches]

        if chosen in valid_ids:
            logger.info("llm_validation_complete",
                        provider=self.provider.name,
                        category=chosen,
                        agreed_with_embedding=chosen == best)
            return ValidationOutcome(
                category_id=chosen,
                status=ValidationStatus.ACCEPTED,
                raw_response=response,
            )

        logger.warning("llm_validation_invalid_category",
                       provider=self.provider.name,
                       response=response,
                       valid_ids=valid_ids,
                       fallback_category=best)
        return ValidationOutcome(
            category_id=best,
            status=ValidationStatus.INVALID_RESPONSE,
            raw_response=response,
            detail=f"LLM returned invalid category: {response}",
        )
