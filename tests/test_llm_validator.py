from unittest.mock import AsyncMock

import pytest

from conftest import FakeLlmProvider
from packages.domain.categorization.llm_validator import (
    SYSTEM_PROMPT,
    LLMValidator,
    build_validation_prompt,
    clean_response,
)
from packages.domain.categorization.schemas import CategoryMatch, ValidationStatus
from packages.llm.base import LlmProviderError


@pytest.fixture
def top_matches(categories):
    similarities = [0.61, 0.55, 0.32]
    return [
        CategoryMatch(category_id=c.category_id, similarity=s, category=c)
        for c, s in zip(categories, similarities)
    ]


def test_prompt_lists_candidates_in_order(top_matches):
    prompt = build_validation_prompt("Baradong kanal sa Magsaysay", top_matches)

    assert '"Baradong kanal sa Magsaysay"' in prompt
    assert "1. infrastructure: Roads & Infrastructure (61.0% similarity)" in prompt
    assert "2. traffic_transport: Traffic & Transport (55.0% similarity)" in prompt
    assert "3. waste_sanitation: Waste & Sanitation (32.0% similarity)" in prompt
    assert "   Description: garbage basura baradong kanal mabaho" in prompt
    assert prompt.index("infrastructure:") < prompt.index("traffic_transport:") < prompt.index("waste_sanitation:")


def test_clean_response():
    assert clean_response('  "waste_sanitation"\n') == "waste_sanitation"
    assert clean_response("'infrastructure'") == "infrastructure"


@pytest.mark.asyncio
async def test_accepts_candidate_choice(top_matches):
    provider = FakeLlmProvider("gemini", ['"waste_sanitation"'])
    outcome = await LLMValidator(provider).validate("Baradong kanal sa Magsaysay", top_matches)

    assert outcome.category_id == "waste_sanitation"
    assert outcome.status == ValidationStatus.ACCEPTED
    assert not outcome.fell_back
    assert provider.calls[0]["system"] == SYSTEM_PROMPT
    assert provider.calls[0]["json_mode"] is False


@pytest.mark.asyncio
async def test_invalid_choice_falls_back_to_top_match(top_matches):
    provider = FakeLlmProvider("gemini", ["flooding"])
    outcome = await LLMValidator(provider).validate("Baha sa kalsada", top_matches)

    assert outcome.category_id == "infrastructure"
    assert outcome.status == ValidationStatus.INVALID_RESPONSE
    assert outcome.raw_response == "flooding"
    assert outcome.fell_back


@pytest.mark.asyncio
async def test_provider_error_falls_back_to_top_match(top_matches):
    provider = FakeLlmProvider("gemini", [LlmProviderError("gemini", "HTTP 429 - quota")])
    outcome = await LLMValidator(provider).validate("Baha sa kalsada", top_matches)

    assert outcome.category_id == "infrastructure"
    assert outcome.status == ValidationStatus.PROVIDER_ERROR
    assert "429" in outcome.detail


@pytest.mark.asyncio
async def test_without_provider_is_skipped(top_matches):
    outcome = await LLMValidator(None).validate("Baha sa kalsada", top_matches)

    assert outcome.category_id == "infrastructure"
    assert outcome.status == ValidationStatus.SKIPPED


@pytest.mark.asyncio
async def test_validator_passes_system_prompt_to_provider(top_matches):
    provider = AsyncMock()
    provider.name = "gemini"
    provider.complete.return_value = "traffic_transport\n"

    outcome = await LLMValidator(provider).validate("Trapik sa Bonifacio", top_matches)

    assert outcome.category_id == "traffic_transport"
    provider.complete.assert_awaited_once()
    system, prompt = provider.complete.await_args.args
    assert system == SYSTEM_PROMPT
    assert "Trapik sa Bonifacio" in prompt
