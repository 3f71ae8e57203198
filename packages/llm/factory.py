"""
LLM provider construction from settings.

A provider is only built when its API key is configured; callers treat
None as "not available" and short-circuit.
"""
from typing import Optional

import httpx

from packages.common.config import Settings, get_settings
from packages.llm.dual import DualProviderClient
from packages.llm.provider_gemini import GeminiProvider
from packages.llm.provider_groq import GroqProvider


def create_gemini_provider(
    settings: Optional[Settings] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[GeminiProvider]:
    settings = settings or get_settings()
    if not settings.gemini_api_key:
        return None

    return GeminiProvider(
        api_key=settings.gemini_api_key,
        model=settings.gemini_chat_model,
        base_url=settings.gemini_base_url,
        timeout=settings.llm_timeout_seconds,
        max_tokens=settings.llm_max_tokens,
        thinking_budget=settings.gemini_thinking_budget,
        client=client,
    )


def create_groq_provider(
    settings: Optional[Settings] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[GroqProvider]:
    settings = settings or get_settings()
    if not settings.groq_api_key:
        return None

    return GroqProvider(
        api_key=settings.groq_api_key,
        model=settings.groq_chat_model,
        base_url=settings.groq_base_url,
        timeout=settings.llm_timeout_seconds,
        max_tokens=settings.llm_max_tokens,
        client=client,
    )


def create_dual_client(
    settings: Optional[Settings] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> DualProviderClient:
    """Groq first, Gemini second"""
    settings = settings or get_settings()
    return DualProviderClient(
        primary=create_groq_provider(settings, client),
        secondary=create_gemini_provider(settings, client),
    )
