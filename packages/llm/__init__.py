"""
LLM Package

Text-generation providers and the dual-provider failover client.

Available providers:
    - GroqProvider: OpenAI-compatible chat completions (primary for analysis)
    - GeminiProvider: Gemini generateContent (validation, secondary for analysis)

Configuration via environment:
    - GROQ_API_KEY / GEMINI_API_KEY: A provider exists only when its key is set
    - GROQ_CHAT_MODEL / GEMINI_CHAT_MODEL: Model names
    - LLM_TIMEOUT_SECONDS: Per-call timeout (default: 20)
"""
from packages.llm.base import AllProvidersFailedError, LlmProvider, LlmProviderError
from packages.llm.dual import DualProviderClient, LlmJsonResult, LlmTextResult
from packages.llm.factory import create_dual_client, create_gemini_provider, create_groq_provider
from packages.llm.json_utils import parse_json_object, repair_truncated_json
from packages.llm.provider_gemini import GeminiProvider
from packages.llm.provider_groq import GroqProvider

__all__ = [
    "AllProvidersFailedError",
    "DualProviderClient",
    "GeminiProvider",
    "GroqProvider",
    "LlmJsonResult",
    "LlmProvider",
    "LlmProviderError",
    "LlmTextResult",
    "create_dual_client",
    "create_gemini_provider",
    "create_groq_provider",
    "parse_json_object",
    "repair_truncated_json",
]
