"""
Gemini LLM Provider

generateContent endpoint. Used for category validation and as the
secondary provider for issue analysis.
"""
from typing import Optional

import httpx
import structlog

from packages.llm.base import LlmProviderError

logger = structlog.get_logger()


class GeminiProvider:
    """generateContent client for the Generative Language API"""

    name = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 20.0,
        max_tokens: int = 500,
        temperature: float = 0.1,
        thinking_budget: Optional[int] = 0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.thinking_budget = thinking_budget
        self.client = client

    async def complete(self, system: str, user: str, json_mode: bool = False) -> str:
        generation_config = {
            "temperature": self.temperature,
            "maxOutputTokens": self.max_tokens,
        }
        if json_mode:
            generation_config["responseMimeType"] = "application/json"
        # 2.5 models count thinking tokens against maxOutputTokens
        if self.thinking_budget is not None:
            generation_config["thinkingConfig"] = {"thinkingBudget": self.thinking_budget}

        payload = {
            "systemInstruction": {"parts": [{"text": system}]},
            "contents": [{"role": "user", "parts": [{"text": user}]}],
            "generationConfig": generation_config,
        }

        url = f"{self.base_url}/models/{self.model}:generateContent"
        headers = {"x-goog-api-key": self.api_key, "Content-Type": "application/json"}

        logger.debug("gemini_request", model=self.model, json_mode=json_mode)

        if self.client is not None:
            response = await self.client.post(url, json=payload, headers=headers, timeout=self.timeout)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=payload, headers=headers)

        if response.status_code != 200:
            raise LlmProviderError(self.name, f"HTTP {response.status_code} - {response.text}")

        try:
            data = response.json()
        except ValueError as e:
            raise LlmProviderError(self.name, f"Response body is not JSON: {e}") from e

        candidates = data.get("candidates") or []
        if not candidates:
            block_reason = (data.get("promptFeedback") or {}).get("blockReason")
            raise LlmProviderError(self.name, f"No candidates in response (blockReason={block_reason})")

        candidate = candidates[0]
        finish_reason = candidate.get("finishReason")
        parts = (candidate.get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts)

        if not text:
            raise LlmProviderError(self.name, f"Empty content (finishReason={finish_reason})")

        if finish_reason not in (None, "STOP"):
            logger.warning("gemini_response_incomplete",
                           model=self.model,
                           finish_reason=finish_reason,
                           chars=len(text))

        return text
