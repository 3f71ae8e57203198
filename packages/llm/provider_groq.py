"""
Groq LLM Provider

OpenAI-compatible chat completions endpoint. Primary provider for issue
analysis (fast, cheap, supports json_object response format).
"""
from typing import Optional

import httpx
import structlog

from packages.llm.base import LlmProviderError

logger = structlog.get_logger()


class GroqProvider:
    """Chat-completions client for api.groq.com"""

    name = "groq"

    def __init__(
        self,
        api_key: str,
        model: str = "llama-3.1-8b-instant",
        base_url: str = "https://api.groq.com/openai/v1",
        timeout: float = 20.0,
        max_tokens: int = 500,
        temperature: float = 0.1,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.client = client

    async def complete(self, system: str, user: str, json_mode: bool = False) -> str:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "stream": False,
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        url = f"{self.base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        logger.debug("groq_request", model=self.model, json_mode=json_mode)

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

        choices = data.get("choices") or []
        if not choices:
            raise LlmProviderError(self.name, "No choices in response")

        choice = choices[0]
        content = (choice.get("message") or {}).get("content")
        finish_reason = choice.get("finish_reason")

        if not content:
            raise LlmProviderError(self.name, f"Empty content (finish_reason={finish_reason})")

        if finish_reason not in (None, "stop"):
            logger.warning("groq_response_incomplete",
                           model=self.model,
                           finish_reason=finish_reason,
                           chars=len(content))

        return content
