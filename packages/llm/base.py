"""
LLM Provider Base Interface

Every provider turns (system instruction, user text) into a plain string,
hiding the provider's response envelope:
- Groq (OpenAI-compatible): choices[0].message.content
- Gemini: candidates[0].content.parts[0].text
"""
from typing import Protocol


class LlmProviderError(RuntimeError):
    """A provider call failed (HTTP error, empty or unusable response)"""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class AllProvidersFailedError(RuntimeError):
    """Primary and secondary providers both failed; failures maps role to error"""

    def __init__(self, failures: dict[str, str]):
        summary = "; ".join(f"{role} failed: {error}" for role, error in failures.items())
        super().__init__(f"All LLM providers failed ({summary})")
        self.failures = failures


class LlmProvider(Protocol):
    """Protocol for text-generation providers"""

    name: str

    async def complete(self, system: str, user: str, json_mode: bool = False) -> str:
        """
        Generate a completion.

        Args:
            system: System-style instruction
            user: User message
            json_mode: Ask the provider to constrain output to a JSON object

        Returns:
            Raw response text

        Raises:
            LlmProviderError: On HTTP errors or when no usable content came back
        """
        ...
