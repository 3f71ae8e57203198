"""
Dual-provider LLM client with failover

Strategy:
1. Try the primary provider (Groq)
2. On any failure (HTTP error, empty response, unparseable JSON) try the
   secondary provider (Gemini) with the same prompt
3. If both fail, raise AllProvidersFailedError describing both failures

There are no retries beyond the single failover.
"""
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

import structlog
from prometheus_client import Counter

from packages.llm.base import AllProvidersFailedError, LlmProvider, LlmProviderError
from packages.llm.json_utils import parse_json_object

logger = structlog.get_logger()

T = TypeVar("T")

LLM_PROVIDER_FAILURES = Counter(
    "ayos_llm_provider_failures_total",
    "LLM provider calls that failed and triggered failover",
    ["provider"],
)


@dataclass
class LlmJsonResult:
    data: Dict[str, Any]
    provider: str
    raw_response: str


@dataclass
class LlmTextResult:
    text: str
    provider: str


class DualProviderClient:
    """
    Primary/secondary failover around two LlmProviders.

    A provider set to None (missing credential) counts as a failure and is
    skipped without a network call. Failures are keyed by role
    ("primary", "secondary"); each message names the provider.
    """

    def __init__(self, primary: Optional[LlmProvider], secondary: Optional[LlmProvider]):
        self.primary = primary
        self.secondary = secondary

    @property
    def available(self) -> bool:
        return self.primary is not None or self.secondary is not None

    async def complete_json(self, system: str, user: str) -> LlmJsonResult:
        """
        Get a JSON object from the first provider that produces a parseable one.

        Raises:
            AllProvidersFailedError: If neither provider produced valid JSON
        """
        async def attempt(provider: LlmProvider) -> LlmJsonResult:
            raw = await provider.complete(system, user, json_mode=True)
            return LlmJsonResult(data=parse_json_object(raw), provider=provider.name, raw_response=raw)

        return await self._with_failover("complete_json", attempt)

    async def complete_text(self, system: str, user: str) -> LlmTextResult:
        """
        Get plain text from the first provider that answers.

        Raises:
            AllProvidersFailedError: If neither provider answered
        """
        async def attempt(provider: LlmProvider) -> LlmTextResult:
            text = await provider.complete(system, user, json_mode=False)
            return LlmTextResult(text=text.strip(), provider=provider.name)

        return await self._with_failover("complete_text", attempt)

    async def _with_failover(
        self,
        operation: str,
        attempt: Callable[[LlmProvider], Awaitable[T]],
    ) -> T:
        failures: Dict[str, str] = {}

        for role, provider in (("primary", self.primary), ("secondary", self.secondary)):
            if provider is None:
                failures[role] = "not configured"
                continue

            try:
                result = await attempt(provider)
            except Exception as e:
                LLM_PROVIDER_FAILURES.labels(provider=provider.name).inc()
                logger.warning("llm_provider_failed",
                               operation=operation,
                               role=role,
                               provider=provider.name,
                               error=str(e))
                detail = str(e) or type(e).__name__
                if not isinstance(e, LlmProviderError):
                    detail = f"{provider.name}: {detail}"
                failures[role] = detail
                continue

            if failures:
                logger.info("llm_failover_succeeded",
                            operation=operation,
                            provider=provider.name,
                            previous_failures=list(failures))
            return result

        logger.error("llm_all_providers_failed", operation=operation, failures=failures)
        raise AllProvidersFailedError(failures)
