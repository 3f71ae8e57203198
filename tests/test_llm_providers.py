import json

import httpx
import pytest

from packages.common.config import Settings
from packages.llm.base import LlmProviderError
from packages.llm.factory import create_dual_client, create_gemini_provider, create_groq_provider
from packages.llm.provider_gemini import GeminiProvider
from packages.llm.provider_groq import GroqProvider


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def groq_reply(content, finish_reason="stop"):
    return {"choices": [{"message": {"role": "assistant", "content": content}, "finish_reason": finish_reason}]}


def gemini_reply(*texts, finish_reason="STOP"):
    return {"candidates": [{"content": {"parts": [{"text": t} for t in texts]}, "finishReason": finish_reason}]}


@pytest.mark.asyncio
async def test_groq_request_shape():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=groq_reply('{"category": "infrastructure"}'))

    async with mock_client(handler) as client:
        provider = GroqProvider(api_key="groq-key", client=client)
        text = await provider.complete("system prompt", "user text", json_mode=True)

    assert text == '{"category": "infrastructure"}'
    assert seen["url"] == "https://api.groq.com/openai/v1/chat/completions"
    assert seen["auth"] == "Bearer groq-key"
    assert seen["body"]["model"] == "llama-3.1-8b-instant"
    assert seen["body"]["messages"] == [
        {"role": "system", "content": "system prompt"},
        {"role": "user", "content": "user text"},
    ]
    assert seen["body"]["response_format"] == {"type": "json_object"}
    assert seen["body"]["max_tokens"] == 500


@pytest.mark.asyncio
async def test_groq_plain_text_has_no_response_format():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=groq_reply("Pothole on Session Road"))

    async with mock_client(handler) as client:
        await GroqProvider(api_key="groq-key", client=client).complete("s", "u")

    assert "response_format" not in seen["body"]


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [
    httpx.Response(429, json={"error": {"message": "rate limited"}}),
    httpx.Response(200, json={"choices": []}),
    httpx.Response(200, json=groq_reply("", finish_reason="length")),
    httpx.Response(200, text="<html>bad gateway</html>"),
])
async def test_groq_unusable_responses_raise(response):
    async with mock_client(lambda request: response) as client:
        with pytest.raises(LlmProviderError) as exc_info:
            await GroqProvider(api_key="groq-key", client=client).complete("s", "u")

    assert exc_info.value.provider == "groq"


@pytest.mark.asyncio
async def test_groq_truncated_content_is_returned():
    async with mock_client(lambda request: httpx.Response(200, json=groq_reply('{"a": 1', "length"))) as client:
        text = await GroqProvider(api_key="groq-key", client=client).complete("s", "u")

    assert text == '{"a": 1'


@pytest.mark.asyncio
async def test_gemini_request_shape():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["key"] = request.headers["x-goog-api-key"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=gemini_reply('{"category": ', '"utilities"}'))

    async with mock_client(handler) as client:
        provider = GeminiProvider(api_key="gemini-key", client=client)
        text = await provider.complete("system prompt", "user text", json_mode=True)

    assert text == '{"category": "utilities"}'
    assert seen["url"] == "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.5-flash:generateContent"
    assert seen["key"] == "gemini-key"
    assert seen["body"]["systemInstruction"] == {"parts": [{"text": "system prompt"}]}
    assert seen["body"]["contents"] == [{"role": "user", "parts": [{"text": "user text"}]}]
    assert seen["body"]["generationConfig"]["responseMimeType"] == "application/json"
    assert seen["body"]["generationConfig"]["thinkingConfig"] == {"thinkingBudget": 0}
    assert seen["body"]["generationConfig"]["maxOutputTokens"] == 500


@pytest.mark.asyncio
async def test_gemini_blocked_prompt_raises():
    blocked = {"promptFeedback": {"blockReason": "SAFETY"}}

    async with mock_client(lambda request: httpx.Response(200, json=blocked)) as client:
        with pytest.raises(LlmProviderError, match="SAFETY"):
            await GeminiProvider(api_key="gemini-key", client=client).complete("s", "u")


@pytest.mark.asyncio
async def test_gemini_http_error_raises():
    async with mock_client(lambda request: httpx.Response(500, text="internal")) as client:
        with pytest.raises(LlmProviderError, match="HTTP 500"):
            await GeminiProvider(api_key="gemini-key", client=client).complete("s", "u")


def test_factories_need_credentials(offline_settings):
    assert create_gemini_provider(offline_settings) is None
    assert create_groq_provider(offline_settings) is None

    dual = create_dual_client(offline_settings)
    assert dual.primary is None
    assert dual.secondary is None
    assert not dual.available


def test_dual_client_orders_groq_first(offline_settings):
    settings = offline_settings.model_copy(update={"gemini_api_key": "g", "groq_api_key": "q"})
    dual = create_dual_client(settings)

    assert dual.primary.name == "groq"
    assert dual.secondary.name == "gemini"
    assert dual.primary.timeout == settings.llm_timeout_seconds


@pytest.mark.asyncio
async def test_gemini_thinking_config_can_be_omitted():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=gemini_reply("waste_sanitation"))

    async with mock_client(handler) as client:
        provider = GeminiProvider(api_key="gemini-key", model="gemini-2.0-flash", thinking_budget=None, client=client)
        await provider.complete("s", "u")

    assert "thinkingConfig" not in seen["body"]["generationConfig"]


@pytest.mark.asyncio
async def test_gemini_max_tokens_without_text_raises():
    truncated = {"candidates": [{"content": {"role": "model"}, "finishReason": "MAX_TOKENS"}]}

    async with mock_client(lambda request: httpx.Response(200, json=truncated)) as client:
        with pytest.raises(LlmProviderError, match="MAX_TOKENS"):
            await GeminiProvider(api_key="gemini-key", client=client).complete("s", "u")


def test_gemini_thinking_budget_from_settings(offline_settings):
    settings = offline_settings.model_copy(update={"gemini_api_key": "g", "gemini_thinking_budget": None})

    assert create_gemini_provider(offline_settings.model_copy(update={"gemini_api_key": "g"})).thinking_budget == 0
    assert create_gemini_provider(settings).thinking_budget is None


def test_blank_thinking_budget_is_unset():
    assert Settings(_env_file=None, gemini_thinking_budget="").gemini_thinking_budget is None
    assert Settings(_env_file=None, gemini_thinking_budget="512").gemini_thinking_budget == 512
