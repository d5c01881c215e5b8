import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import anthropic
import httpx
import pytest

from roast_bot.exceptions import ProviderError
from roast_bot.github.schemas import FileChange
from roast_bot.llm.prompts import SYSTEM_PERSONA, build_prompt
from roast_bot.llm.providers import (
    PROVIDERS,
    AnthropicProvider,
    GeminiProvider,
    GroqProvider,
    HuggingFaceProvider,
    build_provider,
)
from roast_bot.llm.providers.huggingface import extract_answer, wrap_instruction


def json_transport(payload, status_code=200, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=payload)

    return httpx.MockTransport(handler)


class TestBuildProvider:
    def test_default_is_groq(self, settings):
        assert isinstance(build_provider(settings), GroqProvider)

    @pytest.mark.parametrize("name", sorted(PROVIDERS))
    def test_selects_by_name(self, settings, name):
        settings.ai_provider = name
        provider = build_provider(settings)
        assert isinstance(provider, PROVIDERS[name])
        assert provider.name == name

    def test_unknown_falls_back_to_groq(self, settings):
        settings.ai_provider = "openai"
        assert isinstance(build_provider(settings), GroqProvider)

    def test_carries_limits_from_settings(self, settings):
        settings.max_tokens = 256
        settings.temperature = 0.1
        settings.provider_timeout = 5
        provider = build_provider(settings)
        assert provider.max_tokens == 256
        assert provider.temperature == 0.1
        assert provider.timeout == 5


class TestGroqProvider:
    def make(self):
        return GroqProvider(api_key="gsk", model="llama-3.3-70b-versatile", max_tokens=1000, temperature=0.8)

    @pytest.mark.asyncio
    async def test_returns_first_choice(self):
        response = SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content="Nice PR 🔥"))])
        with patch("roast_bot.llm.providers.groq.litellm.acompletion", AsyncMock(return_value=response)) as call:
            assert await self.make().generate("prompt") == "Nice PR 🔥"

        kwargs = call.await_args.kwargs
        assert kwargs["model"] == "groq/llama-3.3-70b-versatile"
        assert kwargs["messages"] == [
            {"role": "system", "content": SYSTEM_PERSONA},
            {"role": "user", "content": "prompt"},
        ]
        assert kwargs["max_tokens"] == 1000
        assert kwargs["temperature"] == 0.8
        assert kwargs["timeout"] == 30.0

    @pytest.mark.asyncio
    async def test_call_failure(self):
        with patch("roast_bot.llm.providers.groq.litellm.acompletion", AsyncMock(side_effect=RuntimeError("boom"))):
            with pytest.raises(ProviderError, match="boom"):
                await self.make().generate("prompt")

    @pytest.mark.asyncio
    async def test_empty_choices(self):
        with patch("roast_bot.llm.providers.groq.litellm.acompletion", AsyncMock(return_value=SimpleNamespace(choices=[]))):
            with pytest.raises(ProviderError):
                await self.make().generate("prompt")


class TestGeminiProvider:
    @pytest.mark.asyncio
    async def test_request_and_extraction(self):
        seen = []
        payload = {"candidates": [{"content": {"parts": [{"text": "Gemini says hi"}]}}]}
        provider = GeminiProvider(
            api_key="g-key", model="gemini-1.5-flash", transport=json_transport(payload, seen=seen)
        )

        assert await provider.generate("prompt") == "Gemini says hi"

        request = seen[0]
        assert request.url.path == "/v1beta/models/gemini-1.5-flash:generateContent"
        assert request.url.params["key"] == "g-key"
        body = json.loads(request.content)
        assert body["contents"] == [{"parts": [{"text": "prompt"}]}]
        assert body["generationConfig"] == {"temperature": 0.8, "maxOutputTokens": 1000}

    @pytest.mark.asyncio
    async def test_http_error(self):
        provider = GeminiProvider(api_key="k", model="m", transport=json_transport({"error": "quota"}, 429))
        with pytest.raises(ProviderError):
            await provider.generate("prompt")

    @pytest.mark.asyncio
    async def test_unexpected_shape(self):
        provider = GeminiProvider(api_key="k", model="m", transport=json_transport({"candidates": []}))
        with pytest.raises(ProviderError):
            await provider.generate("prompt")


class TestHuggingFace:
    def test_wrap_instruction(self):
        assert wrap_instruction("hello") == "<s>[INST] hello [/INST]"

    def test_extract_answer(self):
        assert extract_answer("<s>[INST] hello [/INST]   Roasted!  \n") == "Roasted!"

    def test_extract_answer_delimiter_inside_prompt(self):
        prompt = build_prompt("T", "D", [FileChange(filename="a.py")], "+ tpl = '[/INST]'\n")
        assert extract_answer(wrap_instruction(prompt) + " Real answer.") == "Real answer."

    def test_extract_answer_without_delimiter(self):
        with pytest.raises(ProviderError):
            extract_answer("no delimiter here")

    @pytest.mark.asyncio
    async def test_request_and_extraction(self):
        seen = []
        payload = [{"generated_text": "<s>[INST] prompt [/INST] Your code is fine. Mostly."}]
        provider = HuggingFaceProvider(
            api_key="hf", model="mistralai/Mistral-7B-Instruct-v0.2", transport=json_transport(payload, seen=seen)
        )

        assert await provider.generate("prompt") == "Your code is fine. Mostly."

        request = seen[0]
        assert request.url.path == "/models/mistralai/Mistral-7B-Instruct-v0.2"
        assert request.headers["Authorization"] == "Bearer hf"
        body = json.loads(request.content)
        assert body["inputs"] == "<s>[INST] prompt [/INST]"
        assert body["parameters"] == {"max_new_tokens": 1000, "temperature": 0.8}

    @pytest.mark.asyncio
    async def test_missing_delimiter(self):
        provider = HuggingFaceProvider(
            api_key="hf", model="m", transport=json_transport([{"generated_text": "just text"}])
        )
        with pytest.raises(ProviderError):
            await provider.generate("prompt")

    @pytest.mark.asyncio
    async def test_error_object_instead_of_list(self):
        provider = HuggingFaceProvider(
            api_key="hf", model="m", transport=json_transport({"error": "Model is loading"})
        )
        with pytest.raises(ProviderError):
            await provider.generate("prompt")


class TestAnthropicProvider:
    def make(self, create):
        client = MagicMock()
        client.messages.create = create
        return AnthropicProvider(api_key="sk-ant", model="claude-3-5-sonnet-20241022", client=client)

    @pytest.mark.asyncio
    async def test_returns_first_block_text(self):
        create = AsyncMock(return_value=SimpleNamespace(content=[SimpleNamespace(text="Claude roast")]))
        provider = self.make(create)

        assert await provider.generate("prompt") == "Claude roast"
        create.assert_awaited_once_with(
            model="claude-3-5-sonnet-20241022",
            max_tokens=1000,
            messages=[{"role": "user", "content": "prompt"}],
        )

    @pytest.mark.asyncio
    async def test_api_error(self):
        error = anthropic.APIConnectionError(request=httpx.Request("POST", "https://api.anthropic.com/v1/messages"))
        provider = self.make(AsyncMock(side_effect=error))
        with pytest.raises(ProviderError):
            await provider.generate("prompt")

    @pytest.mark.asyncio
    async def test_empty_content(self):
        provider = self.make(AsyncMock(return_value=SimpleNamespace(content=[])))
        with pytest.raises(ProviderError):
            await provider.generate("prompt")
