"""
Unit tests for provider adapters.

The SDK clients are replaced with mocks, so no network access is needed.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from fakes import make_request
from hera_ai.core.exceptions import MissingAPIKeyError, ProviderError
from hera_ai.services.routing import TaskType
from hera_ai.services.routing.providers import (
    ClaudeProvider,
    DeepSeekProvider,
    OllamaProvider,
    OpenAIProvider,
    ProviderConfig,
    SimulatedProvider,
)
from hera_ai.services.routing.providers.base_provider import SYSTEM_PROMPTS


async def async_iter(items):
    for item in items:
        yield item


def openai_completion(content="Hello from OpenAI", total_tokens=30):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content), finish_reason="stop")],
        usage=SimpleNamespace(total_tokens=total_tokens),
    )


def openai_chunk(content):
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=content))])


@pytest.fixture
def openai_client():
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=openai_completion())
    return client


@pytest.fixture
def openai_provider(openai_client):
    config = ProviderConfig(provider_type="openai", model="gpt-4o-mini", api_key="sk-test", cost_per_token=0.00003)
    return OpenAIProvider(config, client=openai_client)


@pytest.fixture
def claude_client():
    client = MagicMock()
    client.messages.create = AsyncMock(return_value=SimpleNamespace(
        content=[SimpleNamespace(type="text", text="Hello "), SimpleNamespace(type="text", text="from Claude")],
        usage=SimpleNamespace(input_tokens=20, output_tokens=15),
        stop_reason="end_turn",
    ))
    return client


@pytest.fixture
def claude_provider(claude_client):
    config = ProviderConfig(provider_type="claude", model="claude-3-5-sonnet-20241022", api_key="sk-ant-test", cost_per_token=0.000015)
    return ClaudeProvider(config, client=claude_client)


class TestOpenAIProvider:

    @pytest.mark.unit
    def test_missing_api_key(self):
        with pytest.raises(MissingAPIKeyError) as exc_info:
            OpenAIProvider(ProviderConfig(provider_type="openai", model="gpt-4o-mini"))

        assert exc_info.value.status_code == 501

    @pytest.mark.asyncio
    @pytest.mark.unit
    async def test_generate(self, openai_provider, openai_client):
        request = make_request(prompt="Hi there", task_type=TaskType.CODE, max_tokens=100, temperature=0.2)

        result = await openai_provider.generate(request)

        assert result.content == "Hello from OpenAI"
        assert result.tokens_used == 30
        assert result.cost_usd == pytest.approx(30 * 0.00003)
        assert result.model == "gpt-4o-mini"
        assert result.metadata["finish_reason"] == "stop"

        params = openai_client.chat.completions.create.await_args.kwargs
        assert params["model"] == "gpt-4o-mini"
        assert params["max_tokens"] == 100
        assert params["temperature"] == 0.2
        assert params["stream"] is False
        assert params["messages"][0] == {"role": "system", "content": SYSTEM_PROMPTS["code"]}
        assert params["messages"][-1] == {"role": "user", "content": "Hi there"}
        assert "response_format" not in params

    @pytest.mark.asyncio
    @pytest.mark.unit
    async def test_context_and_json_format(self, openai_provider, openai_client):
        request = make_request(context={"org": "salon"}, options={"response_format": "json"})

        await openai_provider.generate(request)

        params = openai_client.chat.completions.create.await_args.kwargs
        assert params["response_format"] == {"type": "json_object"}
        assert '"org": "salon"' in params["messages"][1]["content"]

    @pytest.mark.asyncio
    @pytest.mark.unit
    async def test_max_tokens_capped_to_provider_limit(self, openai_provider, openai_client):
        await openai_provider.generate(make_request(max_tokens=1_000_000))

        assert openai_client.chat.completions.create.await_args.kwargs["max_tokens"] == 4096

    @pytest.mark.asyncio
    @pytest.mark.unit
    async def test_sdk_error_wrapped(self, openai_provider, openai_client):
        openai_client.chat.completions.create.side_effect = RuntimeError("rate limited")

        with pytest.raises(ProviderError) as exc_info:
            await openai_provider.generate(make_request())

        assert exc_info.value.provider == "openai"
        assert "rate limited" in exc_info.value.message

    @pytest.mark.asyncio
    @pytest.mark.unit
    async def test_empty_prompt_rejected(self, openai_provider, openai_client):
        with pytest.raises(ProviderError):
            await openai_provider.generate(make_request(prompt="   "))

        openai_client.chat.completions.create.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.unit
    async def test_generate_without_options(self, openai_provider, openai_client):
        result = await openai_provider.generate(make_request(options=None))

        assert result.content == "Hello from OpenAI"
        assert "response_format" not in openai_client.chat.completions.create.await_args.kwargs

    @pytest.mark.asyncio
    @pytest.mark.unit
    async def test_stream(self, openai_provider, openai_client):
        openai_client.chat.completions.create.return_value = async_iter([
            openai_chunk("Hel"),
            openai_chunk(None),
            SimpleNamespace(choices=[]),
            openai_chunk("lo"),
        ])

        chunks = [chunk async for chunk in openai_provider.generate_stream(make_request())]

        assert chunks == ["Hel", "lo"]
        assert openai_client.chat.completions.create.await_args.kwargs["stream"] is True

    @pytest.mark.asyncio
    @pytest.mark.unit
    async def test_health_check(self, openai_provider, openai_client):
        assert await openai_provider.health_check() is True

        openai_client.chat.completions.create.side_effect = RuntimeError("down")
        assert await openai_provider.health_check() is False

    @pytest.mark.asyncio
    @pytest.mark.unit
    async def test_stats(self, openai_provider):
        await openai_provider.generate(make_request())

        stats = openai_provider.get_stats()
        assert stats["total_requests"] == 1
        assert stats["total_tokens"] == 30

        openai_provider.reset_stats()
        assert openai_provider.get_stats()["total_requests"] == 0


class TestOpenAICompatibleProviders:

    @pytest.mark.unit
    def test_deepseek_requires_key(self):
        with pytest.raises(MissingAPIKeyError):
            DeepSeekProvider(ProviderConfig(provider_type="deepseek", model=""))

    @pytest.mark.unit
    def test_deepseek_default_model(self):
        provider = DeepSeekProvider(ProviderConfig(provider_type="deepseek", model=""), client=MagicMock())
        assert provider.model == "deepseek-chat"
        assert provider.provider_name == "deepseek"

    @pytest.mark.unit
    def test_ollama_needs_no_key_and_is_free(self):
        provider = OllamaProvider(ProviderConfig(
            provider_type="ollama",
            model="llama3.1:8b",
            base_url="http://localhost:11434/v1",
            cost_per_token=0.001,
        ))

        assert provider.calculate_cost(1000) == 0.0


class TestClaudeProvider:

    @pytest.mark.unit
    def test_missing_api_key(self):
        with pytest.raises(MissingAPIKeyError):
            ClaudeProvider(ProviderConfig(provider_type="claude", model=""))

    @pytest.mark.asyncio
    @pytest.mark.unit
    async def test_generate(self, claude_provider, claude_client):
        request = make_request(task_type=TaskType.LEARNING, context={"course": "tax"})

        result = await claude_provider.generate(request)

        assert result.content == "Hello from Claude"
        assert result.tokens_used == 35
        assert result.metadata["input_tokens"] == 20
        assert result.metadata["stop_reason"] == "end_turn"

        params = claude_client.messages.create.await_args.kwargs
        assert params["system"].startswith(SYSTEM_PROMPTS["learning"])
        assert '"course": "tax"' in params["system"]
        assert params["messages"] == [{"role": "user", "content": request.prompt}]

    @pytest.mark.asyncio
    @pytest.mark.unit
    async def test_sdk_error_wrapped(self, claude_provider, claude_client):
        claude_client.messages.create.side_effect = RuntimeError("overloaded")

        with pytest.raises(ProviderError) as exc_info:
            await claude_provider.generate(make_request())

        assert exc_info.value.provider == "claude"

    @pytest.mark.asyncio
    @pytest.mark.unit
    async def test_temperature_clamped_to_anthropic_range(self, claude_provider, claude_client):
        await claude_provider.generate(make_request(temperature=1.6))
        assert claude_client.messages.create.await_args.kwargs["temperature"] == 1.0

        await claude_provider.generate(make_request(temperature=0.3))
        assert claude_client.messages.create.await_args.kwargs["temperature"] == 0.3

    @pytest.mark.asyncio
    @pytest.mark.unit
    async def test_stream(self, claude_provider, claude_client):
        claude_client.messages.create = AsyncMock(return_value=async_iter([
            SimpleNamespace(type="message_start"),
            SimpleNamespace(type="content_block_delta", delta=SimpleNamespace(type="text_delta", text="Hi ")),
            SimpleNamespace(type="content_block_delta", delta=SimpleNamespace(type="text_delta", text="there")),
            SimpleNamespace(type="message_stop"),
        ]))

        chunks = [chunk async for chunk in claude_provider.generate_stream(make_request())]

        assert chunks == ["Hi ", "there"]
        assert claude_client.messages.create.await_args.kwargs["stream"] is True

    @pytest.mark.asyncio
    @pytest.mark.unit
    async def test_health_check_failure(self, claude_provider, claude_client):
        claude_client.messages.create.side_effect = RuntimeError("down")
        assert await claude_provider.health_check() is False


class TestSimulatedProvider:

    @pytest.fixture
    def provider(self):
        return SimulatedProvider(ProviderConfig(provider_type="claude", model=""))

    @pytest.mark.asyncio
    @pytest.mark.unit
    async def test_generate_is_deterministic(self, provider):
        request = make_request(prompt="Explain VAT", task_type=TaskType.LEARNING)

        first = await provider.generate(request)
        second = await provider.generate(request)

        assert first.content == second.content
        assert first.content.startswith("[claude:simulated]")
        assert "Section" in first.content
        assert first.model == "simulated-claude"
        assert first.metadata["simulated"] is True

    @pytest.mark.asyncio
    @pytest.mark.unit
    async def test_stream_matches_generate(self, provider):
        request = make_request(prompt="Write a sorter", task_type=TaskType.CODE)

        chunks = [chunk async for chunk in provider.generate_stream(request)]
        result = await provider.generate(request)

        assert len(chunks) > 1
        assert "".join(chunks) == result.content

    @pytest.mark.asyncio
    @pytest.mark.unit
    async def test_health_check(self, provider):
        assert await provider.health_check() is True
