"""Tests for generation clients."""

from unittest.mock import AsyncMock, Mock, patch

import pytest

from maint.errors import GenerationError
from maint.llm.client import (
    AnthropicGenerationClient,
    GenerationClientFactory,
    OpenAIGenerationClient,
    RoutingGenerationClient,
    TokenUsage,
)


def test_token_usage_total():
    assert TokenUsage(input_tokens=10, output_tokens=5).total_tokens == 15


@pytest.mark.asyncio
async def test_openai_client_generate():
    """Test OpenAIGenerationClient.generate() call."""
    with patch("maint.llm.client.openai") as mock_openai:
        mock_choice = Mock()
        mock_choice.message.content = "fixed code"
        mock_response = Mock()
        mock_response.choices = [mock_choice]
        mock_response.usage.prompt_tokens = 120
        mock_response.usage.completion_tokens = 30

        mock_client = AsyncMock()
        mock_client.chat.completions.create = AsyncMock(return_value=mock_response)
        mock_openai.AsyncOpenAI.return_value = mock_client

        client = OpenAIGenerationClient("test-key")
        result = await client.generate("gpt-4o-mini", "fix it", 100)

        assert result.text == "fixed code"
        assert result.model == "gpt-4o-mini"
        assert result.usage == TokenUsage(input_tokens=120, output_tokens=30)
        mock_client.chat.completions.create.assert_awaited_once_with(
            model="gpt-4o-mini",
            max_tokens=100,
            messages=[{"role": "user", "content": "fix it"}],
        )


@pytest.mark.asyncio
async def test_openai_client_wraps_errors():
    with patch("maint.llm.client.openai") as mock_openai:
        mock_openai.OpenAIError = RuntimeError
        mock_client = AsyncMock()
        mock_client.chat.completions.create = AsyncMock(side_effect=RuntimeError("rate limited"))
        mock_openai.AsyncOpenAI.return_value = mock_client

        client = OpenAIGenerationClient("test-key")

        with pytest.raises(GenerationError, match="rate limited"):
            await client.generate("gpt-4o-mini", "fix it", 100)


@pytest.mark.asyncio
async def test_anthropic_client_generate():
    """Test AnthropicGenerationClient.generate() call."""
    with patch("maint.llm.client.anthropic") as mock_anthropic:
        mock_response = Mock()
        mock_response.content = [Mock(type="text", text="review text")]
        mock_response.usage.input_tokens = 10
        mock_response.usage.output_tokens = 20

        mock_client = AsyncMock()
        mock_client.messages.create = AsyncMock(return_value=mock_response)
        mock_anthropic.AsyncAnthropic.return_value = mock_client

        client = AnthropicGenerationClient("test-key")
        result = await client.generate("claude-3-5-haiku-latest", "review", 200)

        assert result.text == "review text"
        assert result.usage.input_tokens == 10
        assert result.usage.output_tokens == 20
        mock_anthropic.AsyncAnthropic.assert_called_once_with(api_key="test-key")


def test_factory_infers_provider_from_prefix():
    assert GenerationClientFactory._infer_provider("gpt-4o") == "openai"
    assert GenerationClientFactory._infer_provider("claude-sonnet-4-20250514") == "anthropic"
    assert GenerationClientFactory._infer_provider("llama3") is None


def test_factory_returns_none_without_key():
    assert GenerationClientFactory.create("gpt-4o-mini") is None
    assert GenerationClientFactory.is_available() is False


def test_factory_creates_openai_client(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    with patch("maint.llm.client.openai"):
        client = GenerationClientFactory.create("gpt-4o-mini")
    assert isinstance(client, OpenAIGenerationClient)
    assert client.api_key == "sk-test"


def test_factory_unknown_model_uses_available_provider(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "ak-test")
    with patch("maint.llm.client.anthropic"):
        client = GenerationClientFactory.create("some-local-model")
    assert isinstance(client, AnthropicGenerationClient)


@pytest.mark.asyncio
async def test_routing_client_without_provider_raises():
    client = RoutingGenerationClient()
    with pytest.raises(GenerationError, match="No generation client"):
        await client.generate("gpt-4o-mini", "prompt", 10)


@pytest.mark.asyncio
async def test_routing_client_reuses_provider_client(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    fake = Mock()
    fake.generate = AsyncMock(return_value="generation")

    with patch.object(GenerationClientFactory, "create", return_value=fake) as create:
        client = RoutingGenerationClient()
        await client.generate("gpt-4o-mini", "a", 10)
        await client.generate("gpt-4o", "b", 10)

    create.assert_called_once_with("gpt-4o-mini")
    assert fake.generate.await_count == 2
