"""LLM clients for the text-generation service."""

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import ClassVar

import anthropic
import openai

from maint.errors import GenerationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenUsage:
    """Token counts reported for one generation call."""

    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


@dataclass
class Generation:
    """Response from the generation service."""

    text: str
    model: str
    usage: TokenUsage = field(default_factory=TokenUsage)


class GenerationClient(ABC):
    """Abstract text-generation client."""

    @abstractmethod
    async def generate(self, model: str, prompt: str, max_tokens: int) -> Generation:
        """Send ``prompt`` to ``model`` and return the generated text.

        Raises:
            GenerationError: If the service call fails.
        """
        pass


class OpenAIGenerationClient(GenerationClient):
    """OpenAI chat completions client."""

    def __init__(self, api_key: str):
        self.api_key = api_key
        self.client = openai.AsyncOpenAI(api_key=api_key)

    async def generate(self, model: str, prompt: str, max_tokens: int) -> Generation:
        """Call OpenAI API."""
        try:
            response = await self.client.chat.completions.create(
                model=model,
                max_tokens=max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except openai.OpenAIError as e:
            raise GenerationError(f"OpenAI request failed: {e}") from e

        usage = TokenUsage()
        if response.usage:
            usage = TokenUsage(
                input_tokens=response.usage.prompt_tokens,
                output_tokens=response.usage.completion_tokens,
            )

        return Generation(
            text=response.choices[0].message.content or "",
            model=model,
            usage=usage,
        )


class AnthropicGenerationClient(GenerationClient):
    """Anthropic messages client."""

    def __init__(self, api_key: str):
        self.api_key = api_key
        self.client = anthropic.AsyncAnthropic(api_key=api_key)

    async def generate(self, model: str, prompt: str, max_tokens: int) -> Generation:
        """Call Anthropic API."""
        try:
            response = await self.client.messages.create(
                model=model,
                max_tokens=max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.AnthropicError as e:
            raise GenerationError(f"Anthropic request failed: {e}") from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", "text") == "text"
        )
        return Generation(
            text=text,
            model=model,
            usage=TokenUsage(
                input_tokens=response.usage.input_tokens,
                output_tokens=response.usage.output_tokens,
            ),
        )


class GenerationClientFactory:
    """
    Factory for creating generation clients from a model name.

    The provider is inferred from the model prefix and the API key is read
    from the provider's environment variable.
    """

    # Provider -> (env var, model prefixes, client class)
    PROVIDERS: ClassVar[dict[str, tuple[str, tuple[str, ...], type]]] = {
        "openai": ("OPENAI_API_KEY", ("gpt-", "o1", "o3", "o4"), OpenAIGenerationClient),
        "anthropic": ("ANTHROPIC_API_KEY", ("claude-",), AnthropicGenerationClient),
    }

    @classmethod
    def create(cls, model: str) -> GenerationClient | None:
        """
        Create a client able to serve ``model``.

        Returns None when no provider matches or its API key is missing.
        """
        provider = cls._infer_provider(model) or cls._find_available_provider()

        if not provider:
            logger.warning("No generation provider available (no API keys found)")
            return None

        env_var, _, client_class = cls.PROVIDERS[provider]
        api_key = os.getenv(env_var)

        if not api_key:
            logger.warning("No API key found for %s (set %s)", provider, env_var)
            return None

        logger.debug("Using %s client for model %s", provider, model)
        return client_class(api_key)

    @classmethod
    def _infer_provider(cls, model: str) -> str | None:
        """Infer provider from model name prefix."""
        for provider, (_, prefixes, _) in cls.PROVIDERS.items():
            if model.startswith(prefixes):
                return provider
        return None

    @classmethod
    def _find_available_provider(cls) -> str | None:
        """Find first provider with available API key."""
        for provider, (env_var, _, _) in cls.PROVIDERS.items():
            if os.getenv(env_var):
                return provider
        return None

    @classmethod
    def is_available(cls) -> bool:
        """Check if any provider is available."""
        return cls._find_available_provider() is not None


class RoutingGenerationClient(GenerationClient):
    """Dispatches each call to a provider client chosen by model name.

    Agents can use different models (the documentation writer defaults to
    ``gpt-4o``, a user may point the reviewer at a Claude model), so clients
    are created lazily per provider.
    """

    def __init__(self) -> None:
        self._clients: dict[str, GenerationClient] = {}

    async def generate(self, model: str, prompt: str, max_tokens: int) -> Generation:
        provider = GenerationClientFactory._infer_provider(model) or "default"
        client = self._clients.get(provider)
        if client is None:
            client = GenerationClientFactory.create(model)
            if client is None:
                raise GenerationError(f"No generation client available for model {model}")
            self._clients[provider] = client
        return await client.generate(model, prompt, max_tokens)
