"""Text-generation client module."""
from maint.llm.client import (
    AnthropicGenerationClient,
    Generation,
    GenerationClient,
    GenerationClientFactory,
    OpenAIGenerationClient,
    RoutingGenerationClient,
    TokenUsage,
)

__all__ = [
    "AnthropicGenerationClient",
    "Generation",
    "GenerationClient",
    "GenerationClientFactory",
    "OpenAIGenerationClient",
    "RoutingGenerationClient",
    "TokenUsage",
]
