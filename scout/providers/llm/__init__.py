"""LLM providers for question text generation.

The primary interface is LLMExecutor, which:
- Takes a model string (e.g., "openrouter/anthropic/claude-3-haiku")
- Routes to the appropriate API via Agno model classes
- Supports fallback chains

Model string formats:
- openrouter/{provider}/{model} -> Agno OpenRouter
- anthropic/{model} -> Agno Claude
- openai/{model} -> Agno OpenAIChat
- groq/{model} -> Agno Groq
- mock/{name} -> Mock response for testing
"""

from scout.providers.llm.base import (
    AuthenticationError,
    LLMMessage,
    LLMProvider,
    LLMResponse,
    ModelError,
    ProviderError,
    RateLimitError,
    TokenUsage,
)
from scout.providers.llm.executor import LLMExecutor, create_executor
from scout.providers.llm.mock import MockLLMProvider

__all__ = [
    # Data models
    "LLMMessage",
    "LLMResponse",
    "TokenUsage",
    # Interface
    "LLMProvider",
    # Errors
    "ProviderError",
    "AuthenticationError",
    "RateLimitError",
    "ModelError",
    # Executor (primary interface)
    "LLMExecutor",
    "create_executor",
    # Testing
    "MockLLMProvider",
]
