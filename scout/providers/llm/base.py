"""LLM data models, provider interface and error types.

This module provides the core types shared by the question writer:
- LLMMessage: Input message format
- LLMResponse: Output response format
- TokenUsage: Token counting
- LLMProvider: The generate() interface the conversation engine calls
- Error types for different failure modes
"""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field


class LLMMessage(BaseModel):
    """A message in a conversation."""

    role: str = Field(..., description="Role: system, user, or assistant")
    content: str = Field(..., description="Message content")


class TokenUsage(BaseModel):
    """Token usage statistics."""

    prompt_tokens: int = Field(..., description="Tokens in prompt")
    completion_tokens: int = Field(..., description="Tokens in completion")
    total_tokens: int = Field(..., description="Total tokens used")


class LLMResponse(BaseModel):
    """Response from an LLM call."""

    content: str = Field(..., description="Generated text")
    model: str = Field(..., description="Model used")
    finish_reason: str | None = Field(default=None, description="Why generation stopped")
    usage: TokenUsage | None = Field(default=None, description="Token usage stats")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Execution metadata")


class LLMProvider(ABC):
    """Black-box text generator.

    Implementations may be slow or fail; callers own timeouts and
    decide what a failure means for them.
    """

    @abstractmethod
    async def generate(
        self,
        messages: list[LLMMessage],
        *,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate text from messages."""
        pass


# ============================================================================
# Error Types
# ============================================================================


class ProviderError(Exception):
    """Base exception for LLM provider errors."""

    pass


class AuthenticationError(ProviderError):
    """Invalid or missing API key."""

    pass


class RateLimitError(ProviderError):
    """Rate limit exceeded."""

    pass


class ModelError(ProviderError):
    """Model not found or unavailable."""

    pass
