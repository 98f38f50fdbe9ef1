"""Mock LLM provider for testing."""

import asyncio
from typing import Any

from scout.providers.llm.base import LLMMessage, LLMProvider, LLMResponse, TokenUsage


class MockLLMProvider(LLMProvider):
    """Mock LLM provider for testing.

    Returns configurable responses without making actual API calls.
    Can be told to fail or stall to exercise callers' error paths.
    """

    def __init__(
        self,
        default_response: str = "What problem are you hoping to solve first?",
        default_model: str = "mock-model",
        responses: dict[str, str] | None = None,
        fail_with: Exception | None = None,
        delay: float = 0.0,
    ):
        """Initialize mock provider.

        Args:
            default_response: Response to return when no match found
            default_model: Model name to report
            responses: Dict mapping a substring of the last message to a response
            fail_with: Exception raised by every call while set
            delay: Seconds to sleep before answering
        """
        self._default_response = default_response
        self._default_model = default_model
        self._responses = responses or {}
        self._call_history: list[dict[str, Any]] = []
        self.fail_with = fail_with
        self.delay = delay

    @property
    def provider_name(self) -> str:
        return "mock"

    @property
    def call_history(self) -> list[dict[str, Any]]:
        """Return history of calls for testing assertions."""
        return self._call_history

    def clear_history(self) -> None:
        self._call_history.clear()

    def set_response(self, trigger: str, response: str) -> None:
        """Set a response for messages containing trigger."""
        self._responses[trigger] = response

    async def generate(
        self,
        messages: list[LLMMessage],
        *,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate mock response."""
        self._call_history.append({
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "kwargs": kwargs,
        })

        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_with is not None:
            raise self.fail_with

        content = self._default_response
        if messages:
            last_message = messages[-1].content
            for trigger, response in self._responses.items():
                if trigger in last_message:
                    content = response
                    break

        # Truncate to max_tokens (rough approximation)
        token_limit = max_tokens * 4
        if len(content) > token_limit:
            content = content[:token_limit]

        prompt_tokens = sum(len(m.content) // 4 for m in messages)
        return LLMResponse(
            content=content,
            model=self._default_model,
            finish_reason="stop",
            usage=TokenUsage(
                prompt_tokens=prompt_tokens,
                completion_tokens=len(content) // 4,
                total_tokens=prompt_tokens + len(content) // 4,
            ),
        )
