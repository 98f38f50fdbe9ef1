"""Question-writer executor backed by Agno.

Routes a model string to an Agno model class by its prefix, retries
transient failures and walks a fallback chain. ``mock/`` models answer
locally so configurations and tests never need network access.
"""

from __future__ import annotations

import asyncio
import importlib
import time
from typing import TYPE_CHECKING, Any

from scout.observability.logging import get_logger
from scout.providers.llm.base import (
    AuthenticationError,
    LLMMessage,
    LLMProvider,
    LLMResponse,
    ProviderError,
    RateLimitError,
    TokenUsage,
)

if TYPE_CHECKING:
    from agno.agent import Agent

    from scout.config.models.providers import LLMProviderConfig

logger = get_logger(__name__)

MOCK_PREFIX = "mock"
DEFAULT_PREFIX = "openrouter"

# prefix -> (agno module, model class)
AGNO_MODELS: dict[str, tuple[str, str]] = {
    "openrouter": ("agno.models.openrouter", "OpenRouter"),
    "anthropic": ("agno.models.anthropic", "Claude"),
    "openai": ("agno.models.openai", "OpenAIChat"),
    "groq": ("agno.models.groq", "Groq"),
}


def parse_model(model: str) -> tuple[str, str]:
    """Split a model string into (prefix, provider model id).

    ``openrouter/`` keeps the nested vendor path; a bare name is a mock.
    """
    prefix, _, rest = model.partition("/")
    if not rest:
        return MOCK_PREFIX, model
    return prefix, rest


def _classify(error: Exception) -> ProviderError:
    message = str(error).lower()
    if "rate" in message and "limit" in message:
        return RateLimitError(f"Rate limited: {error}")
    if "api key" in message or "unauthorized" in message:
        return AuthenticationError(f"Authentication failed: {error}")
    return ProviderError(f"Agno execution failed: {error}")


class LLMExecutor(LLMProvider):
    """Writes questions through Agno with retries and fallbacks.

    Model strings look like ``openrouter/anthropic/claude-3-haiku``,
    ``anthropic/claude-3-haiku``, ``openai/gpt-4o``, ``groq/llama-3.1-70b``
    or ``mock/question-writer``. Unknown prefixes go to OpenRouter with the
    full string as the model id.
    """

    def __init__(
        self,
        model: str,
        fallback_models: list[str] | None = None,
        max_retries: int = 2,
        timeout: float = 60.0,
    ) -> None:
        """Initialize the executor.

        Args:
            model: Primary model string
            fallback_models: Models tried in order once the primary gives up
            max_retries: Extra attempts per model after a rate limit or timeout
            timeout: Seconds allowed per attempt
        """
        self._model = model
        self._fallback_models = fallback_models or []
        self._max_retries = max_retries
        self._timeout = timeout
        self._agents: dict[str, Agent] = {}

    @property
    def model(self) -> str:
        return self._model

    @property
    def models(self) -> list[str]:
        """Primary model followed by the fallback chain."""
        return [self._model, *self._fallback_models]

    async def generate(
        self,
        messages: list[LLMMessage],
        *,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        **kwargs: Any,
    ) -> LLMResponse:
        """Write a response, falling back through the chain on failure.

        Rate limits and timeouts are retried on the same model; any other
        provider error moves straight to the next model.

        Raises:
            ProviderError: If every model in the chain failed
        """
        last_error: Exception | None = None

        for model in self.models:
            attempts = self._max_retries + 1
            for attempt in range(1, attempts + 1):
                try:
                    return await asyncio.wait_for(
                        self._generate_with_model(
                            model=model,
                            messages=messages,
                            max_tokens=max_tokens,
                            temperature=temperature,
                            **kwargs,
                        ),
                        timeout=self._timeout,
                    )
                except (RateLimitError, asyncio.TimeoutError) as e:
                    last_error = e
                    logger.warning(
                        "question_writer_retry",
                        model=model,
                        attempt=attempt,
                        max_attempts=attempts,
                        error_type=type(e).__name__,
                    )
                except ProviderError as e:
                    last_error = e
                    logger.warning(
                        "question_writer_model_failed",
                        model=model,
                        error_type=type(e).__name__,
                        error=str(e),
                    )
                    break

        raise ProviderError(
            f"All models failed. Tried: {self.models}. Last error: {last_error!r}"
        )

    def _parse_model(self, model: str) -> tuple[str, str]:
        return parse_model(model)

    def _create_agno_model(self, model: str) -> Any:
        """Instantiate the Agno model class for a model string, or None for mocks."""
        prefix, model_id = self._parse_model(model)
        if prefix == MOCK_PREFIX:
            return None

        route = AGNO_MODELS.get(prefix)
        if route is None:
            logger.warning("unknown_model_prefix", model=model, prefix=prefix)
            route, model_id = AGNO_MODELS[DEFAULT_PREFIX], model

        module_name, class_name = route
        model_class = getattr(importlib.import_module(module_name), class_name)
        return model_class(id=model_id)

    def _get_or_create_agent(self, model: str) -> Agent | None:
        if model in self._agents:
            return self._agents[model]

        agno_model = self._create_agno_model(model)
        if agno_model is None:
            return None

        from agno.agent import Agent

        # History lives in the session; every call is self-contained
        agent = Agent(model=agno_model, num_history_messages=0, markdown=False)
        self._agents[model] = agent
        return agent

    def _format_messages_for_agno(self, messages: list[LLMMessage]) -> str:
        """Flatten non-system messages into one Agno input string."""
        turns = [m for m in messages if m.role != "system"]
        if len(turns) == 1:
            return turns[0].content

        speakers = {"user": "User", "assistant": "Assistant"}
        return "\n\n".join(
            f"{speakers[m.role]}: {m.content}" for m in turns if m.role in speakers
        )

    async def _generate_with_model(
        self,
        model: str,
        messages: list[LLMMessage],
        max_tokens: int,  # noqa: ARG002
        temperature: float,  # noqa: ARG002
        **kwargs: Any,  # noqa: ARG002
    ) -> LLMResponse:
        """One attempt against one model.

        Agno fixes sampling parameters when the model is created, so
        max_tokens and temperature are accepted but not forwarded.
        """
        prefix, _ = self._parse_model(model)
        agent = None if prefix == MOCK_PREFIX else self._get_or_create_agent(model)
        if agent is None:
            return self._mock_response(model, messages)

        system = next((m.content for m in messages if m.role == "system"), None)
        if system:
            agent.instructions = [system]

        start = time.perf_counter()
        try:
            run = await agent.arun(self._format_messages_for_agno(messages))
        except Exception as e:
            raise _classify(e) from e
        latency_ms = (time.perf_counter() - start) * 1000
        content = run.content or ""

        logger.debug(
            "question_writer_completed",
            model=model,
            latency_ms=round(latency_ms, 2),
            content_length=len(content),
        )
        return LLMResponse(
            content=content,
            model=model,
            finish_reason="stop",
            metadata={"latency_ms": latency_ms, "provider": prefix},
        )

    def _mock_response(self, model: str, messages: list[LLMMessage]) -> LLMResponse:  # noqa: ARG002
        return LLMResponse(
            content=f"Mock response for {model}",
            model=model,
            finish_reason="stop",
            usage=TokenUsage(prompt_tokens=10, completion_tokens=5, total_tokens=15),
            metadata={"provider": MOCK_PREFIX},
        )


def create_executor(config: LLMProviderConfig) -> LLMExecutor:
    """Create an LLMExecutor from provider configuration."""
    return LLMExecutor(
        model=config.model,
        fallback_models=list(config.fallback_models),
        max_retries=config.max_retries,
        timeout=config.timeout,
    )
