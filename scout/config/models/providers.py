"""Text generation provider configuration models."""

from pydantic import BaseModel, Field


class LLMProviderConfig(BaseModel):
    """Configuration for the question-writing LLM."""

    model: str = Field(
        default="mock/question-writer",
        description="Primary model string (provider/model)",
    )
    fallback_models: list[str] = Field(
        default_factory=list,
        description="Models to try if the primary fails",
    )
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    max_retries: int = Field(default=2, ge=0, description="Max retries per model")
    max_tokens: int = Field(default=512, gt=0, description="Maximum tokens per question")


class ProvidersConfig(BaseModel):
    """Configuration for all providers."""

    llm: LLMProviderConfig = Field(
        default_factory=LLMProviderConfig,
        description="LLM provider configuration",
    )
