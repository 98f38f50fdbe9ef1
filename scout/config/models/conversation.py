"""Adaptive conversation engine configuration."""

from pydantic import BaseModel, Field


class ConversationConfig(BaseModel):
    """Signal thresholds, hysteresis and stage progression settings."""

    signal_detection_threshold: float = Field(
        default=0.4,
        ge=0.0,
        le=1.0,
        description="Minimum confidence for a behavioral signal to be reported",
    )
    strong_signal_threshold: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Confidence at which a signal may switch style on its own",
    )
    sustained_turns: int = Field(
        default=3,
        ge=2,
        description="Consecutive turns a weak candidate style needs before switching",
    )
    escape_hatch_threshold: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Confidence at which an escape-hatch or expert-skip signal is confirmed",
    )
    effectiveness_threshold: float = Field(
        default=0.6,
        ge=0.0,
        le=1.0,
        description="Effectiveness below which a style switch is recommended",
    )
    engagement_drop_threshold: float = Field(
        default=0.35,
        ge=0.0,
        le=1.0,
        description="Average recent engagement below which the style turns collaborative",
    )
    min_answered_questions: int = Field(
        default=3,
        ge=0,
        description="Answered questions required before a stage may complete",
    )
    min_stage_confidence: float = Field(
        default=0.6,
        ge=0.0,
        le=1.0,
        description="Stage confidence required before a stage may complete",
    )
    generation_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Timeout for one question generation call in seconds",
    )
