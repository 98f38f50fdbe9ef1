"""Questioning style models."""

from pydantic import BaseModel, ConfigDict, Field

from scout.conversation.models.enums import Pace, QuestioningStyle, StyleRecommendation


class StyleProfile(BaseModel):
    """Bundle of tone, pacing, depth and example density for one style."""

    model_config = ConfigDict(frozen=True)

    style: QuestioningStyle
    tone: str
    pacing: Pace
    assumed_depth: float = Field(..., ge=0.0, le=1.0, description="Technical depth assumed")
    example_density: float = Field(..., ge=0.0, le=1.0, description="How often to give examples")
    temperature: float = Field(..., ge=0.0, le=1.0, description="Sampling temperature")
    prompt_modifiers: tuple[str, ...] = ()


class StyleState(BaseModel):
    """Style memory kept in Session.metadata between turns."""

    current: QuestioningStyle | None = None
    candidate: QuestioningStyle | None = None
    candidate_streak: int = Field(default=0, ge=0)
    switch_count: int = Field(default=0, ge=0)


class StyleDecision(BaseModel):
    """Outcome of style selection for one turn."""

    style: QuestioningStyle
    previous: QuestioningStyle | None = None
    switched: bool = False
    candidate: QuestioningStyle
    strength: float = Field(..., ge=0.0, le=1.0)
    reason: str
    state: StyleState


class StyleEffectiveness(BaseModel):
    """Advisory effectiveness report for the current style."""

    style: QuestioningStyle
    effectiveness_score: float = Field(..., ge=0.0, le=1.0)
    engagement: float = Field(..., ge=0.0, le=1.0)
    clarity: float = Field(..., ge=0.0, le=1.0)
    alignment: float = Field(..., ge=0.0, le=1.0)
    recommendation: StyleRecommendation
    suggested_style: QuestioningStyle | None = None
    reasoning: str = ""
