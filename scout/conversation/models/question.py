"""Question generation and turn models."""

from datetime import datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field

from scout.conversation.models.analysis import ResponseAnalysis
from scout.conversation.models.enums import QuestioningStyle, QuestionType, SignalKind
from scout.conversation.models.style import StyleDecision
from scout.profile.enums import Industry, SophisticationLevel
from scout.profile.models import utc_now


class QuestionGenerationResult(BaseModel):
    """The next question and the parameters behind it."""

    question_id: str = Field(default_factory=lambda: str(uuid4()))
    question: str
    question_type: QuestionType
    sophistication_level: SophisticationLevel
    follow_up_suggestions: list[str] = Field(default_factory=list)
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasoning: str
    questioning_style: QuestioningStyle
    stage: str
    style_decision: StyleDecision


class ConversationExchange(BaseModel):
    """A question asked in the session and, once given, its answer."""

    question_id: str
    question: str
    question_type: QuestionType
    stage: str
    style: QuestioningStyle
    asked_at: datetime = Field(default_factory=utc_now)
    response: str | None = None
    answered_at: datetime | None = None
    engagement_score: float | None = Field(default=None, ge=0.0, le=1.0)
    clarity_score: float | None = Field(default=None, ge=0.0, le=1.0)
    sophistication_score: float | None = Field(default=None, ge=0.0, le=1.0)

    @property
    def answered(self) -> bool:
        return self.response is not None


class EscapeHatchTrigger(BaseModel):
    """Emitted when the user confirmed they want assumptions instead of questions."""

    session_id: str
    signal: SignalKind
    confidence: float = Field(..., ge=0.0, le=1.0)
    domain: Industry
    stage: str
    answered_question_ids: list[str] = Field(default_factory=list)
    partial_responses: dict[str, str] = Field(
        default_factory=dict, description="question_id -> response in the current stage"
    )
    triggered_at: datetime = Field(default_factory=utc_now)


class TurnResult(BaseModel):
    """Everything one conversation turn produced."""

    analysis: ResponseAnalysis
    question: QuestionGenerationResult
    trigger: EscapeHatchTrigger | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
