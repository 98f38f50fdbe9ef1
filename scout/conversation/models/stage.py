"""Stage progression models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from scout.conversation.models.enums import StageStatus


class StageProgress(BaseModel):
    """Progress within one stage of the conversation."""

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    stage: str
    status: StageStatus = StageStatus.NOT_STARTED
    answered_questions: int = Field(default=0, ge=0)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    started_at: datetime | None = None
    completed_at: datetime | None = None


class StageCompletionEvidence(BaseModel):
    """Evidence a caller presents when asking to advance a stage."""

    answered_questions: int = Field(..., ge=0)
    stage_confidence: float = Field(..., ge=0.0, le=1.0)


class StageTransition(BaseModel):
    """Result of a progress request."""

    previous_stage: str
    current_stage: str
    advanced: bool
    terminal: bool
    reason: str
