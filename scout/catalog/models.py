"""Agent template models."""

from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from scout.conversation.models.enums import QuestionType
from scout.profile.enums import Industry, SophisticationLevel
from scout.profile.models import utc_now

DEFAULT_STAGES: tuple[str, ...] = ("idea-clarity", "user-workflow", "technical-specs", "wireframes")


class TemplateQuestion(BaseModel):
    """A canned question from a template's question bank."""

    id: str = Field(..., description="Question identifier, unique within a template")
    text: str = Field(..., description="Question text")
    question_type: QuestionType = Field(default=QuestionType.OPEN_ENDED)
    required: bool = Field(default=True)
    follow_ups: list[str] = Field(default_factory=list)


class AgentTemplate(BaseModel):
    """Per-domain conversation template: stages, terminology and questions."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Template identifier")
    name: str = Field(..., description="Display name")
    domain: Industry = Field(..., description="Industry served")
    version: str = Field(default="1.0", description="Template version")
    description: str = Field(default="")
    stages: tuple[str, ...] = Field(default=DEFAULT_STAGES, description="Ordered stage sequence")
    terminology: dict[str, str] = Field(
        default_factory=dict, description="Generic term -> domain term"
    )
    question_bank: dict[str, tuple[TemplateQuestion, ...]] = Field(
        default_factory=dict, description="Stage -> canned questions"
    )

    @field_validator("stages")
    @classmethod
    def _stages_are_unique(cls, stages: tuple[str, ...]) -> tuple[str, ...]:
        if not stages:
            raise ValueError("a template needs at least one stage")
        if len(set(stages)) != len(stages):
            raise ValueError("stage names must be unique")
        return stages


class AgentInstance(BaseModel):
    """A template instantiated for one session's profile."""

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    agent_id: str = Field(default_factory=lambda: str(uuid4()))
    template_id: str
    template_version: str
    name: str
    domain: Industry
    stages: list[str] = Field(..., min_length=1)
    terminology: dict[str, str] = Field(default_factory=dict)
    question_bank: dict[str, list[TemplateQuestion]] = Field(default_factory=dict)
    sophistication_level: SophisticationLevel = Field(default=SophisticationLevel.MEDIUM)
    created_at: datetime = Field(default_factory=utc_now)

    def questions_for(self, stage: str) -> list[TemplateQuestion]:
        return list(self.question_bank.get(stage, []))
