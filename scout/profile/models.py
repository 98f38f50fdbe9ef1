"""Profile domain models."""

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from scout.profile.enums import (
    AssumptionTolerance,
    CommunicationStyle,
    Industry,
    SophisticationLevel,
    UserRole,
)

ANALYSIS_VERSION = "1.0"


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class ConversationMessage(BaseModel):
    """One message of conversation history."""

    role: Literal["user", "assistant", "system"] = Field(..., description="Speaker")
    content: str = Field(..., description="Message text")
    timestamp: datetime = Field(default_factory=utc_now, description="When it was said")


class SophisticationFactors(BaseModel):
    """The five named factors behind a sophistication score, each in [0, 1]."""

    vocabulary_complexity: float = Field(default=0.0, ge=0.0, le=1.0)
    domain_expertise: float = Field(default=0.0, ge=0.0, le=1.0)
    conceptual_depth: float = Field(default=0.0, ge=0.0, le=1.0)
    professional_terminology: float = Field(default=0.0, ge=0.0, le=1.0)
    communication_clarity: float = Field(default=0.0, ge=0.0, le=1.0)


class AlternativeClassification(BaseModel):
    """A runner-up classification."""

    value: str = Field(..., description="Industry or role value")
    confidence: float = Field(..., ge=0.0, le=1.0)
    matches: int = Field(default=0, description="Keyword matches")


class IndustryClassification(BaseModel):
    """Result of the industry classifier."""

    industry: Industry
    confidence: float = Field(..., ge=0.0, le=1.0)
    keywords: list[str] = Field(default_factory=list, description="Matched keywords")
    alternatives: list[AlternativeClassification] = Field(default_factory=list)
    reasoning: str = ""


class RoleIndicatorMatches(BaseModel):
    """Indicators found per role family."""

    technical: list[str] = Field(default_factory=list)
    business: list[str] = Field(default_factory=list)
    hybrid: list[str] = Field(default_factory=list)


class RoleClassification(BaseModel):
    """Result of the role classifier."""

    role: UserRole
    confidence: float = Field(..., ge=0.0, le=1.0)
    indicators: RoleIndicatorMatches = Field(default_factory=RoleIndicatorMatches)
    scores: dict[str, float] = Field(default_factory=dict)
    reasoning: str = ""


class SophisticationAssessment(BaseModel):
    """Result of the sophistication scorer."""

    level: SophisticationLevel
    score: float = Field(..., ge=0.0, le=1.0)
    confidence: float = Field(..., ge=0.0, le=1.0)
    factors: SophisticationFactors
    advanced_terms: list[str] = Field(default_factory=list)


class UserProfile(BaseModel):
    """Confidence-scored classification of a user.

    Carries no identity of its own; a Session owns at most one active profile.
    """

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    industry: Industry = Field(default=Industry.GENERAL, description="Detected industry")
    industry_confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    alternative_industries: list[AlternativeClassification] = Field(default_factory=list)
    role: UserRole = Field(default=UserRole.UNKNOWN, description="Detected role")
    role_confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    sophistication_level: SophisticationLevel = Field(default=SophisticationLevel.LOW)
    sophistication_score: float = Field(default=0.0, ge=0.0, le=1.0)
    sophistication_confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    sophistication_factors: SophisticationFactors = Field(
        default_factory=SophisticationFactors
    )
    detected_keywords: set[str] = Field(default_factory=set)
    conversation_history: list[ConversationMessage] = Field(default_factory=list)
    preferred_communication_style: CommunicationStyle = Field(
        default=CommunicationStyle.CASUAL
    )
    assumption_tolerance: AssumptionTolerance = Field(default=AssumptionTolerance.MEDIUM)
    created: datetime = Field(default_factory=utc_now)
    last_updated: datetime = Field(default_factory=utc_now)
    analysis_version: str = Field(default=ANALYSIS_VERSION)

    @model_validator(mode="after")
    def _check_timestamps(self) -> "UserProfile":
        if self.last_updated < self.created:
            raise ValueError("last_updated must not precede created")
        return self

    @property
    def overall_confidence(self) -> float:
        return (
            0.35 * self.industry_confidence
            + 0.35 * self.role_confidence
            + 0.30 * self.sophistication_confidence
        )


class DetectionOptions(BaseModel):
    """Context for one detection call."""

    session_id: str | None = None
    conversation_history: list[ConversationMessage] = Field(default_factory=list)
    previous_profile: UserProfile | None = None
    require_minimum_confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    enable_learning: bool = True


class DetectionMetadata(BaseModel):
    """How a profile was produced."""

    processing_time_ms: float = 0.0
    overall_confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    meets_minimum_confidence: bool = False
    uncertainties: list[str] = Field(default_factory=list)
    merged_with_previous: bool = False
    analysis_version: str = ANALYSIS_VERSION


class ProfileDetectionResult(BaseModel):
    """Profile plus detection metadata."""

    profile: UserProfile
    metadata: DetectionMetadata


class ProfileValidation(BaseModel):
    """Outcome of validate_profile."""

    is_valid: bool
    issues: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
