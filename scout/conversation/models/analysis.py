"""Per-turn response analysis models."""

from datetime import datetime

from pydantic import BaseModel, Field

from scout.conversation.models.enums import (
    AlertLevel,
    EngagementTrend,
    Pace,
    QuestioningStyle,
    SignalKind,
)
from scout.profile.enums import SophisticationLevel
from scout.profile.models import utc_now


class SophisticationBreakdown(BaseModel):
    """Sophistication of a single utterance."""

    technical_language: float = Field(default=0.0, ge=0.0, le=1.0)
    domain_specificity: float = Field(default=0.0, ge=0.0, le=1.0)
    complexity_handling: float = Field(default=0.0, ge=0.0, le=1.0)
    business_acumen: float = Field(default=0.0, ge=0.0, le=1.0)
    communication_clarity: float = Field(default=0.0, ge=0.0, le=1.0)
    score: float = Field(default=0.0, ge=0.0, le=1.0, description="Composite score")
    level: SophisticationLevel = Field(default=SophisticationLevel.LOW)


class ClarityMetrics(BaseModel):
    specificity: float = Field(default=0.0, ge=0.0, le=1.0)
    structured_thinking: float = Field(default=0.0, ge=0.0, le=1.0)
    completeness: float = Field(default=0.0, ge=0.0, le=1.0)
    relevance: float = Field(default=0.0, ge=0.0, le=1.0)
    actionability: float = Field(default=0.0, ge=0.0, le=1.0)

    @property
    def overall(self) -> float:
        return (
            self.specificity
            + self.structured_thinking
            + self.completeness
            + self.relevance
            + self.actionability
        ) / 5


class EngagementMetrics(BaseModel):
    enthusiasm: float = Field(default=0.0, ge=0.0, le=1.0)
    interest_level: float = Field(default=0.0, ge=0.0, le=1.0)
    participation_quality: float = Field(default=0.0, ge=0.0, le=1.0)
    proactiveness: float = Field(default=0.0, ge=0.0, le=1.0)
    collaborative_spirit: float = Field(default=0.0, ge=0.0, le=1.0)

    @property
    def overall(self) -> float:
        return (
            self.enthusiasm
            + self.interest_level
            + self.participation_quality
            + self.proactiveness
            + self.collaborative_spirit
        ) / 5


class BehavioralSignal(BaseModel):
    """A detected behavioral signal and the phrases that triggered it."""

    kind: SignalKind
    confidence: float = Field(..., ge=0.0, le=1.0)
    markers: list[str] = Field(default_factory=list)


class AdaptationRecommendations(BaseModel):
    suggested_style: QuestioningStyle
    pace: Pace = Pace.STEADY
    add_examples: bool = False
    offer_assumptions: bool = False
    notes: list[str] = Field(default_factory=list)


class ResponseAnalysis(BaseModel):
    """Everything learned from one user response.

    Ephemeral: lives for the turn that produced it, folding into
    session aggregates only through the engine.
    """

    sophistication: SophisticationBreakdown
    clarity: ClarityMetrics
    engagement: EngagementMetrics
    signals: list[BehavioralSignal] = Field(default_factory=list)
    recommendations: AdaptationRecommendations
    word_count: int = Field(default=0, ge=0)
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    analyzed_at: datetime = Field(default_factory=utc_now)

    def signal(self, kind: SignalKind) -> BehavioralSignal | None:
        for signal in self.signals:
            if signal.kind is kind:
                return signal
        return None

    def signal_confidence(self, kind: SignalKind) -> float:
        signal = self.signal(kind)
        return signal.confidence if signal is not None else 0.0


class SophisticationEstimate(BaseModel):
    """Result of the quick sophistication check."""

    score: float = Field(..., ge=0.0, le=1.0)
    level: SophisticationLevel
    technical_terms: list[str] = Field(default_factory=list)


class EngagementReport(BaseModel):
    """Engagement over a session's recent answered exchanges."""

    average: float = Field(default=0.0, ge=0.0, le=1.0)
    trend: EngagementTrend = EngagementTrend.STABLE
    alert_level: AlertLevel = AlertLevel.NONE
    samples: int = 0
