"""Adaptive conversation models."""

from scout.conversation.models.analysis import (
    AdaptationRecommendations,
    BehavioralSignal,
    ClarityMetrics,
    EngagementMetrics,
    EngagementReport,
    ResponseAnalysis,
    SophisticationBreakdown,
    SophisticationEstimate,
)
from scout.conversation.models.assumption import Assumption
from scout.conversation.models.enums import (
    AlertLevel,
    AssumptionCategory,
    AssumptionStatus,
    EngagementTrend,
    Pace,
    QuestioningStyle,
    QuestionType,
    SignalKind,
    StageStatus,
    StyleRecommendation,
    TriggerSource,
)
from scout.conversation.models.question import (
    ConversationExchange,
    EscapeHatchTrigger,
    QuestionGenerationResult,
    TurnResult,
)
from scout.conversation.models.stage import (
    StageCompletionEvidence,
    StageProgress,
    StageTransition,
)
from scout.conversation.models.style import (
    StyleDecision,
    StyleEffectiveness,
    StyleProfile,
    StyleState,
)

__all__ = [
    "AdaptationRecommendations",
    "AlertLevel",
    "Assumption",
    "AssumptionCategory",
    "AssumptionStatus",
    "BehavioralSignal",
    "ClarityMetrics",
    "ConversationExchange",
    "EngagementMetrics",
    "EngagementReport",
    "EngagementTrend",
    "EscapeHatchTrigger",
    "Pace",
    "QuestionGenerationResult",
    "QuestionType",
    "QuestioningStyle",
    "ResponseAnalysis",
    "SignalKind",
    "SophisticationBreakdown",
    "SophisticationEstimate",
    "StageCompletionEvidence",
    "StageProgress",
    "StageStatus",
    "StageTransition",
    "StyleDecision",
    "StyleEffectiveness",
    "StyleProfile",
    "StyleRecommendation",
    "StyleState",
    "TriggerSource",
    "TurnResult",
]
