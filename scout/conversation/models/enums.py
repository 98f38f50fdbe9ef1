"""Enums for the adaptive conversation domain."""

from enum import Enum


class QuestioningStyle(str, Enum):
    """The seven questioning styles."""

    NOVICE_FRIENDLY = "novice-friendly"
    INTERMEDIATE_GUIDED = "intermediate-guided"
    ADVANCED_TECHNICAL = "advanced-technical"
    EXPERT_EFFICIENT = "expert-efficient"
    IMPATIENT_ACCELERATED = "impatient-accelerated"
    CONFUSED_SUPPORTIVE = "confused-supportive"
    COLLABORATIVE_EXPLORATORY = "collaborative-exploratory"


class SignalKind(str, Enum):
    """Behavioral signals detected in a single response."""

    CONFUSION = "confusion"
    IMPATIENCE = "impatience"
    EXPERT_SKIP = "expert_skip"
    ESCAPE_HATCH = "escape_hatch"


class QuestionType(str, Enum):
    OPEN_ENDED = "open_ended"
    CLARIFYING = "clarifying"
    MULTIPLE_CHOICE = "multiple_choice"
    CONFIRMATION = "confirmation"
    EXAMPLE_DRIVEN = "example_driven"


class StageStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Pace(str, Enum):
    SLOWER = "slower"
    STEADY = "steady"
    FASTER = "faster"


class EngagementTrend(str, Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


class AlertLevel(str, Enum):
    NONE = "none"
    MILD = "mild"
    MODERATE = "moderate"
    HIGH = "high"


class StyleRecommendation(str, Enum):
    """Advisory outcome of style effectiveness monitoring."""

    HOLD = "hold"
    SWITCH = "switch"


class AssumptionCategory(str, Enum):
    USER_TARGET = "user_target"
    PROBLEM_DEFINITION = "problem_definition"
    TECHNICAL_REQUIREMENTS = "technical_requirements"
    BUSINESS_MODEL = "business_model"
    CONSTRAINTS = "constraints"


class AssumptionStatus(str, Enum):
    PROPOSED = "proposed"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    PENDING_REEVALUATION = "pending_reevaluation"


class TriggerSource(str, Enum):
    """What caused an assumption to be proposed."""

    ESCAPE_HATCH = "escape_hatch"
    EXPERT_SKIP = "expert_skip"
    TEMPLATE_DEFAULT = "template_default"
    MANUAL = "manual"
