"""Enums for profile classification."""

from enum import Enum


class Industry(str, Enum):
    """Fixed industry taxonomy, in declaration (tie-break) order."""

    FINTECH = "fintech"
    HEALTHCARE = "healthcare"
    ECOMMERCE = "ecommerce"
    SAAS = "saas"
    CONSUMER = "consumer"
    ENTERPRISE = "enterprise"
    GENERAL = "general"


class UserRole(str, Enum):
    """How the user frames problems and solutions."""

    TECHNICAL = "technical"
    BUSINESS = "business"
    HYBRID = "hybrid"
    UNKNOWN = "unknown"


class SophisticationLevel(str, Enum):
    """Coarse bucket over a [0, 1] sophistication score."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_score(cls, score: float) -> "SophisticationLevel":
        if score >= HIGH_SOPHISTICATION_THRESHOLD:
            return cls.HIGH
        if score >= MEDIUM_SOPHISTICATION_THRESHOLD:
            return cls.MEDIUM
        return cls.LOW


MEDIUM_SOPHISTICATION_THRESHOLD = 0.34
HIGH_SOPHISTICATION_THRESHOLD = 0.67


class CommunicationStyle(str, Enum):
    """Register the user is most comfortable with."""

    FORMAL = "formal"
    CASUAL = "casual"
    TECHNICAL = "technical"


class AssumptionTolerance(str, Enum):
    """How willing the user is to accept system-proposed defaults."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
