"""Profile detection: industry, role and sophistication classification."""

from scout.profile.corrections import (
    CorrectionType,
    ProfileCorrectionManager,
    ProfileCorrectionRequest,
    TrainingDataCollector,
)
from scout.profile.detector import ProfileDetector
from scout.profile.enums import (
    AssumptionTolerance,
    CommunicationStyle,
    Industry,
    SophisticationLevel,
    UserRole,
)
from scout.profile.models import (
    ConversationMessage,
    DetectionOptions,
    ProfileDetectionResult,
    ProfileValidation,
    SophisticationFactors,
    UserProfile,
)

__all__ = [
    "AssumptionTolerance",
    "CommunicationStyle",
    "ConversationMessage",
    "CorrectionType",
    "DetectionOptions",
    "Industry",
    "ProfileCorrectionManager",
    "ProfileCorrectionRequest",
    "ProfileDetectionResult",
    "ProfileDetector",
    "ProfileValidation",
    "SophisticationFactors",
    "SophisticationLevel",
    "TrainingDataCollector",
    "UserProfile",
    "UserRole",
]
