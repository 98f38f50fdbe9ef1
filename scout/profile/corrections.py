"""User-issued profile corrections and the training data they produce.

Corrections never feed the live decision loop directly. They produce a
corrected copy of the profile and a labeled example for offline learning.
"""

from collections import Counter
from collections.abc import Callable
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field

from scout.errors import InvalidInputError
from scout.observability.logging import EMAIL_PATTERN, PHONE_PATTERN, get_logger
from scout.observability.metrics import PROFILE_CORRECTIONS
from scout.profile.enums import (
    AssumptionTolerance,
    CommunicationStyle,
    Industry,
    SophisticationLevel,
    UserRole,
)
from scout.profile.models import ProfileDetectionResult, UserProfile, utc_now

logger = get_logger(__name__)

# Representative score for each bucket when a user corrects the level
LEVEL_SCORES: dict[SophisticationLevel, float] = {
    SophisticationLevel.LOW: 0.17,
    SophisticationLevel.MEDIUM: 0.5,
    SophisticationLevel.HIGH: 0.83,
}


class CorrectionType(str, Enum):
    """Profile aspect a user can correct."""

    INDUSTRY = "industry"
    ROLE = "role"
    SOPHISTICATION = "sophistication"
    TERMINOLOGY = "terminology"
    COMMUNICATION_STYLE = "communication_style"
    ASSUMPTION_TOLERANCE = "assumption_tolerance"


class TrainingDataSource(str, Enum):
    USER_CORRECTION = "user_correction"
    AUTOMATED_COLLECTION = "automated_collection"


class DataQuality(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ProfileCorrectionRequest(BaseModel):
    """Corrections a user asked for, with their confidence in them."""

    session_id: str = Field(..., min_length=1)
    industry: Industry | None = None
    role: UserRole | None = None
    sophistication_level: SophisticationLevel | None = None
    terminology: list[str] | None = None
    communication_style: CommunicationStyle | None = None
    assumption_tolerance: AssumptionTolerance | None = None
    feedback: str | None = None
    confidence: float = Field(default=0.9, ge=0.0, le=1.0)


class ProfileCorrection(BaseModel):
    """One applied correction."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    session_id: str
    correction_type: CorrectionType
    original_value: Any = None
    corrected_value: Any = None
    user_feedback: str | None = None
    confidence: float = Field(..., ge=0.0, le=1.0)
    timestamp: datetime = Field(default_factory=utc_now)


class CorrectionImpact(BaseModel):
    """What the conversation will do differently after a correction."""

    questioning_adjustments: list[str] = Field(default_factory=list)
    communication_changes: list[str] = Field(default_factory=list)
    assumption_adjustments: list[str] = Field(default_factory=list)


class CorrectionOutcome(BaseModel):
    profile: UserProfile
    corrections: list[ProfileCorrection]
    impact: CorrectionImpact


class TrainingExample(BaseModel):
    """A labeled example for classifier training."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    input: str
    ground_truth: dict[str, Any]
    predicted: dict[str, Any]
    source: TrainingDataSource
    quality: DataQuality
    session_id: str | None = None
    timestamp: datetime = Field(default_factory=utc_now)


class TrainingDataStats(BaseModel):
    total: int = 0
    by_source: dict[str, int] = Field(default_factory=dict)
    by_quality: dict[str, int] = Field(default_factory=dict)
    by_industry: dict[str, int] = Field(default_factory=dict)


def _labels(profile: UserProfile) -> dict[str, Any]:
    return {
        "industry": profile.industry.value,
        "role": profile.role.value,
        "sophistication_level": profile.sophistication_level.value,
        "keywords": sorted(profile.detected_keywords),
    }


def _anonymize(text: str) -> str:
    return PHONE_PATTERN.sub("[PHONE]", EMAIL_PATTERN.sub("[EMAIL]", text))


class TrainingDataCollector:
    """In-memory collector of labeled examples.

    Corrections always produce an example; confident detections do too
    unless ``collect_only_corrections`` is set.
    """

    def __init__(
        self,
        min_detection_confidence: float = 0.7,
        max_examples_per_session: int = 10,
        collect_only_corrections: bool = False,
        anonymize: bool = True,
    ) -> None:
        self._min_detection_confidence = min_detection_confidence
        self._max_per_session = max_examples_per_session
        self._collect_only_corrections = collect_only_corrections
        self._anonymize = anonymize
        self._examples: list[TrainingExample] = []

    def _prepare(self, text: str) -> str:
        return _anonymize(text) if self._anonymize else text

    def _session_count(self, session_id: str | None) -> int:
        return sum(1 for e in self._examples if e.session_id == session_id)

    def collect_from_correction(
        self,
        original: UserProfile,
        corrected: UserProfile,
        corrections: list[ProfileCorrection],
    ) -> TrainingExample | None:
        if not corrections:
            return None
        session_id = corrections[0].session_id
        user_messages = [m.content for m in original.conversation_history if m.role == "user"]
        source_text = user_messages[-1] if user_messages else (corrections[0].user_feedback or "")
        confidence = min(c.confidence for c in corrections)
        example = TrainingExample(
            input=self._prepare(source_text),
            ground_truth=_labels(corrected),
            predicted=_labels(original),
            source=TrainingDataSource.USER_CORRECTION,
            quality=DataQuality.HIGH if confidence >= 0.8 else DataQuality.MEDIUM,
            session_id=session_id,
        )
        self._examples.append(example)
        return example

    def collect_from_detection(
        self,
        input: str,
        result: ProfileDetectionResult,
        session_id: str | None = None,
    ) -> TrainingExample | None:
        if self._collect_only_corrections:
            return None
        if result.metadata.overall_confidence < self._min_detection_confidence:
            return None
        if self._session_count(session_id) >= self._max_per_session:
            return None
        labels = _labels(result.profile)
        example = TrainingExample(
            input=self._prepare(input),
            ground_truth=labels,
            predicted=labels,
            source=TrainingDataSource.AUTOMATED_COLLECTION,
            quality=DataQuality.MEDIUM if result.metadata.overall_confidence >= 0.8 else DataQuality.LOW,
            session_id=session_id,
        )
        self._examples.append(example)
        return example

    def export(self) -> list[TrainingExample]:
        return list(self._examples)

    def stats(self) -> TrainingDataStats:
        return TrainingDataStats(
            total=len(self._examples),
            by_source=dict(Counter(e.source.value for e in self._examples)),
            by_quality=dict(Counter(e.quality.value for e in self._examples)),
            by_industry=dict(Counter(e.ground_truth["industry"] for e in self._examples)),
        )


class ProfileCorrectionManager:
    """Applies user corrections to profiles and records them for learning."""

    def __init__(
        self,
        collector: TrainingDataCollector | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._collector = collector or TrainingDataCollector()
        self._clock = clock
        self._history: dict[str, list[ProfileCorrection]] = {}

    @property
    def collector(self) -> TrainingDataCollector:
        return self._collector

    def apply_corrections(
        self,
        profile: UserProfile,
        request: ProfileCorrectionRequest,
    ) -> CorrectionOutcome:
        """Return a corrected copy of profile; the input is left untouched.

        Raises:
            InvalidInputError: If the request carries no corrections
        """
        updated = profile.model_copy(deep=True)
        corrections: list[ProfileCorrection] = []
        impact = CorrectionImpact()
        now = self._clock()

        def record(kind: CorrectionType, original: Any, corrected: Any) -> None:
            corrections.append(
                ProfileCorrection(
                    session_id=request.session_id,
                    correction_type=kind,
                    original_value=original,
                    corrected_value=corrected,
                    user_feedback=request.feedback,
                    confidence=request.confidence,
                    timestamp=now,
                )
            )

        if request.industry is not None:
            record(CorrectionType.INDUSTRY, profile.industry.value, request.industry.value)
            updated.industry = request.industry
            updated.industry_confidence = request.confidence
            impact.questioning_adjustments.append(
                f"Switch to {request.industry.value} domain questions and terminology"
            )

        if request.role is not None:
            record(CorrectionType.ROLE, profile.role.value, request.role.value)
            updated.role = request.role
            updated.role_confidence = request.confidence
            impact.questioning_adjustments.append(
                f"Frame questions for a {request.role.value} audience"
            )

        if request.sophistication_level is not None:
            level = request.sophistication_level
            record(CorrectionType.SOPHISTICATION, profile.sophistication_level.value, level.value)
            if SophisticationLevel.from_score(updated.sophistication_score) is not level:
                updated.sophistication_score = LEVEL_SCORES[level]
            updated.sophistication_level = level
            updated.sophistication_confidence = request.confidence
            impact.questioning_adjustments.append(f"Pitch question depth at {level.value}")

        if request.terminology:
            record(
                CorrectionType.TERMINOLOGY,
                sorted(profile.detected_keywords),
                request.terminology,
            )
            updated.detected_keywords = profile.detected_keywords | {
                t.lower() for t in request.terminology
            }

        if request.communication_style is not None:
            record(
                CorrectionType.COMMUNICATION_STYLE,
                profile.preferred_communication_style.value,
                request.communication_style.value,
            )
            updated.preferred_communication_style = request.communication_style
            impact.communication_changes.append(
                f"Use a {request.communication_style.value} register"
            )

        if request.assumption_tolerance is not None:
            record(
                CorrectionType.ASSUMPTION_TOLERANCE,
                profile.assumption_tolerance.value,
                request.assumption_tolerance.value,
            )
            updated.assumption_tolerance = request.assumption_tolerance
            impact.assumption_adjustments.append(
                f"Propose assumptions with {request.assumption_tolerance.value} tolerance"
            )

        if not corrections:
            raise InvalidInputError("Correction request contains no corrections")

        updated.last_updated = max(now, profile.last_updated)

        self._history.setdefault(request.session_id, []).extend(corrections)
        for correction in corrections:
            PROFILE_CORRECTIONS.labels(correction_type=correction.correction_type.value).inc()
        self._collector.collect_from_correction(profile, updated, corrections)

        logger.info(
            "profile_corrected",
            session_id=request.session_id,
            corrections=[c.correction_type.value for c in corrections],
        )
        return CorrectionOutcome(profile=updated, corrections=corrections, impact=impact)

    def get_correction_history(self, session_id: str) -> list[ProfileCorrection]:
        return list(self._history.get(session_id, []))

    def correction_counts(self) -> dict[str, int]:
        """Corrections per type across all sessions."""
        return dict(
            Counter(
                c.correction_type.value
                for corrections in self._history.values()
                for c in corrections
            )
        )
