"""Profile detection: three independent scorers composed into one profile."""

import asyncio
import time
from collections.abc import Callable, Sequence
from datetime import datetime

from scout.config.models.profile import ProfileDetectionConfig
from scout.errors import BatchTooLargeError, InvalidInputError
from scout.observability.logging import get_logger
from scout.observability.metrics import PROFILE_DETECTIONS
from scout.profile.enums import (
    AssumptionTolerance,
    CommunicationStyle,
    Industry,
    SophisticationLevel,
    UserRole,
)
from scout.profile.industry import classify_industry
from scout.profile.lexicon import ALL_TECHNICAL_TERMS
from scout.profile.models import (
    ConversationMessage,
    DetectionMetadata,
    DetectionOptions,
    IndustryClassification,
    ProfileDetectionResult,
    ProfileValidation,
    RoleClassification,
    SophisticationAssessment,
    UserProfile,
    utc_now,
)
from scout.profile.role import classify_role
from scout.profile.sophistication import score_sophistication
from scout.profile.text import clamp, find_terms

logger = get_logger(__name__)

# Role/industry pairings that rarely co-occur in discovery conversations
IMPLAUSIBLE_COMBINATIONS: frozenset[tuple[UserRole, Industry]] = frozenset({
    (UserRole.BUSINESS, Industry.SAAS),
})

LOW_COMPONENT_CONFIDENCE = 0.3
MIN_TERMINOLOGY = 5


def _require_text(value: object, field: str = "input") -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"{field} must be a non-empty string")
    return value


def _communication_style(role: UserRole, level: SophisticationLevel) -> CommunicationStyle:
    if role is UserRole.TECHNICAL and level is SophisticationLevel.HIGH:
        return CommunicationStyle.TECHNICAL
    if level is SophisticationLevel.HIGH:
        return CommunicationStyle.FORMAL
    return CommunicationStyle.CASUAL


def _assumption_tolerance(role: UserRole, level: SophisticationLevel) -> AssumptionTolerance:
    if level is SophisticationLevel.HIGH:
        return AssumptionTolerance.LOW
    if role is UserRole.BUSINESS and level is SophisticationLevel.MEDIUM:
        return AssumptionTolerance.HIGH
    return AssumptionTolerance.MEDIUM


def _sophistication_fits_role(role: UserRole, level: SophisticationLevel) -> bool:
    if role is UserRole.TECHNICAL:
        return level is not SophisticationLevel.LOW
    return role is not UserRole.UNKNOWN


def _merge_classification(
    previous_value: object,
    previous_confidence: float,
    new_value: object,
    new_confidence: float,
) -> tuple[object, float]:
    """Keep the prior value unless new evidence is strictly more confident."""
    if new_value == previous_value:
        return new_value, max(previous_confidence, new_confidence)
    if new_confidence > previous_confidence:
        return new_value, new_confidence
    return previous_value, previous_confidence


class ProfileDetector:
    """Turns free text into a confidence-scored UserProfile.

    Stateless apart from configuration; safe to share across sessions and
    to run concurrently.
    """

    def __init__(
        self,
        config: ProfileDetectionConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._config = config or ProfileDetectionConfig()
        self._clock = clock

    @property
    def config(self) -> ProfileDetectionConfig:
        return self._config

    async def detect_profile(
        self,
        input: str,
        options: DetectionOptions | None = None,
    ) -> ProfileDetectionResult:
        """Classify industry, role and sophistication for input.

        When ``options.previous_profile`` is given and learning is enabled,
        the result is a confidence-weighted merge with it.

        Raises:
            InvalidInputError: If input is empty after trimming
        """
        text = _require_text(input)
        options = options or DetectionOptions()
        start = time.perf_counter()
        now = self._clock()

        previous = options.previous_profile
        prior_history = (
            list(previous.conversation_history)
            if previous is not None
            else list(options.conversation_history)
        )
        analysis_text = text
        if options.enable_learning and prior_history:
            window = [
                m.content for m in prior_history[-self._config.history_window :] if m.role == "user"
            ]
            analysis_text = "\n".join([*window, text])

        industry = classify_industry(analysis_text)
        role = classify_role(analysis_text)
        indicator_count = sum(role.scores.values())
        sophistication = score_sophistication(
            analysis_text, industry.industry, role.role, indicator_count
        )

        history = prior_history
        if options.enable_learning:
            history = [
                *prior_history,
                ConversationMessage(role="user", content=text, timestamp=now),
            ][-self._config.history_window :]

        profile = self._build_profile(industry, role, sophistication, history, now)
        merged = False
        if previous is not None and options.enable_learning:
            profile = self._merge(previous, profile, now)
            merged = True

        minimum = (
            options.require_minimum_confidence
            if options.require_minimum_confidence is not None
            else self._config.min_confidence
        )
        overall = self._overall_confidence(profile)
        metadata = DetectionMetadata(
            processing_time_ms=(time.perf_counter() - start) * 1000,
            overall_confidence=overall,
            meets_minimum_confidence=overall >= minimum,
            uncertainties=self._uncertainties(profile, minimum),
            merged_with_previous=merged,
            analysis_version=self._config.analysis_version,
        )

        PROFILE_DETECTIONS.labels(
            industry=profile.industry.value,
            role=profile.role.value,
            sophistication=profile.sophistication_level.value,
        ).inc()
        logger.debug(
            "profile_detected",
            session_id=options.session_id,
            industry=profile.industry.value,
            role=profile.role.value,
            sophistication=profile.sophistication_level.value,
            overall_confidence=round(overall, 3),
            merged=merged,
            input_length=len(text),
        )
        return ProfileDetectionResult(profile=profile, metadata=metadata)

    async def batch_detect_profiles(
        self,
        inputs: Sequence[str],
        options: DetectionOptions | None = None,
    ) -> list[ProfileDetectionResult]:
        """Detect profiles for several inputs independently.

        Every input is validated before any detection starts, so a bad item
        fails the whole batch. Results are returned in input order.

        Raises:
            BatchTooLargeError: If there are more inputs than the batch limit
            InvalidInputError: If inputs is empty or any item is malformed
        """
        if inputs is None or isinstance(inputs, str):
            raise InvalidInputError("inputs must be a sequence of strings")
        items = list(inputs)
        if len(items) > self._config.batch_limit:
            raise BatchTooLargeError(len(items), self._config.batch_limit)
        if not items:
            raise InvalidInputError("inputs must not be empty")
        for index, item in enumerate(items):
            _require_text(item, f"inputs[{index}]")

        return list(
            await asyncio.gather(*(self.detect_profile(item, options) for item in items))
        )

    def validate_profile(
        self,
        profile: UserProfile,
        min_confidence: float | None = None,
    ) -> ProfileValidation:
        """Check confidence floors and role/terminology consistency."""
        minimum = self._config.min_confidence if min_confidence is None else min_confidence
        issues: list[str] = []
        recommendations: list[str] = []

        if profile.industry_confidence < minimum:
            issues.append("Low industry classification confidence")
            recommendations.append("Gather more industry-specific information")
        if profile.role_confidence < minimum:
            issues.append("Low role classification confidence")
            recommendations.append("Ask about technical vs business background")
        if profile.sophistication_confidence < minimum:
            issues.append("Low sophistication assessment confidence")
            recommendations.append("Collect a longer free-text answer")

        if (profile.role, profile.industry) in IMPLAUSIBLE_COMBINATIONS:
            issues.append(
                f"Unusual role-industry combination: {profile.role.value} in {profile.industry.value}"
            )
            recommendations.append("Confirm the user's role")

        if profile.role is UserRole.TECHNICAL:
            technical = find_terms(" ".join(sorted(profile.detected_keywords)), ALL_TECHNICAL_TERMS)
            if not technical:
                issues.append("Technical role with no technical keywords detected")
                recommendations.append("Verify the technical role with a follow-up question")

        if len(profile.detected_keywords) < MIN_TERMINOLOGY:
            issues.append("Limited terminology detected")
            recommendations.append("Encourage more detailed descriptions")

        return ProfileValidation(
            is_valid=not issues,
            issues=issues,
            recommendations=recommendations,
        )

    def _build_profile(
        self,
        industry: IndustryClassification,
        role: RoleClassification,
        sophistication: SophisticationAssessment,
        history: list[ConversationMessage],
        now: datetime,
    ) -> UserProfile:
        keywords = {
            *industry.keywords,
            *role.indicators.technical,
            *role.indicators.business,
            *role.indicators.hybrid,
            *sophistication.advanced_terms,
        }
        return UserProfile(
            industry=industry.industry,
            industry_confidence=industry.confidence,
            alternative_industries=industry.alternatives,
            role=role.role,
            role_confidence=role.confidence,
            sophistication_level=sophistication.level,
            sophistication_score=sophistication.score,
            sophistication_confidence=sophistication.confidence,
            sophistication_factors=sophistication.factors,
            detected_keywords={k.lower() for k in keywords},
            conversation_history=history,
            preferred_communication_style=_communication_style(role.role, sophistication.level),
            assumption_tolerance=_assumption_tolerance(role.role, sophistication.level),
            created=now,
            last_updated=now,
            analysis_version=self._config.analysis_version,
        )

    def _merge(self, previous: UserProfile, new: UserProfile, now: datetime) -> UserProfile:
        industry, industry_confidence = _merge_classification(
            previous.industry, previous.industry_confidence,
            new.industry, new.industry_confidence,
        )
        role, role_confidence = _merge_classification(
            previous.role, previous.role_confidence,
            new.role, new.role_confidence,
        )
        weight_total = previous.sophistication_confidence + new.sophistication_confidence
        new_weight = new.sophistication_confidence / weight_total if weight_total else 0.5
        score = clamp(
            previous.sophistication_score * (1 - new_weight)
            + new.sophistication_score * new_weight
        )
        level = SophisticationLevel.from_score(score)
        factors = (
            new.sophistication_factors
            if new.sophistication_confidence > previous.sophistication_confidence
            else previous.sophistication_factors
        )
        alternatives = (
            new.alternative_industries
            if industry == new.industry and industry_confidence == new.industry_confidence
            else previous.alternative_industries
        )

        return UserProfile(
            industry=industry,
            industry_confidence=industry_confidence,
            alternative_industries=alternatives,
            role=role,
            role_confidence=role_confidence,
            sophistication_level=level,
            sophistication_score=score,
            sophistication_confidence=max(
                previous.sophistication_confidence, new.sophistication_confidence
            ),
            sophistication_factors=factors,
            detected_keywords=previous.detected_keywords | new.detected_keywords,
            conversation_history=new.conversation_history,
            preferred_communication_style=_communication_style(role, level),
            assumption_tolerance=_assumption_tolerance(role, level),
            created=min(previous.created, now),
            last_updated=max(now, previous.last_updated),
            analysis_version=self._config.analysis_version,
        )

    def _overall_confidence(self, profile: UserProfile) -> float:
        confidence = profile.overall_confidence
        if (profile.role, profile.industry) not in IMPLAUSIBLE_COMBINATIONS:
            confidence += 0.05
        if _sophistication_fits_role(profile.role, profile.sophistication_level):
            confidence += 0.05
        if min(
            profile.industry_confidence,
            profile.role_confidence,
            profile.sophistication_confidence,
        ) < LOW_COMPONENT_CONFIDENCE:
            confidence -= 0.1
        return clamp(confidence)

    def _uncertainties(self, profile: UserProfile, minimum: float) -> list[str]:
        uncertainties = []
        if profile.industry_confidence < minimum:
            uncertainties.append(
                f"Industry classification uncertain ({profile.industry_confidence:.0%} confidence)"
            )
        if profile.role_confidence < minimum:
            uncertainties.append(
                f"Role classification uncertain ({profile.role_confidence:.0%} confidence)"
            )
        if profile.sophistication_confidence < minimum:
            uncertainties.append(
                "Sophistication assessment uncertain "
                f"({profile.sophistication_confidence:.0%} confidence)"
            )
        if profile.role is UserRole.TECHNICAL and profile.sophistication_level is SophisticationLevel.LOW:
            uncertainties.append("Technical role detected with low sophistication")
        return uncertainties
