"""Per-turn response analysis.

Rule-based and pure: every score is computed from the single utterance in
front of it, independent of the aggregate UserProfile. The quick check
reuses the core of the full sophistication score, so both agree on
clear-cut inputs.
"""

import math
from collections.abc import Sequence
from typing import Any

from scout.config.models.conversation import ConversationConfig
from scout.conversation.models import (
    AdaptationRecommendations,
    AlertLevel,
    BehavioralSignal,
    ClarityMetrics,
    ConversationExchange,
    EngagementMetrics,
    EngagementReport,
    EngagementTrend,
    Pace,
    ResponseAnalysis,
    SignalKind,
    SophisticationBreakdown,
    SophisticationEstimate,
)
from scout.conversation.styles import default_style, propose_style
from scout.errors import InvalidInputError
from scout.profile import lexicon
from scout.profile.enums import Industry, SophisticationLevel
from scout.profile.sophistication import (
    NOVICE_PENALTY,
    abstract_concept_score,
    clarity_components,
    is_self_declared_novice,
)
from scout.profile.text import clamp, find_terms, sentences, tokenize

SIGNAL_MARKERS: dict[SignalKind, dict[str, float]] = {
    SignalKind.CONFUSION: lexicon.CONFUSION_MARKERS,
    SignalKind.IMPATIENCE: lexicon.IMPATIENCE_MARKERS,
    SignalKind.EXPERT_SKIP: lexicon.EXPERT_SKIP_MARKERS,
    SignalKind.ESCAPE_HATCH: lexicon.ESCAPE_HATCH_MARKERS,
}
MAX_SIGNAL_CONFIDENCE = 0.95

# Weights of the core score shared with the quick check
CORE_WEIGHTS = {"technical_language": 0.45, "domain_specificity": 0.35, "complexity_handling": 0.2}
CORE_SHARE = 0.7
BUSINESS_SHARE = 0.15
CLARITY_SHARE = 0.15

ENGAGEMENT_WINDOW = 5
TREND_DELTA = 0.1
NO_HISTORY_ENGAGEMENT = 0.7


def _advanced_vocabulary(domain: Industry) -> tuple[str, ...]:
    if domain is Industry.GENERAL:
        return lexicon.ALL_ADVANCED_TERMINOLOGY
    return lexicon.ADVANCED_TERMINOLOGY[domain] + lexicon.ADVANCED_TERMINOLOGY[Industry.GENERAL]


def _core_factors(text: str, domain: Industry) -> tuple[float, float, float, list[str]]:
    """Return (technical, domain, complexity, technical terms) for text."""
    words = tokenize(text)
    technical_terms = find_terms(text, lexicon.ALL_TECHNICAL_TERMS)
    industry_terms = find_terms(text, lexicon.ALL_INDUSTRY_KEYWORDS)
    advanced_terms = find_terms(text, _advanced_vocabulary(domain))

    parts = sentences(text) or [text]
    avg_sentence_length = len(words) / len(parts)

    technical = clamp(len(technical_terms) / 4)
    domain_specificity = clamp((len(industry_terms) + 2 * len(advanced_terms)) / 4)
    complexity = clamp(abstract_concept_score(text) + 0.4 * min(1.0, avg_sentence_length / 25))
    return technical, domain_specificity, complexity, technical_terms


def _core_score(technical: float, domain: float, complexity: float) -> float:
    return (
        CORE_WEIGHTS["technical_language"] * technical
        + CORE_WEIGHTS["domain_specificity"] * domain
        + CORE_WEIGHTS["complexity_handling"] * complexity
    )


def _marker_count(text: str, markers: Sequence[str]) -> int:
    return len(find_terms(text, markers))


class ResponseAnalyzer:
    """Scores single user responses and detects behavioral signals."""

    def __init__(self, config: ConversationConfig | None = None) -> None:
        self._config = config or ConversationConfig()

    def analyze(self, user_response: str, context: Any) -> ResponseAnalysis:
        """Analyze one utterance.

        Args:
            user_response: What the user said
            context: The session context the response belongs to

        Raises:
            InvalidInputError: If the response is empty or context is missing
        """
        if context is None:
            raise InvalidInputError("context is required")
        if not isinstance(user_response, str) or not user_response.strip():
            raise InvalidInputError("user_response must be non-empty text")

        text = user_response.strip()
        domain = getattr(context, "domain", Industry.GENERAL)
        words = tokenize(text)

        signals = self.detect_signals(text)
        sophistication = self._sophistication(text, domain)
        confused = any(s.kind is SignalKind.CONFUSION for s in signals)
        clarity = self._clarity(text, confused)
        engagement = self._engagement(text, words)

        analysis = ResponseAnalysis(
            sophistication=sophistication,
            clarity=clarity,
            engagement=engagement,
            signals=signals,
            recommendations=AdaptationRecommendations(
                suggested_style=default_style(sophistication.score, engagement)
            ),
            word_count=len(words),
            confidence=min(0.95, 0.4 + 0.03 * len(words)),
        )
        return analysis.model_copy(update={"recommendations": self._recommend(analysis)})

    def quick_sophistication_check(
        self, user_response: str, domain: Industry = Industry.GENERAL
    ) -> SophisticationEstimate:
        """Cheap estimate from technical, domain and complexity cues only."""
        if not isinstance(user_response, str) or not user_response.strip():
            raise InvalidInputError("user_response must be non-empty text")

        technical, domain_specificity, complexity, technical_terms = _core_factors(
            user_response, domain
        )
        score = _core_score(technical, domain_specificity, complexity)
        if is_self_declared_novice(user_response):
            score *= NOVICE_PENALTY
        score = clamp(score)
        return SophisticationEstimate(
            score=score,
            level=SophisticationLevel.from_score(score),
            technical_terms=technical_terms,
        )

    def detect_signals(self, text: str) -> list[BehavioralSignal]:
        """Scan text for behavioral signal markers.

        A signal's confidence is the summed weight of its markers; only
        signals at or above the detection threshold are reported.
        """
        detected: list[BehavioralSignal] = []
        for kind, markers in SIGNAL_MARKERS.items():
            found = find_terms(text, markers)
            confidence = min(MAX_SIGNAL_CONFIDENCE, sum(markers[m] for m in found))
            if found and confidence >= self._config.signal_detection_threshold:
                detected.append(BehavioralSignal(kind=kind, confidence=confidence, markers=found))
        return detected

    def monitor_engagement(self, exchanges: Sequence[ConversationExchange]) -> EngagementReport:
        """Summarize engagement over the most recent answered exchanges."""
        scores = [
            e.engagement_score
            for e in exchanges
            if e.answered and e.engagement_score is not None
        ][-ENGAGEMENT_WINDOW:]
        if not scores:
            return EngagementReport(average=NO_HISTORY_ENGAGEMENT, samples=0)

        # Rounded so scores landing on a threshold are not pushed below it
        average = round(math.fsum(scores) / len(scores), 6)
        delta = scores[-1] - scores[0]
        if delta > TREND_DELTA:
            trend = EngagementTrend.IMPROVING
        elif delta < -TREND_DELTA:
            trend = EngagementTrend.DECLINING
        else:
            trend = EngagementTrend.STABLE

        if average < 0.3:
            alert = AlertLevel.HIGH
        elif average < 0.5:
            alert = AlertLevel.MODERATE
        elif average < 0.6:
            alert = AlertLevel.MILD
        else:
            alert = AlertLevel.NONE

        return EngagementReport(average=average, trend=trend, alert_level=alert, samples=len(scores))

    def _sophistication(self, text: str, domain: Industry) -> SophisticationBreakdown:
        technical, domain_specificity, complexity, _ = _core_factors(text, domain)
        business_hits = _marker_count(
            text, lexicon.BUSINESS_KEYWORDS + lexicon.BUSINESS_PHRASES
        ) + sum(len(p.findall(text)) for p in lexicon.BUSINESS_PATTERNS)
        business = clamp(business_hits / 3)
        clarity = sum(clarity_components(text)) / 3

        score = (
            CORE_SHARE * _core_score(technical, domain_specificity, complexity)
            + BUSINESS_SHARE * business
            + CLARITY_SHARE * clarity
        )
        if is_self_declared_novice(text):
            score *= NOVICE_PENALTY
        score = clamp(score)

        return SophisticationBreakdown(
            technical_language=technical,
            domain_specificity=domain_specificity,
            complexity_handling=complexity,
            business_acumen=business,
            communication_clarity=clamp(clarity),
            score=score,
            level=SophisticationLevel.from_score(score),
        )

    def _clarity(self, text: str, confused: bool) -> ClarityMetrics:
        specificity, structured, completeness = clarity_components(text)
        return ClarityMetrics(
            specificity=specificity,
            structured_thinking=structured,
            completeness=completeness,
            relevance=0.4 if confused else 0.7,
            actionability=clamp(0.3 + 0.15 * _marker_count(text, lexicon.ACTION_VERBS)),
        )

    def _engagement(self, text: str, words: list[str]) -> EngagementMetrics:
        questions = text.count("?")
        specificity, _, completeness = clarity_components(text)
        owned = any(w in ("we", "our", "us") for w in words)
        return EngagementMetrics(
            enthusiasm=clamp(
                0.3
                + 0.2 * _marker_count(text, lexicon.ENTHUSIASM_MARKERS)
                + 0.1 * text.count("!")
            ),
            interest_level=clamp(len(words) / 30 + 0.1 * questions),
            participation_quality=clamp((completeness + specificity) / 2),
            proactiveness=clamp(
                0.25 * _marker_count(text, lexicon.PROACTIVE_MARKERS) + 0.1 * questions
            ),
            collaborative_spirit=clamp(
                0.3 * _marker_count(text, lexicon.COLLABORATIVE_MARKERS) + (0.1 if owned else 0.0)
            ),
        )

    def _recommend(self, analysis: ResponseAnalysis) -> AdaptationRecommendations:
        suggested = propose_style(analysis, (), self._config.engagement_drop_threshold).style
        notes: list[str] = []
        pace = Pace.STEADY
        add_examples = analysis.sophistication.level is SophisticationLevel.LOW
        offer_assumptions = False

        confusion = analysis.signal(SignalKind.CONFUSION)
        impatience = analysis.signal(SignalKind.IMPATIENCE)
        expert_skip = analysis.signal(SignalKind.EXPERT_SKIP)
        escape = analysis.signal(SignalKind.ESCAPE_HATCH)

        if confusion is not None:
            pace = Pace.SLOWER
            add_examples = True
            notes.append("rephrase with a concrete example")
        elif impatience is not None or expert_skip is not None:
            pace = Pace.FASTER
            add_examples = False
            notes.append("shorten questions and skip fundamentals")

        if escape is not None or (
            expert_skip is not None
            and expert_skip.confidence >= self._config.escape_hatch_threshold
        ):
            offer_assumptions = True
            notes.append("offer to fill gaps with assumptions")

        return AdaptationRecommendations(
            suggested_style=suggested,
            pace=pace,
            add_examples=add_examples,
            offer_assumptions=offer_assumptions,
            notes=notes,
        )
