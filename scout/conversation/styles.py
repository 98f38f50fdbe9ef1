"""Questioning style profiles and hysteretic style selection."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from scout.config.models.conversation import ConversationConfig
from scout.conversation.models import (
    EngagementMetrics,
    Pace,
    QuestioningStyle,
    ResponseAnalysis,
    SignalKind,
    StyleDecision,
    StyleEffectiveness,
    StyleProfile,
    StyleRecommendation,
    StyleState,
)

STYLE_METADATA_KEY = "questioning_style"

STYLE_PROFILES: dict[QuestioningStyle, StyleProfile] = {
    QuestioningStyle.NOVICE_FRIENDLY: StyleProfile(
        style=QuestioningStyle.NOVICE_FRIENDLY,
        tone="warm, encouraging and jargon-free",
        pacing=Pace.SLOWER,
        assumed_depth=0.2,
        example_density=0.8,
        temperature=0.3,
        prompt_modifiers=(
            "Ask one simple question at a time.",
            "Explain any term you use in plain words.",
            "Offer a short everyday example.",
        ),
    ),
    QuestioningStyle.INTERMEDIATE_GUIDED: StyleProfile(
        style=QuestioningStyle.INTERMEDIATE_GUIDED,
        tone="friendly and structured",
        pacing=Pace.STEADY,
        assumed_depth=0.5,
        example_density=0.5,
        temperature=0.4,
        prompt_modifiers=(
            "Balance business context with light technical detail.",
            "Suggest options when the user may not know the answer.",
        ),
    ),
    QuestioningStyle.ADVANCED_TECHNICAL: StyleProfile(
        style=QuestioningStyle.ADVANCED_TECHNICAL,
        tone="precise and technical",
        pacing=Pace.STEADY,
        assumed_depth=0.7,
        example_density=0.3,
        temperature=0.5,
        prompt_modifiers=(
            "Use industry terminology without defining it.",
            "Probe architecture, integrations and constraints.",
        ),
    ),
    QuestioningStyle.EXPERT_EFFICIENT: StyleProfile(
        style=QuestioningStyle.EXPERT_EFFICIENT,
        tone="direct, peer to peer",
        pacing=Pace.FASTER,
        assumed_depth=0.9,
        example_density=0.0,
        temperature=0.6,
        prompt_modifiers=(
            "Skip fundamentals entirely.",
            "Ask only about decisions the user has not already stated.",
            "Batch related details into one question.",
        ),
    ),
    QuestioningStyle.IMPATIENT_ACCELERATED: StyleProfile(
        style=QuestioningStyle.IMPATIENT_ACCELERATED,
        tone="brief and action-oriented",
        pacing=Pace.FASTER,
        assumed_depth=0.8,
        example_density=0.1,
        temperature=0.7,
        prompt_modifiers=(
            "Keep the question under twenty words.",
            "Propose a sensible default the user can simply confirm.",
        ),
    ),
    QuestioningStyle.CONFUSED_SUPPORTIVE: StyleProfile(
        style=QuestioningStyle.CONFUSED_SUPPORTIVE,
        tone="patient, reassuring and concrete",
        pacing=Pace.SLOWER,
        assumed_depth=0.1,
        example_density=1.0,
        temperature=0.2,
        prompt_modifiers=(
            "Rephrase the previous question more simply.",
            "Give two concrete examples to choose from.",
            "Reassure the user that there are no wrong answers.",
        ),
    ),
    QuestioningStyle.COLLABORATIVE_EXPLORATORY: StyleProfile(
        style=QuestioningStyle.COLLABORATIVE_EXPLORATORY,
        tone="curious and open",
        pacing=Pace.STEADY,
        assumed_depth=0.6,
        example_density=0.4,
        temperature=0.8,
        prompt_modifiers=(
            "Ask an open-ended question that invites ideas.",
            "Build on what the user said last.",
        ),
    ),
}

# Band edges of the default sophistication mapping
EXPERT_FLOOR = 0.8
ADVANCED_FLOOR = 0.6
INTERMEDIATE_FLOOR = 0.4
BAND_EDGES = (INTERMEDIATE_FLOOR, ADVANCED_FLOOR, EXPERT_FLOOR)
COLLABORATIVE_SPIRIT_FLOOR = 0.7
ENGAGEMENT_DROP_STRENGTH = 0.6
ENGAGEMENT_DROP_MIN_SAMPLES = 3

# Explicit signals in precedence order
SIGNAL_STYLES: tuple[tuple[SignalKind, QuestioningStyle], ...] = (
    (SignalKind.CONFUSION, QuestioningStyle.CONFUSED_SUPPORTIVE),
    (SignalKind.IMPATIENCE, QuestioningStyle.IMPATIENT_ACCELERATED),
    (SignalKind.EXPERT_SKIP, QuestioningStyle.EXPERT_EFFICIENT),
)


@dataclass(frozen=True)
class StyleProposal:
    """The style one turn's evidence points at, before hysteresis."""

    style: QuestioningStyle
    strength: float
    reason: str


def default_style(score: float, engagement: EngagementMetrics) -> QuestioningStyle:
    """Sophistication-driven mapping used when no signal applies."""
    if score >= EXPERT_FLOOR:
        if engagement.collaborative_spirit > COLLABORATIVE_SPIRIT_FLOOR:
            return QuestioningStyle.COLLABORATIVE_EXPLORATORY
        return QuestioningStyle.EXPERT_EFFICIENT
    if score >= ADVANCED_FLOOR:
        return QuestioningStyle.ADVANCED_TECHNICAL
    if score >= INTERMEDIATE_FLOOR:
        return QuestioningStyle.INTERMEDIATE_GUIDED
    return QuestioningStyle.NOVICE_FRIENDLY


def propose_style(
    analysis: ResponseAnalysis,
    recent_engagement: Sequence[float] = (),
    engagement_drop_threshold: float = 0.35,
) -> StyleProposal:
    """Map one turn's analysis to a style.

    Confusion beats impatience, which beats an expert-skip request, which
    beats a sustained engagement drop, which beats the sophistication
    default. ``recent_engagement`` ends with this turn's engagement.
    """
    for kind, style in SIGNAL_STYLES:
        signal = analysis.signal(kind)
        if signal is not None:
            return StyleProposal(style, signal.confidence, f"{kind.value} signal")

    if len(recent_engagement) >= ENGAGEMENT_DROP_MIN_SAMPLES:
        average = sum(recent_engagement) / len(recent_engagement)
        if average < engagement_drop_threshold:
            return StyleProposal(
                QuestioningStyle.COLLABORATIVE_EXPLORATORY,
                ENGAGEMENT_DROP_STRENGTH,
                f"engagement averaged {average:.2f} over {len(recent_engagement)} turns",
            )

    score = analysis.sophistication.score
    margin = min(abs(score - edge) for edge in BAND_EDGES)
    strength = min(analysis.confidence, min(1.0, 0.5 + 2.5 * margin))
    return StyleProposal(
        default_style(score, analysis.engagement),
        strength,
        f"sophistication {score:.2f}",
    )


def load_style_state(metadata: dict[str, Any]) -> StyleState:
    raw = metadata.get(STYLE_METADATA_KEY)
    if raw is None:
        return StyleState()
    return StyleState.model_validate(raw)


class StyleSelector:
    """Chooses each turn's questioning style without oscillating.

    A proposal replaces the current style only when it is strong (at or
    above ``strong_signal_threshold``) or when the same proposal has won
    ``sustained_turns`` turns in a row.
    """

    def __init__(self, config: ConversationConfig | None = None) -> None:
        self._config = config or ConversationConfig()

    def propose(
        self, analysis: ResponseAnalysis, recent_engagement: Sequence[float] = ()
    ) -> StyleProposal:
        return propose_style(analysis, recent_engagement, self._config.engagement_drop_threshold)

    def decide(self, proposal: StyleProposal, state: StyleState) -> StyleDecision:
        """Apply hysteresis to a proposal; returns the decision and next state."""
        current = state.current

        if current is None:
            return StyleDecision(
                style=proposal.style,
                candidate=proposal.style,
                strength=proposal.strength,
                reason=f"initial style from {proposal.reason}",
                state=StyleState(current=proposal.style),
            )

        if proposal.style is current:
            return StyleDecision(
                style=current,
                previous=current,
                candidate=proposal.style,
                strength=proposal.strength,
                reason=f"holding {current.value}: {proposal.reason}",
                state=StyleState(current=current, switch_count=state.switch_count),
            )

        streak = state.candidate_streak + 1 if state.candidate is proposal.style else 1
        strong = proposal.strength >= self._config.strong_signal_threshold
        sustained = streak >= self._config.sustained_turns

        if strong or sustained:
            return StyleDecision(
                style=proposal.style,
                previous=current,
                switched=True,
                candidate=proposal.style,
                strength=proposal.strength,
                reason=(
                    f"switching to {proposal.style.value}: {proposal.reason}"
                    + (" (strong)" if strong else f" ({streak} turns in a row)")
                ),
                state=StyleState(current=proposal.style, switch_count=state.switch_count + 1),
            )

        return StyleDecision(
            style=current,
            previous=current,
            candidate=proposal.style,
            strength=proposal.strength,
            reason=(
                f"holding {current.value}; {proposal.style.value} is weak "
                f"({proposal.strength:.2f}, {streak}/{self._config.sustained_turns} turns)"
            ),
            state=StyleState(
                current=current,
                candidate=proposal.style,
                candidate_streak=streak,
                switch_count=state.switch_count,
            ),
        )

    def evaluate_effectiveness(
        self, current_style: QuestioningStyle, analysis: ResponseAnalysis
    ) -> StyleEffectiveness:
        """Advisory check of how well the current style is landing."""
        profile = STYLE_PROFILES[current_style]
        engagement = analysis.engagement.overall
        clarity = analysis.clarity.overall
        alignment = max(0.0, 1.0 - abs(analysis.sophistication.score - profile.assumed_depth))
        score = (engagement + clarity + alignment) / 3

        if score >= self._config.effectiveness_threshold:
            return StyleEffectiveness(
                style=current_style,
                effectiveness_score=score,
                engagement=engagement,
                clarity=clarity,
                alignment=alignment,
                recommendation=StyleRecommendation.HOLD,
                reasoning=f"{current_style.value} is effective ({score:.2f})",
            )

        suggested = self.propose(analysis).style
        return StyleEffectiveness(
            style=current_style,
            effectiveness_score=score,
            engagement=engagement,
            clarity=clarity,
            alignment=alignment,
            recommendation=StyleRecommendation.SWITCH,
            suggested_style=suggested if suggested is not current_style else None,
            reasoning=(
                f"{current_style.value} scored {score:.2f}, below "
                f"{self._config.effectiveness_threshold:.2f}"
            ),
        )
