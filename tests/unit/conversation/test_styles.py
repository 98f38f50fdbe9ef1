"""Unit tests for questioning style selection."""

import pytest

from scout.config.models.conversation import ConversationConfig
from scout.conversation.models import (
    AdaptationRecommendations,
    BehavioralSignal,
    ClarityMetrics,
    EngagementMetrics,
    QuestioningStyle,
    ResponseAnalysis,
    SignalKind,
    SophisticationBreakdown,
    StyleRecommendation,
    StyleState,
)
from scout.conversation.styles import (
    STYLE_METADATA_KEY,
    STYLE_PROFILES,
    StyleProposal,
    StyleSelector,
    default_style,
    load_style_state,
    propose_style,
)
from scout.profile.enums import SophisticationLevel


def make_analysis(
    score: float = 0.5,
    signals: tuple[tuple[SignalKind, float], ...] = (),
    confidence: float = 0.9,
    engagement: float = 0.0,
    clarity: float = 0.0,
    collaborative: float | None = None,
) -> ResponseAnalysis:
    return ResponseAnalysis(
        sophistication=SophisticationBreakdown(
            score=score, level=SophisticationLevel.from_score(score)
        ),
        clarity=ClarityMetrics(
            specificity=clarity,
            structured_thinking=clarity,
            completeness=clarity,
            relevance=clarity,
            actionability=clarity,
        ),
        engagement=EngagementMetrics(
            enthusiasm=engagement,
            interest_level=engagement,
            participation_quality=engagement,
            proactiveness=engagement,
            collaborative_spirit=engagement if collaborative is None else collaborative,
        ),
        signals=[BehavioralSignal(kind=kind, confidence=c) for kind, c in signals],
        recommendations=AdaptationRecommendations(
            suggested_style=QuestioningStyle.INTERMEDIATE_GUIDED
        ),
        confidence=confidence,
    )


@pytest.fixture
def selector() -> StyleSelector:
    return StyleSelector()


class TestStyleProfiles:
    """Tests for the style profile table."""

    def test_every_style_has_a_profile(self) -> None:
        assert set(STYLE_PROFILES) == set(QuestioningStyle)

    def test_expert_gets_no_examples(self) -> None:
        assert STYLE_PROFILES[QuestioningStyle.EXPERT_EFFICIENT].example_density == 0.0
        assert STYLE_PROFILES[QuestioningStyle.CONFUSED_SUPPORTIVE].example_density == 1.0


class TestDefaultStyle:
    """Tests for the sophistication-driven mapping."""

    @pytest.mark.parametrize(
        ("score", "expected"),
        [
            (0.9, QuestioningStyle.EXPERT_EFFICIENT),
            (0.7, QuestioningStyle.ADVANCED_TECHNICAL),
            (0.5, QuestioningStyle.INTERMEDIATE_GUIDED),
            (0.2, QuestioningStyle.NOVICE_FRIENDLY),
        ],
    )
    def test_bands(self, score: float, expected: QuestioningStyle) -> None:
        assert default_style(score, EngagementMetrics()) is expected

    def test_collaborative_expert(self) -> None:
        """A collaborative expert is explored with, not interrogated."""
        engagement = EngagementMetrics(collaborative_spirit=0.8)

        assert default_style(0.9, engagement) is QuestioningStyle.COLLABORATIVE_EXPLORATORY


class TestProposeStyle:
    """Tests for per-turn style proposals."""

    def test_confusion_beats_impatience(self) -> None:
        analysis = make_analysis(
            signals=((SignalKind.IMPATIENCE, 0.9), (SignalKind.CONFUSION, 0.5))
        )

        proposal = propose_style(analysis)

        assert proposal.style is QuestioningStyle.CONFUSED_SUPPORTIVE
        assert proposal.strength == pytest.approx(0.5)

    def test_impatience_beats_expert_skip(self) -> None:
        analysis = make_analysis(
            signals=((SignalKind.EXPERT_SKIP, 0.9), (SignalKind.IMPATIENCE, 0.6))
        )

        assert propose_style(analysis).style is QuestioningStyle.IMPATIENT_ACCELERATED

    def test_sustained_engagement_drop(self) -> None:
        """Low engagement over three turns turns the style collaborative."""
        proposal = propose_style(make_analysis(score=0.9), [0.2, 0.3, 0.25])

        assert proposal.style is QuestioningStyle.COLLABORATIVE_EXPLORATORY
        assert proposal.strength == pytest.approx(0.6)

    def test_short_engagement_history_ignored(self) -> None:
        proposal = propose_style(make_analysis(score=0.9), [0.1, 0.1])

        assert proposal.style is QuestioningStyle.EXPERT_EFFICIENT

    def test_strength_grows_with_distance_from_band_edge(self) -> None:
        """Scores near a band edge make weak proposals."""
        near = propose_style(make_analysis(score=0.41))
        middle = propose_style(make_analysis(score=0.5))

        assert near.strength == pytest.approx(0.525)
        assert middle.strength == pytest.approx(0.75)

    def test_strength_capped_by_analysis_confidence(self) -> None:
        proposal = propose_style(make_analysis(score=0.5, confidence=0.55))

        assert proposal.strength == pytest.approx(0.55)


class TestDecide:
    """Tests for hysteresis."""

    def test_first_turn_adopts_proposal(self, selector) -> None:
        proposal = StyleProposal(QuestioningStyle.NOVICE_FRIENDLY, 0.3, "sophistication 0.10")

        decision = selector.decide(proposal, StyleState())

        assert decision.style is QuestioningStyle.NOVICE_FRIENDLY
        assert decision.switched is False
        assert decision.state.current is QuestioningStyle.NOVICE_FRIENDLY

    def test_strong_proposal_switches(self, selector) -> None:
        state = StyleState(current=QuestioningStyle.INTERMEDIATE_GUIDED, switch_count=2)
        proposal = StyleProposal(QuestioningStyle.CONFUSED_SUPPORTIVE, 0.95, "confusion signal")

        decision = selector.decide(proposal, state)

        assert decision.switched is True
        assert decision.previous is QuestioningStyle.INTERMEDIATE_GUIDED
        assert decision.state == StyleState(
            current=QuestioningStyle.CONFUSED_SUPPORTIVE, switch_count=3
        )

    def test_weak_proposal_needs_sustained_turns(self, selector) -> None:
        """A weak candidate wins only on its third turn in a row."""
        state = StyleState(current=QuestioningStyle.INTERMEDIATE_GUIDED)
        proposal = StyleProposal(QuestioningStyle.ADVANCED_TECHNICAL, 0.5, "sophistication 0.62")

        first = selector.decide(proposal, state)
        second = selector.decide(proposal, first.state)
        third = selector.decide(proposal, second.state)

        assert (first.switched, second.switched, third.switched) == (False, False, True)
        assert second.state.candidate_streak == 2
        assert third.style is QuestioningStyle.ADVANCED_TECHNICAL
        assert third.state.candidate is None

    def test_alternating_weak_proposals_never_switch(self, selector) -> None:
        state = StyleState(current=QuestioningStyle.INTERMEDIATE_GUIDED)
        proposals = [
            StyleProposal(QuestioningStyle.ADVANCED_TECHNICAL, 0.5, "up"),
            StyleProposal(QuestioningStyle.NOVICE_FRIENDLY, 0.5, "down"),
        ]

        for turn in range(8):
            decision = selector.decide(proposals[turn % 2], state)
            assert decision.switched is False
            assert decision.state.candidate_streak == 1
            state = decision.state

        assert state.current is QuestioningStyle.INTERMEDIATE_GUIDED

    def test_matching_proposal_resets_candidate(self, selector) -> None:
        state = StyleState(
            current=QuestioningStyle.INTERMEDIATE_GUIDED,
            candidate=QuestioningStyle.ADVANCED_TECHNICAL,
            candidate_streak=2,
        )
        proposal = StyleProposal(QuestioningStyle.INTERMEDIATE_GUIDED, 0.4, "sophistication 0.50")

        decision = selector.decide(proposal, state)

        assert decision.state.candidate is None
        assert decision.state.candidate_streak == 0

    def test_sustained_turns_configurable(self) -> None:
        selector = StyleSelector(ConversationConfig(sustained_turns=2))
        state = StyleState(current=QuestioningStyle.INTERMEDIATE_GUIDED)
        proposal = StyleProposal(QuestioningStyle.ADVANCED_TECHNICAL, 0.5, "sophistication 0.62")

        second = selector.decide(proposal, selector.decide(proposal, state).state)

        assert second.switched is True


class TestEffectiveness:
    """Tests for advisory style effectiveness."""

    def test_effective_style_held(self, selector) -> None:
        analysis = make_analysis(score=0.7, engagement=1.0, clarity=1.0)

        report = selector.evaluate_effectiveness(QuestioningStyle.ADVANCED_TECHNICAL, analysis)

        assert report.recommendation is StyleRecommendation.HOLD
        assert report.effectiveness_score == pytest.approx(1.0)
        assert report.suggested_style is None

    def test_ineffective_style_suggests_alternative(self, selector) -> None:
        analysis = make_analysis(score=0.2)

        report = selector.evaluate_effectiveness(QuestioningStyle.EXPERT_EFFICIENT, analysis)

        assert report.recommendation is StyleRecommendation.SWITCH
        assert report.alignment == pytest.approx(0.3)
        assert report.suggested_style is QuestioningStyle.NOVICE_FRIENDLY


class TestStyleState:
    """Tests for reading style memory from session metadata."""

    def test_missing_state(self) -> None:
        assert load_style_state({}) == StyleState()

    def test_round_trips_through_metadata(self) -> None:
        state = StyleState(current=QuestioningStyle.EXPERT_EFFICIENT, switch_count=1)

        loaded = load_style_state({STYLE_METADATA_KEY: state.model_dump(mode="json")})

        assert loaded == state
