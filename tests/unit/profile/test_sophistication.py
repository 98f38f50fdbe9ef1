"""Unit tests for sophistication scoring."""

import pytest

from scout.profile.enums import Industry, SophisticationLevel
from scout.profile.sophistication import (
    is_self_declared_novice,
    score_sophistication,
    vocabulary_complexity,
)

NOVICE_TEXT = "I want to build an app but I don't know anything about technology"
EXPERT_TEXT = (
    "We run an event-driven architecture with Kafka, Redis and PostgreSQL on "
    "Kubernetes, using CQRS and horizontal scaling for our microservices."
)


class TestSophisticationLevel:
    """Tests for score bucketing."""

    @pytest.mark.parametrize(
        ("score", "level"),
        [
            (0.0, SophisticationLevel.LOW),
            (0.33, SophisticationLevel.LOW),
            (0.34, SophisticationLevel.MEDIUM),
            (0.66, SophisticationLevel.MEDIUM),
            (0.67, SophisticationLevel.HIGH),
            (1.0, SophisticationLevel.HIGH),
        ],
    )
    def test_from_score(self, score: float, level: SophisticationLevel) -> None:
        """Scores map onto low, medium and high buckets."""
        assert SophisticationLevel.from_score(score) is level


class TestScoreSophistication:
    """Tests for score_sophistication."""

    def test_novice_is_low(self) -> None:
        """A self-declared beginner scores low."""
        result = score_sophistication(NOVICE_TEXT)

        assert result.level is SophisticationLevel.LOW
        assert result.score < 0.34

    def test_expert_outscores_novice(self) -> None:
        """Dense domain vocabulary scores well above a beginner."""
        expert = score_sophistication(EXPERT_TEXT)
        novice = score_sophistication(NOVICE_TEXT)

        assert expert.score > novice.score + 0.3
        assert expert.level is not SophisticationLevel.LOW
        assert expert.factors.domain_expertise == 1.0
        assert "cqrs" in expert.advanced_terms

    def test_level_matches_score(self) -> None:
        """The reported level is always the bucket of the reported score."""
        for text in (NOVICE_TEXT, EXPERT_TEXT, "ok", "We sell shoes online."):
            result = score_sophistication(text)
            assert result.level is SophisticationLevel.from_score(result.score)

    def test_factors_in_unit_range(self) -> None:
        """Every factor stays within [0, 1]."""
        factors = score_sophistication(EXPERT_TEXT).factors.model_dump()

        assert all(0.0 <= value <= 1.0 for value in factors.values())

    def test_industry_narrows_advanced_vocabulary(self) -> None:
        """A specific industry only credits its own advanced terms."""
        general = score_sophistication(EXPERT_TEXT, Industry.GENERAL)
        healthcare = score_sophistication(EXPERT_TEXT, Industry.HEALTHCARE)

        assert general.advanced_terms
        assert healthcare.advanced_terms == []

    def test_advanced_terms_raise_confidence(self) -> None:
        """Confidence grows with length and advanced vocabulary."""
        short = score_sophistication("ok")
        expert = score_sophistication(EXPERT_TEXT)

        assert short.confidence < expert.confidence <= 0.9


class TestHelpers:
    """Tests for the linguistic helpers."""

    def test_novice_marker_detection(self) -> None:
        """Beginner phrases are recognized."""
        assert is_self_declared_novice("Honestly I'm new to this")
        assert not is_self_declared_novice("We run payments at scale")

    def test_empty_vocabulary_complexity(self) -> None:
        """No words means no complexity."""
        assert vocabulary_complexity("   ") == 0.0
