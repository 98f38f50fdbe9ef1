"""Unit tests for role classification."""

from scout.profile.enums import UserRole
from scout.profile.role import UNKNOWN_CONFIDENCE, classify_role


class TestClassifyRole:
    """Tests for classify_role."""

    def test_technical_role(self) -> None:
        """Stack vocabulary classifies as technical."""
        result = classify_role("Our backend uses kafka and redis with postgresql")

        assert result.role is UserRole.TECHNICAL
        assert result.confidence == 0.9
        assert "kafka" in result.indicators.technical

    def test_business_role(self) -> None:
        """Commercial vocabulary classifies as business."""
        result = classify_role(
            "We need revenue growth, lower churn and better pricing for investors"
        )

        assert result.role is UserRole.BUSINESS
        assert result.scores["business"] == 4

    def test_balanced_evidence_is_hybrid(self) -> None:
        """Comparable technical and business evidence yields hybrid."""
        result = classify_role("the api must support our revenue")

        assert result.role is UserRole.HYBRID
        assert result.confidence == 0.5

    def test_bridge_vocabulary_is_hybrid(self) -> None:
        """Dominant bridge indicators yield hybrid even without both families."""
        result = classify_role("We keep a roadmap and a backlog for every sprint")

        assert result.role is UserRole.HYBRID
        assert result.scores["hybrid"] == 3

    def test_no_evidence_is_unknown(self) -> None:
        """Text with no indicators is unknown at floor confidence."""
        result = classify_role("hello there")

        assert result.role is UserRole.UNKNOWN
        assert result.confidence == UNKNOWN_CONFIDENCE

    def test_business_patterns_count(self) -> None:
        """Money amounts and percentages count as business evidence."""
        result = classify_role("We grew 40% and raised $2m")

        assert result.role is UserRole.BUSINESS
        assert len(result.indicators.business) == 2
