"""Tests for Prometheus metrics."""

from prometheus_client import REGISTRY

from scout.observability.metrics import (
    ACTIVE_SESSIONS,
    ESCAPE_HATCH_TRIGGERS,
    SESSION_OPERATIONS,
    STYLE_SWITCHES,
    TURN_LATENCY,
)


class TestSessionOperations:
    """Tests for SESSION_OPERATIONS counter."""

    def test_counter_increment(self) -> None:
        """Should increment counter with labels."""
        before = REGISTRY.get_sample_value(
            "scout_session_operations_total",
            {"operation": "metrics_check", "status": "success"},
        ) or 0.0
        SESSION_OPERATIONS.labels(operation="metrics_check", status="success").inc()
        after = REGISTRY.get_sample_value(
            "scout_session_operations_total",
            {"operation": "metrics_check", "status": "success"},
        )
        assert after == before + 1


class TestConversationMetrics:
    """Tests for conversation counters and histograms."""

    def test_style_switch_labels(self) -> None:
        """Should accept from and to style labels."""
        STYLE_SWITCHES.labels(from_style="novice_friendly", to_style="expert_efficient").inc()

    def test_escape_hatch_labels(self) -> None:
        """Should accept signal and stage labels."""
        ESCAPE_HATCH_TRIGGERS.labels(signal="expert_skip", stage="discovery").inc()

    def test_turn_latency_observe(self) -> None:
        """Should observe latency values."""
        TURN_LATENCY.observe(0.15)

    def test_active_sessions_gauge(self) -> None:
        """Should set the active session gauge."""
        ACTIVE_SESSIONS.set(3)
        assert REGISTRY.get_sample_value("scout_active_sessions") == 3
