"""Prometheus metrics for Scout.

Counters and gauges for session lifecycle, profile detection, style
adaptation and collaborator failures.
"""

from prometheus_client import Counter, Gauge, Histogram

# Session metrics
SESSION_OPERATIONS = Counter(
    "scout_session_operations_total",
    "Session lifecycle operations",
    labelnames=["operation", "status"],
)

ACTIVE_SESSIONS = Gauge(
    "scout_active_sessions",
    "Number of sessions tracked by the manager",
)

STORAGE_ERRORS = Counter(
    "scout_storage_errors_total",
    "Session store failures",
    labelnames=["operation", "error_type"],
)

# Profile detection metrics
PROFILE_DETECTIONS = Counter(
    "scout_profile_detections_total",
    "Profiles detected",
    labelnames=["industry", "role", "sophistication"],
)

PROFILE_CORRECTIONS = Counter(
    "scout_profile_corrections_total",
    "User-issued profile corrections",
    labelnames=["correction_type"],
)

# Conversation metrics
STYLE_SWITCHES = Counter(
    "scout_questioning_style_switches_total",
    "Questioning style changes",
    labelnames=["from_style", "to_style"],
)

ESCAPE_HATCH_TRIGGERS = Counter(
    "scout_escape_hatch_triggers_total",
    "Confirmed escape-hatch or expert-skip triggers",
    labelnames=["signal", "stage"],
)

GENERATION_FAILURES = Counter(
    "scout_generation_failures_total",
    "Question generation failures",
    labelnames=["error_type"],
)

TURN_LATENCY = Histogram(
    "scout_turn_latency_seconds",
    "Latency of one adaptive conversation turn",
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)
