"""Session models."""

from datetime import datetime, timedelta
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from scout.catalog.models import AgentInstance
from scout.conversation.models.assumption import Assumption
from scout.conversation.models.question import ConversationExchange
from scout.conversation.models.stage import StageProgress
from scout.profile.enums import Industry
from scout.profile.models import UserProfile, utc_now


class Session(BaseModel):
    """Authoritative state of one discovery conversation.

    This is the snapshot written by ``save_state``. Style memory and
    behavioral-signal counters live in ``metadata``.
    """

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    session_id: str = Field(default_factory=lambda: str(uuid4()), min_length=1)
    profile: UserProfile | None = Field(default=None, description="Active profile")
    agent: AgentInstance | None = Field(default=None, description="Active agent")
    current_stage: str | None = Field(default=None, description="Current stage name")
    stage_progress: dict[str, StageProgress] = Field(default_factory=dict)
    exchanges: list[ConversationExchange] = Field(default_factory=list)
    assumptions: dict[str, Assumption] = Field(default_factory=dict)
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utc_now)
    last_activity_at: datetime = Field(default_factory=utc_now)
    expires_at: datetime = Field(..., description="Expiry instant")
    revision: int = Field(default=0, ge=0, description="Incremented on every mutation")

    @property
    def domain(self) -> Industry:
        if self.agent is not None:
            return self.agent.domain
        if self.profile is not None:
            return self.profile.industry
        return Industry.GENERAL

    @property
    def stages(self) -> list[str]:
        return list(self.agent.stages) if self.agent is not None else []


class SessionContext(BaseModel):
    """Read-only view of a session used by the conversation engine."""

    model_config = ConfigDict(frozen=True)

    session_id: str
    domain: Industry
    current_stage: str | None
    stages: list[str]
    profile: UserProfile | None
    agent: AgentInstance | None
    exchanges: list[ConversationExchange]
    metadata: dict[str, Any]
    assumptions: dict[str, Assumption]
    created_at: datetime
    expires_at: datetime
    revision: int

    @classmethod
    def from_session(cls, session: Session) -> "SessionContext":
        snapshot = session.model_copy(deep=True)
        return cls(
            session_id=snapshot.session_id,
            domain=snapshot.domain,
            current_stage=snapshot.current_stage,
            stages=snapshot.stages,
            profile=snapshot.profile,
            agent=snapshot.agent,
            exchanges=snapshot.exchanges,
            metadata=snapshot.metadata,
            assumptions=snapshot.assumptions,
            created_at=snapshot.created_at,
            expires_at=snapshot.expires_at,
            revision=snapshot.revision,
        )


class SessionOptions(BaseModel):
    """Options for creating a session."""

    ttl: timedelta | None = Field(default=None, description="Lifetime; config default if unset")
    metadata: dict[str, Any] = Field(default_factory=dict)
    auto_save: bool = Field(default=False, description="Save after every mutation")


class SessionMetrics(BaseModel):
    """Per-session request accounting kept by the manager."""

    session_id: str
    created_at: datetime
    expires_at: datetime
    last_activity_at: datetime
    request_count: int = 0
    error_count: int = 0


class SessionAnalytics(BaseModel):
    total_sessions: int = 0
    active_sessions: int = 0
    total_requests: int = 0
    total_errors: int = 0
    error_rate: float = Field(default=0.0, ge=0.0, le=1.0)
    average_requests_per_session: float = 0.0
    average_session_age_seconds: float = 0.0
    counters: dict[str, int] = Field(default_factory=dict, description="Persisted counters")


class HealthState(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class HealthStatus(BaseModel):
    status: HealthState
    active_sessions: int
    total_sessions: int
    error_rate: float = Field(..., ge=0.0, le=1.0)
    capacity_ratio: float = Field(..., ge=0.0)
    warnings: list[str] = Field(default_factory=list)
    uptime_seconds: float = 0.0
    last_cleanup_at: datetime | None = None
    checked_at: datetime = Field(default_factory=utc_now)
