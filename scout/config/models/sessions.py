"""Session lifecycle configuration."""

from pydantic import BaseModel, Field


class SessionManagerConfig(BaseModel):
    """Expiry, concurrency and health settings for the session manager."""

    default_ttl_seconds: int = Field(
        default=86400,
        gt=0,
        description="Session lifetime when no ttl is requested",
    )
    max_concurrent_sessions: int = Field(
        default=1000,
        gt=0,
        description="Active session count used for capacity health checks",
    )
    lock_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Seconds to wait for the per-session lock",
    )
    storage_timeout: float = Field(
        default=2.0,
        gt=0,
        description="Seconds allowed for one store operation",
    )
    degraded_error_rate: float = Field(default=0.1, ge=0.0, le=1.0)
    unhealthy_error_rate: float = Field(default=0.2, ge=0.0, le=1.0)
    capacity_warning_ratio: float = Field(default=0.8, ge=0.0, le=1.0)
    capacity_degraded_ratio: float = Field(default=0.9, ge=0.0, le=1.0)
