"""Profile detection configuration."""

from pydantic import BaseModel, Field


class ProfileDetectionConfig(BaseModel):
    """Thresholds and limits for profile detection."""

    min_confidence: float = Field(
        default=0.6,
        ge=0.0,
        le=1.0,
        description="Minimum confidence for a profile to pass validation",
    )
    batch_limit: int = Field(
        default=10,
        gt=0,
        description="Maximum number of inputs in one batch detection call",
    )
    history_window: int = Field(
        default=10,
        gt=0,
        description="Most recent conversation messages kept on a profile and read by detection",
    )
    analysis_version: str = Field(
        default="1.0",
        description="Version tag stamped on every detected profile",
    )
