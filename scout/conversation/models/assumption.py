"""Assumption models."""

from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field

from scout.conversation.models.enums import AssumptionCategory, AssumptionStatus, TriggerSource
from scout.profile.models import utc_now


class Assumption(BaseModel):
    """A system-proposed default filling a gap left by skipped questions.

    ``depends_on`` edges form a DAG within a session.
    """

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    category: AssumptionCategory
    statement: str = Field(..., min_length=1)
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    depends_on: set[str] = Field(default_factory=set)
    source_trigger: TriggerSource = TriggerSource.ESCAPE_HATCH
    status: AssumptionStatus = AssumptionStatus.PROPOSED
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def user_accepted(self) -> bool | None:
        """True if accepted, False if rejected, None while undecided."""
        if self.status is AssumptionStatus.ACCEPTED:
            return True
        if self.status is AssumptionStatus.REJECTED:
            return False
        return None
