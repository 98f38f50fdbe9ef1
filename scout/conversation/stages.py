"""Stage state machine.

Stages come from the session's agent template in order. A stage advances
only on an explicit progress request whose evidence meets the configured
minimums, and only ever to the next stage.
"""

from collections.abc import Callable
from datetime import datetime

from scout.config.models.conversation import ConversationConfig
from scout.conversation.models import (
    StageCompletionEvidence,
    StageProgress,
    StageStatus,
    StageTransition,
)
from scout.errors import InvalidInputError
from scout.observability.logging import get_logger
from scout.profile.models import utc_now
from scout.sessions.models import Session
from scout.sessions.session import ManagedSession

logger = get_logger(__name__)


def stage_progress(session: Session, stage: str) -> StageProgress:
    progress = session.stage_progress.get(stage)
    if progress is None:
        progress = session.stage_progress[stage] = StageProgress(stage=stage)
    return progress


def record_answer(session: Session, confidence: float, now: datetime) -> None:
    """Count an answered question against the current stage.

    Stage confidence is the running mean of per-answer confidence.
    """
    if session.current_stage is None:
        return
    progress = stage_progress(session, session.current_stage)
    answered = progress.answered_questions + 1
    progress.confidence = (progress.confidence * (answered - 1) + confidence) / answered
    progress.answered_questions = answered
    if progress.status is StageStatus.NOT_STARTED:
        progress.status = StageStatus.IN_PROGRESS
        progress.started_at = now


def current_evidence(session: Session) -> StageCompletionEvidence:
    """Evidence accumulated so far in the current stage."""
    if session.current_stage is None:
        return StageCompletionEvidence(answered_questions=0, stage_confidence=0.0)
    progress = session.stage_progress.get(session.current_stage)
    if progress is None:
        return StageCompletionEvidence(answered_questions=0, stage_confidence=0.0)
    return StageCompletionEvidence(
        answered_questions=progress.answered_questions,
        stage_confidence=progress.confidence,
    )


def overall_progress(session: Session) -> float:
    """Fraction of stages completed."""
    stages = session.stages
    if not stages:
        return 0.0
    completed = sum(
        1
        for stage in stages
        if (p := session.stage_progress.get(stage)) is not None
        and p.status is StageStatus.COMPLETED
    )
    return completed / len(stages)


class StageMachine:
    """Advances sessions through their agent's stage sequence."""

    def __init__(
        self,
        config: ConversationConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._config = config or ConversationConfig()
        self._clock = clock

    def is_sufficient(self, evidence: StageCompletionEvidence) -> bool:
        return (
            evidence.answered_questions >= self._config.min_answered_questions
            and evidence.stage_confidence >= self._config.min_stage_confidence
        )

    async def progress(
        self,
        session: ManagedSession,
        evidence: StageCompletionEvidence | None,
    ) -> StageTransition:
        """Handle a progress request.

        Progressing past the final stage is a no-op that reports the final
        stage. Insufficient evidence leaves the stage unchanged.

        Raises:
            InvalidInputError: If evidence is missing or no agent is attached
        """
        if evidence is None:
            raise InvalidInputError("completion evidence is required")

        state = session.state
        if state.agent is None or state.current_stage is None:
            raise InvalidInputError("session has no agent; register one before progressing")

        stages = state.stages
        current = state.current_stage
        index = stages.index(current)

        if index == len(stages) - 1:
            return StageTransition(
                previous_stage=current,
                current_stage=current,
                advanced=False,
                terminal=True,
                reason="already at the final stage",
            )

        if not self.is_sufficient(evidence):
            return StageTransition(
                previous_stage=current,
                current_stage=current,
                advanced=False,
                terminal=False,
                reason=(
                    f"need {self._config.min_answered_questions} answers at confidence "
                    f"{self._config.min_stage_confidence:.2f}, got "
                    f"{evidence.answered_questions} at {evidence.stage_confidence:.2f}"
                ),
            )

        following = stages[index + 1]
        now = self._clock()

        def advance(working: Session) -> None:
            if working.current_stage != current:
                raise InvalidInputError(
                    f"stage moved to {working.current_stage} while progressing from {current}"
                )
            done = stage_progress(working, current)
            done.status = StageStatus.COMPLETED
            done.completed_at = now
            done.answered_questions = max(done.answered_questions, evidence.answered_questions)
            done.confidence = max(done.confidence, evidence.stage_confidence)
            if done.started_at is None:
                done.started_at = now

            upcoming = stage_progress(working, following)
            upcoming.status = StageStatus.IN_PROGRESS
            upcoming.started_at = now
            working.current_stage = following

        await session.apply(advance, "progress_stage")

        logger.info(
            "stage_advanced",
            session_id=session.session_id,
            from_stage=current,
            to_stage=following,
        )
        return StageTransition(
            previous_stage=current,
            current_stage=following,
            advanced=True,
            terminal=following == stages[-1],
            reason=f"completed {current}",
        )
