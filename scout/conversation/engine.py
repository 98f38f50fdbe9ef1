"""Adaptive conversation engine.

Runs one discovery turn at a time: analyze the user's response, pick a
questioning style with hysteresis, have the question writer phrase the
next question, then fold the results into the in-memory session in one
atomic mutation. Persisting is left to the caller's ``save_state``.
"""

import asyncio
import inspect
import time
from collections.abc import Awaitable, Callable, Iterable
from datetime import datetime
from uuid import uuid4

from scout.catalog.catalog import TemplateCatalog
from scout.catalog.models import TemplateQuestion
from scout.config.models.conversation import ConversationConfig
from scout.config.models.profile import ProfileDetectionConfig
from scout.conversation.analyzer import ResponseAnalyzer
from scout.conversation.assumptions import AssumptionGraph
from scout.conversation.models import (
    Assumption,
    ConversationExchange,
    EngagementReport,
    EscapeHatchTrigger,
    QuestionGenerationResult,
    QuestioningStyle,
    QuestionType,
    ResponseAnalysis,
    SignalKind,
    SophisticationEstimate,
    StageCompletionEvidence,
    StageTransition,
    StyleEffectiveness,
    TurnResult,
)
from scout.conversation.prompts import build_question_messages
from scout.conversation.stages import StageMachine, overall_progress, record_answer
from scout.conversation.styles import (
    STYLE_METADATA_KEY,
    STYLE_PROFILES,
    StyleSelector,
    load_style_state,
)
from scout.errors import GenerationFailedError, InvalidInputError, SessionBusyError
from scout.observability.logging import get_logger
from scout.observability.metrics import (
    ESCAPE_HATCH_TRIGGERS,
    GENERATION_FAILURES,
    STYLE_SWITCHES,
    TURN_LATENCY,
)
from scout.profile.detector import ProfileDetector
from scout.profile.enums import Industry
from scout.profile.models import (
    ConversationMessage,
    DetectionOptions,
    ProfileDetectionResult,
    utc_now,
)
from scout.providers.llm import LLMProvider
from scout.sessions.models import Session, SessionContext
from scout.sessions.session import ManagedSession

logger = get_logger(__name__)

SIGNAL_COUNTS_KEY = "signal_counts"
RECENT_ENGAGEMENT_TURNS = 2

# Escape-hatch signals in the order they are reported
TRIGGER_SIGNALS = (SignalKind.ESCAPE_HATCH, SignalKind.EXPERT_SKIP)

EscapeHatchHandler = Callable[[EscapeHatchTrigger], Awaitable[None] | None]

STYLE_QUESTION_TYPES: dict[QuestioningStyle, QuestionType] = {
    QuestioningStyle.CONFUSED_SUPPORTIVE: QuestionType.CLARIFYING,
    QuestioningStyle.IMPATIENT_ACCELERATED: QuestionType.CONFIRMATION,
}


def _require_text(value: object, field: str = "user_response") -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"{field} must be non-empty text")
    return value.strip()


def _next_bank_question(context: SessionContext) -> tuple[TemplateQuestion | None, list[str]]:
    """First unasked bank question of the current stage, plus later ones' text."""
    if context.agent is None or context.current_stage is None:
        return None, []
    asked = {e.question_id for e in context.exchanges}
    pending = [
        q for q in context.agent.questions_for(context.current_stage) if q.id not in asked
    ]
    if not pending:
        return None, []
    return pending[0], [q.text for q in pending[1:3]]


class AdaptiveConversationEngine:
    """Orchestrates adaptive discovery conversations.

    Collaborators are injected: the question writer, and optionally the
    profile detector and template catalog used to onboard a session. The
    engine holds no per-session state of its own.
    """

    def __init__(
        self,
        llm: LLMProvider,
        config: ConversationConfig | None = None,
        detector: ProfileDetector | None = None,
        catalog: TemplateCatalog | None = None,
        on_escape_hatch: EscapeHatchHandler | None = None,
        max_tokens: int = 512,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._llm = llm
        self._config = config or ConversationConfig()
        self._detector = detector
        self._catalog = catalog
        self._on_escape_hatch = on_escape_hatch
        self._max_tokens = max_tokens
        self._clock = clock
        self._analyzer = ResponseAnalyzer(self._config)
        self._styles = StyleSelector(self._config)
        self._stages = StageMachine(self._config, clock)
        self._history_window = (
            detector.config if detector is not None else ProfileDetectionConfig()
        ).history_window

    @property
    def config(self) -> ConversationConfig:
        return self._config

    # ------------------------------------------------------------------
    # Stateless operations
    # ------------------------------------------------------------------

    def analyze_response(self, user_response: str, context: SessionContext) -> ResponseAnalysis:
        """Analyze one utterance. See ``ResponseAnalyzer.analyze``."""
        return self._analyzer.analyze(user_response, context)

    def quick_sophistication_check(
        self, user_response: str, domain: Industry = Industry.GENERAL
    ) -> SophisticationEstimate:
        return self._analyzer.quick_sophistication_check(user_response, domain)

    def monitor_engagement(self, context: SessionContext) -> EngagementReport:
        if context is None:
            raise InvalidInputError("context is required")
        return self._analyzer.monitor_engagement(context.exchanges)

    def monitor_questioning_style_effectiveness(
        self,
        context: SessionContext,
        current_style: QuestioningStyle,
        analysis: ResponseAnalysis,
    ) -> StyleEffectiveness:
        """Advisory hold/switch recommendation; never changes the style."""
        if context is None or analysis is None:
            raise InvalidInputError("context and analysis are required")
        return self._styles.evaluate_effectiveness(QuestioningStyle(current_style), analysis)

    async def generate_adaptive_question(
        self,
        context: SessionContext,
        analysis: ResponseAnalysis,
        last_response: str | None = None,
    ) -> QuestionGenerationResult:
        """Select a style and have the question writer phrase the next question.

        Reads the remembered style from ``context.metadata`` but changes
        nothing; the returned ``style_decision.state`` is what a caller
        commits to remember the choice.

        Raises:
            InvalidInputError: If context or analysis is missing
            GenerationFailedError: If the question writer failed or timed out
        """
        if context is None or analysis is None:
            raise InvalidInputError("context and analysis are required")

        recent = [
            e.engagement_score
            for e in context.exchanges
            if e.answered and e.engagement_score is not None
        ][-RECENT_ENGAGEMENT_TURNS:]
        recent.append(analysis.engagement.overall)

        proposal = self._styles.propose(analysis, recent)
        decision = self._styles.decide(proposal, load_style_state(context.metadata))
        style = STYLE_PROFILES[decision.style]

        base_question, later_questions = _next_bank_question(context)
        messages = build_question_messages(context, style, analysis, base_question, last_response)

        try:
            response = await asyncio.wait_for(
                self._llm.generate(
                    messages,
                    max_tokens=self._max_tokens,
                    temperature=style.temperature,
                ),
                timeout=self._config.generation_timeout,
            )
        except Exception as e:
            error_type = "timeout" if isinstance(e, asyncio.TimeoutError) else type(e).__name__
            GENERATION_FAILURES.labels(error_type=error_type).inc()
            logger.warning(
                "question_generation_failed",
                session_id=context.session_id,
                style=decision.style.value,
                error_type=error_type,
                error=str(e),
            )
            raise GenerationFailedError(f"Question generation failed: {e}", cause=e) from e

        text = response.content.strip()
        if not text:
            GENERATION_FAILURES.labels(error_type="empty").inc()
            raise GenerationFailedError("Question writer returned an empty question")

        question_type = STYLE_QUESTION_TYPES.get(
            decision.style,
            base_question.question_type if base_question is not None else QuestionType.OPEN_ENDED,
        )
        follow_ups = list(base_question.follow_ups) if base_question is not None else []
        follow_ups.extend(q for q in later_questions if q not in follow_ups)

        stage = context.current_stage or ""
        return QuestionGenerationResult(
            question_id=base_question.id if base_question is not None else str(uuid4()),
            question=text,
            question_type=question_type,
            sophistication_level=analysis.sophistication.level,
            follow_up_suggestions=follow_ups[:3],
            confidence=(analysis.confidence + decision.strength) / 2,
            reasoning=f"{decision.reason}; stage {stage or 'unstaged'}",
            questioning_style=decision.style,
            stage=stage,
            style_decision=decision,
        )

    # ------------------------------------------------------------------
    # Session operations
    # ------------------------------------------------------------------

    async def initialize_session(
        self, session: ManagedSession, user_input: str
    ) -> ProfileDetectionResult:
        """Detect a profile from the opening input and attach a matching agent."""
        if self._detector is None or self._catalog is None:
            raise InvalidInputError("a profile detector and template catalog are required")
        text = _require_text(user_input, "user_input")

        result = await self._detector.detect_profile(
            text, DetectionOptions(session_id=session.session_id)
        )
        template = await self._catalog.select_for_profile(result.profile)
        agent = self._catalog.instantiate(template, result.profile)

        await session.update_profile(result.profile)
        await session.register_agent(agent)
        logger.info(
            "session_initialized",
            session_id=session.session_id,
            template_id=template.id,
            industry=result.profile.industry.value,
        )
        return result

    async def run_turn(self, session: ManagedSession, user_response: str) -> TurnResult:
        """Run one conversation turn against the in-memory session.

        Nothing changes unless the whole turn succeeds; a failed question
        writer call leaves the session exactly as it was. The turn is
        prepared from a snapshot of the session and only committed if no
        other mutation landed in the meantime.

        Raises:
            InvalidInputError: If the response is empty or no agent is attached
            GenerationFailedError: If the question writer failed
            SessionBusyError: If the session changed while the turn was prepared
        """
        if session is None:
            raise InvalidInputError("session is required")
        text = _require_text(user_response)
        start = time.perf_counter()

        context = session.working_context()
        if context.agent is None:
            raise InvalidInputError("session has no agent; register one before running turns")

        analysis = self.analyze_response(text, context)

        profile = context.profile
        if self._detector is not None:
            detection = await self._detector.detect_profile(
                text,
                DetectionOptions(session_id=context.session_id, previous_profile=profile),
            )
            profile = detection.profile

        question = await self.generate_adaptive_question(context, analysis, last_response=text)
        decision = question.style_decision
        now = self._clock()

        def fold_turn(working: Session) -> None:
            # Another mutation landed while this turn was being prepared
            if working.revision != context.revision:
                raise SessionBusyError(working.session_id)

            pending = working.exchanges[-1] if working.exchanges else None
            if pending is not None and not pending.answered:
                pending.response = text
                pending.answered_at = now
                pending.engagement_score = analysis.engagement.overall
                pending.clarity_score = analysis.clarity.overall
                pending.sophistication_score = analysis.sophistication.score
                record_answer(working, analysis.clarity.overall, now)

            if profile is not None:
                updated = profile.model_copy(deep=True)
                if self._detector is None:
                    updated.conversation_history.append(
                        ConversationMessage(role="user", content=text, timestamp=now)
                    )
                updated.conversation_history.append(
                    ConversationMessage(role="assistant", content=question.question, timestamp=now)
                )
                updated.conversation_history = updated.conversation_history[
                    -self._history_window :
                ]
                updated.last_updated = max(now, updated.created)
                working.profile = updated

            working.exchanges.append(
                ConversationExchange(
                    question_id=question.question_id,
                    question=question.question,
                    question_type=question.question_type,
                    stage=question.stage,
                    style=question.questioning_style,
                    asked_at=now,
                )
            )

            counts = dict(working.metadata.get(SIGNAL_COUNTS_KEY, {}))
            for signal in analysis.signals:
                counts[signal.kind.value] = counts.get(signal.kind.value, 0) + 1
            working.metadata = {
                **working.metadata,
                STYLE_METADATA_KEY: decision.state.model_dump(mode="json"),
                SIGNAL_COUNTS_KEY: counts,
            }

        state = await session.apply(fold_turn, "conversation_turn")

        if decision.switched and decision.previous is not None:
            STYLE_SWITCHES.labels(
                from_style=decision.previous.value, to_style=decision.style.value
            ).inc()
            logger.info(
                "questioning_style_switched",
                session_id=session.session_id,
                from_style=decision.previous.value,
                to_style=decision.style.value,
                strength=round(decision.strength, 3),
            )

        trigger = self._escape_hatch_trigger(state, analysis)
        if trigger is not None:
            await self._emit(trigger)

        TURN_LATENCY.observe(time.perf_counter() - start)
        logger.debug(
            "conversation_turn_completed",
            session_id=session.session_id,
            stage=state.current_stage,
            style=decision.style.value,
            response_length=len(text),
            signals=[s.kind.value for s in analysis.signals],
        )
        return TurnResult(
            analysis=analysis,
            question=question,
            trigger=trigger,
            metadata={
                "stage": state.current_stage,
                "progress": overall_progress(state),
                "revision": state.revision,
                "style_switched": decision.switched,
            },
        )

    async def progress_stage(
        self,
        session: ManagedSession,
        evidence: StageCompletionEvidence | None,
    ) -> StageTransition:
        """Advance to the next stage if the evidence is sufficient."""
        return await self._stages.progress(session, evidence)

    async def attach_assumptions(
        self, session: ManagedSession, assumptions: Iterable[Assumption]
    ) -> list[str]:
        """Attach generated assumptions to a session, all or nothing."""
        incoming = list(assumptions)
        attached: list[str] = []

        def attach(working: Session) -> None:
            graph = AssumptionGraph(working.assumptions, self._clock())
            attached.extend(graph.attach(incoming))
            working.assumptions = graph.assumptions

        await session.apply(attach, "attach_assumptions")
        logger.info("assumptions_attached", session_id=session.session_id, count=len(attached))
        return attached

    async def accept_assumption(self, session: ManagedSession, assumption_id: str) -> Assumption:
        accepted: list[Assumption] = []

        def accept(working: Session) -> None:
            graph = AssumptionGraph(working.assumptions, self._clock())
            accepted.append(graph.accept(assumption_id))
            working.assumptions = graph.assumptions

        await session.apply(accept, "accept_assumption")
        return accepted[0]

    async def reject_assumption(self, session: ManagedSession, assumption_id: str) -> list[str]:
        """Reject an assumption; returns the dependents now pending re-evaluation."""
        invalidated: list[str] = []

        def reject(working: Session) -> None:
            graph = AssumptionGraph(working.assumptions, self._clock())
            invalidated.extend(graph.reject(assumption_id))
            working.assumptions = graph.assumptions

        await session.apply(reject, "reject_assumption")
        logger.info(
            "assumption_rejected",
            session_id=session.session_id,
            assumption_id=assumption_id,
            invalidated=len(invalidated),
        )
        return invalidated

    def _escape_hatch_trigger(
        self, state: Session, analysis: ResponseAnalysis
    ) -> EscapeHatchTrigger | None:
        """Build a trigger when an escape-hatch or expert-skip signal is confirmed."""
        confirmed = [
            s
            for kind in TRIGGER_SIGNALS
            if (s := analysis.signal(kind)) is not None
            and s.confidence >= self._config.escape_hatch_threshold
        ]
        if not confirmed:
            return None

        signal = max(confirmed, key=lambda s: s.confidence)
        stage = state.current_stage or ""
        answered = [e for e in state.exchanges if e.answered and e.stage == stage]
        return EscapeHatchTrigger(
            session_id=state.session_id,
            signal=signal.kind,
            confidence=signal.confidence,
            domain=state.domain,
            stage=stage,
            answered_question_ids=[e.question_id for e in answered],
            partial_responses={e.question_id: e.response or "" for e in answered},
            triggered_at=self._clock(),
        )

    async def _emit(self, trigger: EscapeHatchTrigger) -> None:
        ESCAPE_HATCH_TRIGGERS.labels(signal=trigger.signal.value, stage=trigger.stage).inc()
        logger.info(
            "escape_hatch_triggered",
            session_id=trigger.session_id,
            signal=trigger.signal.value,
            stage=trigger.stage,
            confidence=round(trigger.confidence, 3),
            answered_questions=len(trigger.answered_question_ids),
        )
        if self._on_escape_hatch is None:
            return
        try:
            outcome = self._on_escape_hatch(trigger)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as e:
            # The turn is already applied; the trigger is still returned in TurnResult
            logger.error(
                "escape_hatch_handler_failed",
                session_id=trigger.session_id,
                error=str(e),
                error_type=type(e).__name__,
            )
