"""Tests for question-writer prompt rendering."""

from datetime import timedelta

import pytest
from jinja2 import TemplateNotFound

from scout.catalog import InMemoryTemplateCatalog, default_templates
from scout.catalog.models import TemplateQuestion
from scout.conversation.models import (
    AdaptationRecommendations,
    ClarityMetrics,
    EngagementMetrics,
    QuestioningStyle,
    ResponseAnalysis,
    SophisticationBreakdown,
)
from scout.conversation.prompts import build_question_messages
from scout.conversation.styles import STYLE_PROFILES
from scout.conversation.template_loader import TemplateLoader
from scout.profile.enums import Industry, SophisticationLevel
from scout.sessions.models import Session, SessionContext


@pytest.fixture
def analysis() -> ResponseAnalysis:
    return ResponseAnalysis(
        sophistication=SophisticationBreakdown(score=0.25, level=SophisticationLevel.LOW),
        clarity=ClarityMetrics(),
        engagement=EngagementMetrics(enthusiasm=0.5),
        recommendations=AdaptationRecommendations(
            suggested_style=QuestioningStyle.NOVICE_FRIENDLY
        ),
    )


@pytest.fixture
def fintech_context(clock) -> SessionContext:
    template = next(t for t in default_templates() if t.domain is Industry.FINTECH)
    now = clock()
    session = Session(
        agent=InMemoryTemplateCatalog.instantiate(template, None),
        current_stage="technical-specs",
        created_at=now,
        expires_at=now + timedelta(hours=1),
    )
    return SessionContext.from_session(session)


class TestTemplateLoader:
    """Tests for TemplateLoader."""

    def test_renders_from_directory(self, tmp_path) -> None:
        (tmp_path / "greeting.jinja2").write_text("Hello {{ name }}!")

        loader = TemplateLoader(tmp_path)

        assert loader.render("greeting.jinja2", name="Ada") == "Hello Ada!"

    def test_missing_template(self, tmp_path) -> None:
        with pytest.raises(TemplateNotFound):
            TemplateLoader(tmp_path).render("nope.jinja2")


class TestBuildQuestionMessages:
    """Tests for build_question_messages."""

    def test_system_prompt_carries_style_and_domain(self, fintech_context, analysis) -> None:
        style = STYLE_PROFILES[QuestioningStyle.NOVICE_FRIENDLY]

        system, _ = build_question_messages(fintech_context, style, analysis, None)

        assert system.role == "system"
        assert "fintech projects" in system.content
        assert '"technical-specs" stage' in system.content
        assert "Style: novice-friendly" in system.content
        assert "Assumed technical depth: 0.2" in system.content
        assert "Examples: include a concrete example" in system.content
        assert "- Ask one simple question at a time." in system.content
        assert '"payment" -> "transaction"' in system.content

    def test_user_prompt_with_base_question(self, fintech_context, analysis) -> None:
        style = STYLE_PROFILES[QuestioningStyle.EXPERT_EFFICIENT]
        base = TemplateQuestion(id="technical-specs-1", text="Which platforms should it run on?")

        _, user = build_question_messages(
            fintech_context, style, analysis, base, last_response="Mostly web"
        )

        assert user.role == "user"
        assert "User sophistication: low (0.25)" in user.content
        assert 'Last answer: "Mostly web"' in user.content
        assert 'Question to adapt: "Which platforms should it run on?"' in user.content

    def test_user_prompt_without_base_question(self, fintech_context, analysis) -> None:
        style = STYLE_PROFILES[QuestioningStyle.INTERMEDIATE_GUIDED]

        _, user = build_question_messages(fintech_context, style, analysis, None)

        assert "Ask the most useful next question for this stage." in user.content
        assert "Last answer" not in user.content
