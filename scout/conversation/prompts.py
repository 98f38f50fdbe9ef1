"""Prompt assembly for the question writer.

The engine decides style, domain, stage and the base question; the
prompt only asks the model to phrase it.
"""

from functools import lru_cache

from scout.catalog.models import TemplateQuestion
from scout.conversation.models import ResponseAnalysis, StyleProfile
from scout.conversation.template_loader import TemplateLoader
from scout.providers.llm import LLMMessage
from scout.sessions.models import SessionContext

SYSTEM_TEMPLATE = "question_writer.jinja2"
CONTEXT_TEMPLATE = "question_context.jinja2"


@lru_cache
def _loader() -> TemplateLoader:
    return TemplateLoader()


def _examples_instruction(density: float) -> str:
    if density >= 0.7:
        return "include a concrete example"
    if density >= 0.3:
        return "include an example only if it helps"
    return "no examples"


def build_question_messages(
    context: SessionContext,
    style: StyleProfile,
    analysis: ResponseAnalysis,
    base_question: TemplateQuestion | None,
    last_response: str | None = None,
) -> list[LLMMessage]:
    loader = _loader()
    system = loader.render(
        SYSTEM_TEMPLATE,
        domain=context.domain.value,
        stage=context.current_stage or "idea-clarity",
        style=style,
        examples=_examples_instruction(style.example_density),
        terminology=context.agent.terminology if context.agent is not None else {},
    )
    user = loader.render(
        CONTEXT_TEMPLATE,
        analysis=analysis,
        last_response=last_response,
        base_question=base_question,
    )
    return [
        LLMMessage(role="system", content=system),
        LLMMessage(role="user", content=user),
    ]
