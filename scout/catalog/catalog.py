"""Read-only agent template catalog.

The core only reads templates. ``InMemoryTemplateCatalog`` ships a default
template per industry and accepts extra templates at construction.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from scout.catalog.models import AgentInstance, AgentTemplate, TemplateQuestion
from scout.conversation.models.enums import QuestionType
from scout.observability.logging import get_logger
from scout.profile.enums import Industry
from scout.profile.models import UserProfile

logger = get_logger(__name__)


class TemplateCatalog(ABC):
    """Abstract interface for agent template lookup."""

    @abstractmethod
    async def get_template(self, template_id: str) -> AgentTemplate | None:
        """Get a template by id."""
        pass

    @abstractmethod
    async def list_by_domain(self, domain: Industry) -> list[AgentTemplate]:
        """List templates serving a domain."""
        pass

    async def select_for_profile(self, profile: UserProfile | None) -> AgentTemplate:
        """Pick the template for a profile's industry, falling back to general."""
        domain = profile.industry if profile is not None else Industry.GENERAL
        candidates = await self.list_by_domain(domain)
        if not candidates and domain is not Industry.GENERAL:
            candidates = await self.list_by_domain(Industry.GENERAL)
        if not candidates:
            raise LookupError(f"No template available for domain {domain.value}")
        return candidates[0]

    @staticmethod
    def instantiate(template: AgentTemplate, profile: UserProfile | None) -> AgentInstance:
        """Customize a template for a profile."""
        instance = AgentInstance(
            template_id=template.id,
            template_version=template.version,
            name=template.name,
            domain=template.domain,
            stages=list(template.stages),
            terminology=dict(template.terminology),
            question_bank={stage: list(qs) for stage, qs in template.question_bank.items()},
        )
        if profile is not None:
            instance.sophistication_level = profile.sophistication_level
        return instance


def _q(stage: str, index: int, text: str, *follow_ups: str) -> TemplateQuestion:
    return TemplateQuestion(
        id=f"{stage}-{index}",
        text=text,
        question_type=QuestionType.OPEN_ENDED,
        follow_ups=list(follow_ups),
    )


_GENERAL_QUESTIONS: dict[str, tuple[TemplateQuestion, ...]] = {
    "idea-clarity": (
        _q("idea-clarity", 1, "What problem are you trying to solve?", "Who feels this problem most?"),
        _q("idea-clarity", 2, "Who will use what you are building?"),
        _q("idea-clarity", 3, "What makes your approach different from existing options?"),
    ),
    "user-workflow": (
        _q("user-workflow", 1, "Walk me through how someone would use it, step by step."),
        _q("user-workflow", 2, "What is the most important action a user takes?"),
    ),
    "technical-specs": (
        _q("technical-specs", 1, "Which platforms should it run on?"),
        _q("technical-specs", 2, "What other systems does it need to connect to?"),
    ),
    "wireframes": (
        _q("wireframes", 1, "Which screens matter most for a first version?"),
    ),
}

_DOMAIN_DETAILS: dict[Industry, tuple[str, dict[str, str], tuple[TemplateQuestion, ...]]] = {
    Industry.FINTECH: (
        "Fintech discovery agent",
        {"user": "account holder", "payment": "transaction", "rules": "compliance requirements"},
        (
            _q("technical-specs", 3, "Which regulations apply, for example PCI DSS, KYC or SOC2?"),
            _q("technical-specs", 4, "How will you handle fraud monitoring?"),
        ),
    ),
    Industry.HEALTHCARE: (
        "Healthcare discovery agent",
        {"user": "patient", "data": "protected health information", "rules": "HIPAA requirements"},
        (_q("technical-specs", 3, "Will you store protected health information?"),),
    ),
    Industry.ECOMMERCE: (
        "E-commerce discovery agent",
        {"user": "shopper", "purchase": "order", "list": "catalog"},
        (_q("user-workflow", 3, "What does checkout look like for your shoppers?"),),
    ),
    Industry.SAAS: (
        "SaaS discovery agent",
        {"user": "account", "company": "tenant", "price": "subscription plan"},
        (_q("technical-specs", 3, "Do you need multi-tenancy or single-tenant deployments?"),),
    ),
    Industry.CONSUMER: (
        "Consumer app discovery agent",
        {"user": "member", "usage": "engagement"},
        (_q("user-workflow", 3, "What brings someone back to the app every day?"),),
    ),
    Industry.ENTERPRISE: (
        "Enterprise discovery agent",
        {"user": "employee", "owner": "stakeholder", "rules": "governance policies"},
        (_q("technical-specs", 3, "Which identity provider must it integrate with?"),),
    ),
}


def default_templates() -> list[AgentTemplate]:
    """One template per industry, all on the default stage sequence."""
    templates = [
        AgentTemplate(
            id="general-discovery",
            name="General discovery agent",
            domain=Industry.GENERAL,
            description="Domain-neutral product discovery",
            question_bank=_GENERAL_QUESTIONS,
        )
    ]
    for domain, (name, terminology, extra) in _DOMAIN_DETAILS.items():
        bank = {stage: list(questions) for stage, questions in _GENERAL_QUESTIONS.items()}
        for question in extra:
            bank[question.id.rsplit("-", 1)[0]].append(question)
        templates.append(
            AgentTemplate(
                id=f"{domain.value}-discovery",
                name=name,
                domain=domain,
                description=f"Product discovery tuned for {domain.value}",
                terminology=terminology,
                question_bank={stage: tuple(qs) for stage, qs in bank.items()},
            )
        )
    return templates


class InMemoryTemplateCatalog(TemplateCatalog):
    """Dict-backed template catalog for tests and single-process use."""

    def __init__(self, templates: Iterable[AgentTemplate] | None = None) -> None:
        self._templates: dict[str, AgentTemplate] = {}
        for template in default_templates() if templates is None else templates:
            self._templates[template.id] = template

    async def get_template(self, template_id: str) -> AgentTemplate | None:
        return self._templates.get(template_id)

    async def list_by_domain(self, domain: Industry) -> list[AgentTemplate]:
        return [t for t in self._templates.values() if t.domain is domain]
