"""Unit tests for the agent template catalog."""

import pytest
from pydantic import ValidationError

from scout.catalog import AgentTemplate, InMemoryTemplateCatalog, default_templates
from scout.catalog.models import DEFAULT_STAGES
from scout.profile.enums import Industry, SophisticationLevel
from scout.profile.models import UserProfile


@pytest.fixture
def catalog() -> InMemoryTemplateCatalog:
    return InMemoryTemplateCatalog()


class TestDefaultTemplates:
    """Tests for the shipped templates."""

    def test_one_template_per_industry(self) -> None:
        """Every industry has a default template."""
        domains = {t.domain for t in default_templates()}

        assert domains == set(Industry)

    def test_domain_questions_extend_general_bank(self) -> None:
        """Domain templates add questions on top of the general bank."""
        templates = {t.domain: t for t in default_templates()}
        general = templates[Industry.GENERAL].question_bank["technical-specs"]
        fintech = templates[Industry.FINTECH].question_bank["technical-specs"]

        assert len(fintech) == len(general) + 2
        assert fintech[: len(general)] == general

    def test_all_use_default_stages(self) -> None:
        """Shipped templates follow the default stage sequence."""
        assert all(t.stages == DEFAULT_STAGES for t in default_templates())


class TestAgentTemplate:
    """Tests for template validation."""

    def test_duplicate_stages_rejected(self) -> None:
        """Stage names must be unique."""
        with pytest.raises(ValidationError):
            AgentTemplate(id="t", name="t", domain=Industry.GENERAL, stages=("a", "a"))

    def test_empty_stages_rejected(self) -> None:
        """A template needs at least one stage."""
        with pytest.raises(ValidationError):
            AgentTemplate(id="t", name="t", domain=Industry.GENERAL, stages=())


class TestInMemoryTemplateCatalog:
    """Tests for InMemoryTemplateCatalog."""

    @pytest.mark.asyncio
    async def test_get_template(self, catalog: InMemoryTemplateCatalog) -> None:
        """Templates are found by id."""
        template = await catalog.get_template("healthcare-discovery")

        assert template is not None
        assert template.domain is Industry.HEALTHCARE
        assert await catalog.get_template("missing") is None

    @pytest.mark.asyncio
    async def test_select_for_profile(self, catalog: InMemoryTemplateCatalog) -> None:
        """The profile's industry picks the template."""
        template = await catalog.select_for_profile(UserProfile(industry=Industry.FINTECH))

        assert template.id == "fintech-discovery"

    @pytest.mark.asyncio
    async def test_select_without_profile(self, catalog: InMemoryTemplateCatalog) -> None:
        """No profile means the general template."""
        template = await catalog.select_for_profile(None)

        assert template.domain is Industry.GENERAL

    @pytest.mark.asyncio
    async def test_falls_back_to_general(self) -> None:
        """A domain without templates falls back to general."""
        general = next(t for t in default_templates() if t.domain is Industry.GENERAL)
        catalog = InMemoryTemplateCatalog([general])

        template = await catalog.select_for_profile(UserProfile(industry=Industry.SAAS))

        assert template.id == "general-discovery"

    @pytest.mark.asyncio
    async def test_empty_catalog_raises(self) -> None:
        """Selection fails when nothing can serve the profile."""
        catalog = InMemoryTemplateCatalog([])

        with pytest.raises(LookupError):
            await catalog.select_for_profile(None)

    def test_instantiate_copies_template(self) -> None:
        """An instance carries the template's content and the profile's level."""
        template = next(t for t in default_templates() if t.domain is Industry.FINTECH)
        profile = UserProfile(sophistication_level=SophisticationLevel.HIGH)

        instance = InMemoryTemplateCatalog.instantiate(template, profile)

        assert instance.template_id == template.id
        assert instance.stages == list(template.stages)
        assert instance.terminology["user"] == "account holder"
        assert instance.sophistication_level is SophisticationLevel.HIGH

        instance.terminology["user"] = "customer"
        assert template.terminology["user"] == "account holder"
