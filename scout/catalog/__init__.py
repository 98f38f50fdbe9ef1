"""Agent template catalog."""

from scout.catalog.catalog import InMemoryTemplateCatalog, TemplateCatalog, default_templates
from scout.catalog.models import AgentInstance, AgentTemplate, TemplateQuestion

__all__ = [
    "AgentInstance",
    "AgentTemplate",
    "InMemoryTemplateCatalog",
    "TemplateCatalog",
    "TemplateQuestion",
    "default_templates",
]
