"""Jinja2 template loader for question-writer prompts."""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

TEMPLATES_DIR = Path(__file__).parent / "templates"


class TemplateLoader:
    """Loads and renders the Jinja2 prompt templates."""

    def __init__(self, templates_dir: Path = TEMPLATES_DIR):
        """Initialize template loader.

        Args:
            templates_dir: Directory containing .jinja2 template files
        """
        self.templates_dir = templates_dir
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )

    def render(self, template_name: str, **context) -> str:
        """Render a template with context variables.

        Raises:
            jinja2.TemplateNotFound: If template doesn't exist
        """
        template = self.env.get_template(template_name)
        return template.render(**context)
