"""Jinja2 template renderer for email templates.

Provides sandboxed template rendering with HTML escaping and error handling.
"""

from jinja2 import StrictUndefined, TemplateError
from jinja2.sandbox import SandboxedEnvironment

from tollgate.core.logging import get_logger

logger = get_logger(__name__)


class TemplateRenderer:
    """Jinja2 template renderer.

    Uses a sandboxed environment so templates cannot execute arbitrary code,
    and StrictUndefined so a missing variable fails instead of rendering blank.
    """

    def __init__(self, autoescape: bool = True) -> None:
        """Initialize the renderer.

        Args:
            autoescape: HTML-escape substituted values (disable for plain text).
        """
        self.env = SandboxedEnvironment(
            autoescape=autoescape,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )

    def render(self, template_string: str, variables: dict[str, str]) -> str:
        """Render a template string with variables.

        Raises:
            jinja2.TemplateError: Invalid syntax or a missing variable.
        """
        try:
            template = self.env.from_string(template_string)
            return template.render(**variables)
        except TemplateError as e:
            logger.error("Template rendering failed", error=str(e))
            raise
