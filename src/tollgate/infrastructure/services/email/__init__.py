"""Email delivery: providers, templates and rendering."""

from tollgate.infrastructure.services.email.console_provider import ConsoleEmailProvider
from tollgate.infrastructure.services.email.email_provider import EmailProvider, OutgoingEmail
from tollgate.infrastructure.services.email.smtp_provider import SMTPProvider, SMTPSettings
from tollgate.infrastructure.services.email.template_renderer import TemplateRenderer

__all__ = [
    "ConsoleEmailProvider",
    "EmailProvider",
    "OutgoingEmail",
    "SMTPProvider",
    "SMTPSettings",
    "TemplateRenderer",
]
