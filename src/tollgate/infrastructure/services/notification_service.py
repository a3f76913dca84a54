"""Email implementation of the notification dispatcher.

Renders the built-in templates and hands the result to an email provider.
Every delivery failure surfaces as NotificationError.
"""

import aiosmtplib
from jinja2 import TemplateError

from tollgate.core.config import Settings
from tollgate.core.logging import get_logger
from tollgate.domain.exceptions import NotificationError
from tollgate.domain.ports import NotificationDispatcher
from tollgate.infrastructure.services.email import (
    ConsoleEmailProvider,
    EmailProvider,
    OutgoingEmail,
    SMTPProvider,
    SMTPSettings,
    TemplateRenderer,
)
from tollgate.infrastructure.services.email.templates import (
    PASSWORD_RESET_EMAIL,
    VERIFICATION_EMAIL,
    EmailTemplate,
)

logger = get_logger(__name__)


def build_email_provider(settings: Settings) -> EmailProvider:
    """Pick the SMTP provider when a host is configured, else log to console.

    Console bodies (with their links) are logged in development only.
    """
    if not settings.smtp_host:
        return ConsoleEmailProvider(include_body=settings.is_development)
    return SMTPProvider(
        SMTPSettings(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            use_ssl=settings.smtp_use_ssl,
            from_email=settings.mail_from_email,
            from_name=settings.mail_from_name,
            timeout=settings.smtp_timeout,
        )
    )


class EmailNotificationDispatcher(NotificationDispatcher):
    """Sends verification and password reset emails."""

    def __init__(
        self,
        provider: EmailProvider,
        app_url: str,
        api_prefix: str,
        from_email: str,
        from_name: str,
        verification_expire_hours: int = 24,
        reset_expire_hours: int = 24,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            provider: Transport used to deliver messages.
            app_url: Public base URL of the service.
            api_prefix: Path prefix of the HTTP API.
            from_email: Sender address.
            from_name: Sender display name.
            verification_expire_hours: Verification link lifetime quoted in the email.
            reset_expire_hours: Reset link lifetime quoted in the email.
        """
        self.provider = provider
        self.app_url = app_url.rstrip("/")
        self.api_prefix = api_prefix
        self.from_email = from_email
        self.from_name = from_name
        self.verification_expire_hours = verification_expire_hours
        self.reset_expire_hours = reset_expire_hours
        self._html = TemplateRenderer(autoescape=True)
        self._text = TemplateRenderer(autoescape=False)

    @classmethod
    def from_settings(cls, settings: Settings, provider: EmailProvider | None = None):
        return cls(
            provider=provider or build_email_provider(settings),
            app_url=settings.app_url,
            api_prefix=settings.api_prefix,
            from_email=settings.mail_from_email,
            from_name=settings.mail_from_name,
            verification_expire_hours=settings.verification_token_expire_hours,
            reset_expire_hours=settings.password_reset_token_expire_hours,
        )

    def verification_url(self, token: str) -> str:
        return f"{self.app_url}{self.api_prefix}/auth/verify-email?token={token}"

    async def send_verification_email(self, recipient: str, name: str, token: str) -> None:
        await self._send(
            recipient,
            VERIFICATION_EMAIL,
            {
                "name": name or recipient,
                "verification_url": self.verification_url(token),
                "expires_in_hours": str(self.verification_expire_hours),
            },
        )

    async def send_password_reset_email(self, recipient: str, name: str, reset_link: str) -> None:
        await self._send(
            recipient,
            PASSWORD_RESET_EMAIL,
            {
                "name": name or recipient,
                "reset_url": reset_link,
                "expires_in_hours": str(self.reset_expire_hours),
            },
        )

    async def _send(self, recipient: str, template: EmailTemplate, variables: dict[str, str]) -> None:
        try:
            html_body = self._html.render(template.html_body, variables)
            text_body = self._text.render(template.text_body, variables)
            sent = await self.provider.send_email(
                OutgoingEmail(
                    to=recipient,
                    subject=template.subject,
                    html_body=html_body,
                    text_body=text_body,
                    from_email=self.from_email,
                    from_name=self.from_name,
                )
            )
        except (TemplateError, aiosmtplib.SMTPException, OSError) as e:
            logger.error("Email delivery failed", subject=template.subject, error=str(e))
            raise NotificationError() from e
        if not sent:
            logger.error("Email provider rejected message", subject=template.subject)
            raise NotificationError()
