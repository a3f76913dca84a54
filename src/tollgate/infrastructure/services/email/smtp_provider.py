"""SMTP email provider implementation.

Uses aiosmtplib for asynchronous email sending via SMTP.
"""

from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import aiosmtplib
from pydantic import BaseModel, ConfigDict

from tollgate.core.logging import get_logger
from tollgate.infrastructure.services.email.email_provider import EmailProvider, OutgoingEmail

logger = get_logger(__name__)


class SMTPSettings(BaseModel):
    """Configuration settings for the SMTP provider."""

    model_config = ConfigDict(from_attributes=True)

    host: str
    port: int = 587
    username: str | None = None
    password: str | None = None
    use_tls: bool = True
    use_ssl: bool = False
    from_email: str
    from_name: str = "Tollgate"
    timeout: int = 10


class SMTPProvider(EmailProvider):
    """Sends emails using the SMTP protocol via aiosmtplib."""

    def __init__(self, settings: SMTPSettings) -> None:
        """Initialize the SMTP provider.

        Args:
            settings: SMTP configuration settings.
        """
        self.settings = settings

    def _client(self) -> aiosmtplib.SMTP:
        # aiosmtplib's use_tls means implicit TLS on connect (SMTPS)
        return aiosmtplib.SMTP(
            hostname=self.settings.host,
            port=self.settings.port,
            use_tls=self.settings.use_ssl,
            start_tls=self.settings.use_tls and not self.settings.use_ssl,
            timeout=self.settings.timeout,
        )

    async def _login(self, smtp: aiosmtplib.SMTP) -> None:
        if self.settings.username:
            await smtp.login(self.settings.username, self.settings.password or "")

    def _to_mime(self, message: OutgoingEmail) -> MIMEMultipart:
        mime = MIMEMultipart("alternative")
        mime["Subject"] = message.subject
        mime["From"] = message.sender or self.settings.from_email
        mime["To"] = message.to
        mime.attach(MIMEText(message.text_body, "plain"))
        mime.attach(MIMEText(message.html_body, "html"))
        return mime

    async def send_email(self, message: OutgoingEmail) -> bool:
        """Send an email via SMTP.

        Raises:
            aiosmtplib.SMTPException: If the connection or delivery fails.
        """
        mime = self._to_mime(message)
        try:
            async with self._client() as smtp:
                await self._login(smtp)
                await smtp.send_message(mime)
            return True
        except aiosmtplib.SMTPException as e:
            logger.error("Failed to send email via SMTP", host=self.settings.host, error=str(e))
            raise

