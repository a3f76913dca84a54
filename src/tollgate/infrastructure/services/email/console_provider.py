"""Email provider that writes messages to the log instead of sending them.

Used whenever no SMTP host is configured. Bodies carry live verification
and reset links, so they are only logged when ``include_body`` is set, which
the factory does for development runs.
"""

from tollgate.core.logging import get_logger
from tollgate.infrastructure.services.email.email_provider import EmailProvider, OutgoingEmail

logger = get_logger(__name__)


class ConsoleEmailProvider(EmailProvider):
    """Logs every outgoing email and reports it as sent."""

    def __init__(self, include_body: bool = False) -> None:
        self.include_body = include_body

    async def send_email(self, message: OutgoingEmail) -> bool:
        fields = {"to": message.to, "subject": message.subject, "sender": message.sender}
        if self.include_body:
            fields["body"] = message.text_body
        logger.info("Email (console delivery)", **fields)
        return True
