"""Unit tests for EmailNotificationDispatcher."""

import aiosmtplib
import pytest

from tollgate.core.config import Settings
from tollgate.domain.exceptions import NotificationError
from tollgate.infrastructure.services import EmailNotificationDispatcher, build_email_provider
from tollgate.infrastructure.services.email import console_provider
from tollgate.infrastructure.services.email import (
    ConsoleEmailProvider,
    EmailProvider,
    OutgoingEmail,
    SMTPProvider,
)


class CapturingProvider(EmailProvider):
    def __init__(self, result: bool = True, error: Exception | None = None) -> None:
        self.messages: list[OutgoingEmail] = []
        self.result = result
        self.error = error

    async def send_email(self, message: OutgoingEmail) -> bool:
        if self.error is not None:
            raise self.error
        self.messages.append(message)
        return self.result


def make_dispatcher(provider: EmailProvider) -> EmailNotificationDispatcher:
    return EmailNotificationDispatcher(
        provider=provider,
        app_url="https://accounts.example.com/",
        api_prefix="/api/v1",
        from_email="no-reply@example.com",
        from_name="Accounts",
    )


@pytest.mark.asyncio
async def test_verification_email_contains_link():
    provider = CapturingProvider()

    await make_dispatcher(provider).send_verification_email("alice@example.com", "Alice", "tok123")

    (message,) = provider.messages
    link = "https://accounts.example.com/api/v1/auth/verify-email?token=tok123"
    assert message.to == "alice@example.com"
    assert message.subject == "Verify your email address"
    assert link in message.text_body
    assert link in message.html_body
    assert "Hello Alice" in message.text_body
    assert message.sender == "Accounts <no-reply@example.com>"


@pytest.mark.asyncio
async def test_reset_email_contains_given_link():
    provider = CapturingProvider()
    link = "https://accounts.example.com/reset-password?token=abc"

    await make_dispatcher(provider).send_password_reset_email("alice@example.com", "", link)

    (message,) = provider.messages
    assert link in message.text_body
    assert "Hello alice@example.com" in message.text_body


@pytest.mark.asyncio
async def test_html_body_escapes_name():
    provider = CapturingProvider()

    await make_dispatcher(provider).send_verification_email("a@example.com", "<b>Al</b>", "t")

    assert "&lt;b&gt;Al&lt;/b&gt;" in provider.messages[0].html_body
    assert "<b>Al</b>" in provider.messages[0].text_body


@pytest.mark.asyncio
async def test_provider_rejection_raises():
    with pytest.raises(NotificationError):
        await make_dispatcher(CapturingProvider(result=False)).send_verification_email(
            "a@example.com", "A", "t"
        )


@pytest.mark.asyncio
async def test_transport_failure_raises():
    provider = CapturingProvider(error=aiosmtplib.SMTPConnectError("refused"))

    with pytest.raises(NotificationError):
        await make_dispatcher(provider).send_password_reset_email("a@example.com", "A", "link")


@pytest.mark.asyncio
async def test_each_email_quotes_its_own_lifetime():
    provider = CapturingProvider()
    settings = Settings(verification_token_expire_hours=48, password_reset_token_expire_hours=2)
    dispatcher = EmailNotificationDispatcher.from_settings(settings, provider=provider)

    await dispatcher.send_verification_email("a@example.com", "A", "t")
    await dispatcher.send_password_reset_email("a@example.com", "A", "https://x.example/r")

    verification, reset = provider.messages
    assert "expire in 48 hours" in verification.text_body
    assert "expire in 2 hours" in reset.text_body


class RecordingLogger:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict]] = []

    def info(self, event: str, **fields) -> None:
        self.events.append((event, fields))


@pytest.mark.asyncio
@pytest.mark.parametrize("include_body", [True, False])
async def test_console_provider_logs_body_only_when_enabled(monkeypatch, include_body):
    recorder = RecordingLogger()
    monkeypatch.setattr(console_provider, "logger", recorder)
    message = OutgoingEmail(
        "a@example.com", "s", "<p>h</p>", "open https://x.example/r?token=abc", "f@example.com", "F"
    )

    assert await ConsoleEmailProvider(include_body=include_body).send_email(message)

    ((_, fields),) = recorder.events
    assert fields["to"] == "a@example.com"
    assert ("body" in fields) is include_body
    if not include_body:
        assert "token=abc" not in str(fields)


def test_provider_selection():
    development = build_email_provider(Settings(smtp_host=None))
    assert isinstance(development, ConsoleEmailProvider)
    assert development.include_body is True

    production = build_email_provider(
        Settings(smtp_host=None, environment="production", secret_key="x" * 64)
    )
    assert isinstance(production, ConsoleEmailProvider)
    assert production.include_body is False

    provider = build_email_provider(Settings(smtp_host="smtp.example.com", smtp_port=2525))
    assert isinstance(provider, SMTPProvider)
    assert provider.settings.port == 2525
