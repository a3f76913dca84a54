"""Built-in email templates."""

from dataclasses import dataclass


@dataclass(frozen=True)
class EmailTemplate:
    subject: str
    html_body: str
    text_body: str


VERIFICATION_EMAIL = EmailTemplate(
    subject="Verify your email address",
    html_body="""\
<html>
  <body>
    <h2>Hello {{ name }},</h2>
    <p>Thank you for registering. Please verify your email address by clicking the link below:</p>
    <p><a href="{{ verification_url }}">Verify Email</a></p>
    <p>This link will expire in {{ expires_in_hours }} hours.</p>
    <p>If you did not create an account, please ignore this email.</p>
  </body>
</html>
""",
    text_body="""\
Hello {{ name }},

Thank you for registering. Please verify your email address by opening this link:

{{ verification_url }}

This link will expire in {{ expires_in_hours }} hours.
If you did not create an account, please ignore this email.
""",
)

PASSWORD_RESET_EMAIL = EmailTemplate(
    subject="Reset your password",
    html_body="""\
<html>
  <body>
    <h2>Hello {{ name }},</h2>
    <p>We received a request to reset your password. Click the link below to choose a new one:</p>
    <p><a href="{{ reset_url }}">Reset Password</a></p>
    <p>This link will expire in {{ expires_in_hours }} hours.</p>
    <p>If you did not request a password reset, please ignore this email.</p>
  </body>
</html>
""",
    text_body="""\
Hello {{ name }},

We received a request to reset your password. Open this link to choose a new one:

{{ reset_url }}

This link will expire in {{ expires_in_hours }} hours.
If you did not request a password reset, please ignore this email.
""",
)
