"""Password reset token entity."""

from dataclasses import dataclass

from tollgate.domain.entities.single_use_token import SingleUseToken


@dataclass
class PasswordResetToken(SingleUseToken):
    """Proof of a password-reset request.

    At most one exists per account: issuing a new one supersedes the old.
    """
