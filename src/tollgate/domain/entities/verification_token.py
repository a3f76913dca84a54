"""Email verification token entity."""

from dataclasses import dataclass

from tollgate.domain.entities.single_use_token import SingleUseToken


@dataclass
class VerificationToken(SingleUseToken):
    """Proof of email ownership, consumed (deleted) on successful verification."""
