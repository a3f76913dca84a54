"""SQLAlchemy model for password reset tokens.

At most one row exists per account; issuing a new token replaces the old one.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from tollgate.infrastructure.persistence.database import Base


class PasswordResetTokenModel(Base):
    """SQLAlchemy model for the password_reset_tokens table.

    Attributes:
        id: Primary key (UUID string).
        account_id: Account the token was issued to (unique).
        token_hash: SHA-256 hash of the reset token.
        expires_at: Timestamp when the token expires.
        created_at: Timestamp when the token was created.
    """

    __tablename__ = "password_reset_tokens"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="Token ID (UUID)",
    )
    account_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("accounts.id"),
        nullable=False,
        unique=True,
        comment="Account the token was issued to",
    )
    token_hash: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
        comment="SHA-256 hash of the reset token",
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<PasswordResetToken(id={self.id}, account_id={self.account_id})>"
