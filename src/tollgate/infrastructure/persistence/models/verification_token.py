"""SQLAlchemy model for email verification tokens.

Stores hashes of verification tokens sent to new accounts.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from tollgate.infrastructure.persistence.database import Base


class VerificationTokenModel(Base):
    """SQLAlchemy model for the verification_tokens table.

    Attributes:
        id: Primary key (UUID string).
        account_id: Account the token was issued to.
        token_hash: SHA-256 hash of the raw token.
        expires_at: Timestamp when the token expires.
        created_at: Timestamp when the token was created.
    """

    __tablename__ = "verification_tokens"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="Token ID (UUID)",
    )
    account_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("accounts.id"),
        nullable=False,
        index=True,
        comment="Account the token was issued to",
    )
    token_hash: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
        comment="SHA-256 hash of the verification token",
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
        return f"<VerificationToken(id={self.id}, account_id={self.account_id})>"
