"""SQLAlchemy model for revoked session tokens.

Rows outlive the session token only until its own expiry; after that the
codec rejects the token anyway and the sweeper deletes the row.
"""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from tollgate.infrastructure.persistence.database import Base


class BlacklistedTokenModel(Base):
    """SQLAlchemy model for the blacklisted_tokens table.

    Attributes:
        id: Primary key (UUID string).
        token_id: Signed jti claim of the revoked session token.
        account_id: Subject of the revoked token.
        expires_at: Expiry of the revoked token.
        created_at: Timestamp of revocation.
    """

    __tablename__ = "blacklisted_tokens"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="Row ID (UUID)",
    )
    token_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
        comment="jti claim of the revoked session token",
    )
    account_id: Mapped[str] = mapped_column(
        String(36),
        nullable=False,
        index=True,
        comment="Subject of the revoked token",
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
        comment="Expiry of the revoked token",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<BlacklistedToken(id={self.id}, account_id={self.account_id})>"
