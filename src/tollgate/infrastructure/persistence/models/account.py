"""SQLAlchemy model for the accounts table.

Username, email and national ID are unique among rows that are not
soft-deleted, enforced by partial unique indexes.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from tollgate.infrastructure.persistence.database import Base

LIVE_ROWS = text("deleted_at IS NULL")
LIVE_ROWS_WITH_NATIONAL_ID = text("deleted_at IS NULL AND national_id IS NOT NULL")


class AccountModel(Base):
    """SQLAlchemy model for the accounts table.

    Attributes:
        id: Primary key (UUID string).
        username: Login name, unique among live accounts.
        email: Email address, unique among live accounts.
        national_id: Optional national ID, unique among live accounts when set.
        password_hash: Argon2 hash of the password.
        name: Display name.
        phone: Phone number.
        email_verified: Whether the email address has been confirmed.
        avatar_url: Profile picture URL.
        created_at: Timestamp when the account was created.
        updated_at: Timestamp when the account was last updated.
        deleted_at: Soft-delete marker.
    """

    __tablename__ = "accounts"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="Account ID (UUID)",
    )
    username: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Login name",
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Email address",
    )
    national_id: Mapped[str | None] = mapped_column(
        String(20),
        nullable=True,
        comment="National ID number",
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Argon2 password hash",
    )
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        default="",
    )
    phone: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="",
    )
    email_verified: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Whether the email address has been confirmed",
    )
    avatar_url: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        default="",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        index=True,
        comment="Soft-delete marker",
    )

    __table_args__ = (
        Index(
            "uq_accounts_username",
            "username",
            unique=True,
            sqlite_where=LIVE_ROWS,
            postgresql_where=LIVE_ROWS,
        ),
        Index(
            "uq_accounts_email",
            "email",
            unique=True,
            sqlite_where=LIVE_ROWS,
            postgresql_where=LIVE_ROWS,
        ),
        Index(
            "uq_accounts_national_id",
            "national_id",
            unique=True,
            sqlite_where=LIVE_ROWS_WITH_NATIONAL_ID,
            postgresql_where=LIVE_ROWS_WITH_NATIONAL_ID,
        ),
    )

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, username={self.username})>"
