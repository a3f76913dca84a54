"""Account entity.

An account is the identity record a person registers and logs in with.
Username, email and national ID are each unique among non-deleted accounts.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class Account:
    """Account entity.

    Attributes:
        username: Unique login name (case-sensitive).
        email: Unique email address.
        password_hash: Argon2 hash of the password (never the plaintext).
        name: Display name.
        phone: Phone number.
        national_id: National ID number; None when not provided.
        email_verified: Whether the email address has been confirmed.
        avatar_url: URL of the profile picture.
        id: Unique identifier (UUID string).
        created_at: When the account was created.
        updated_at: When the account was last updated.
        deleted_at: Soft-delete marker; None while the account is live.
    """

    username: str
    email: str
    password_hash: str
    name: str = ""
    phone: str = ""
    national_id: str | None = None
    email_verified: bool = False
    avatar_url: str = ""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    deleted_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.username:
            raise ValueError("Username is required")
        if not self.email:
            raise ValueError("Email is required")
        if not self.password_hash:
            raise ValueError("Password hash is required")
        if self.national_id == "":
            self.national_id = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


@dataclass
class NewAccount:
    """Registration candidate carrying the plaintext password.

    The plaintext only lives until the engine hashes it.
    """

    username: str
    email: str
    password: str = field(repr=False)
    name: str = ""
    phone: str = ""
    national_id: str | None = None
    avatar_url: str = ""


@dataclass
class ProfileUpdate:
    """Partial profile change. Fields left as None are not modified."""

    username: str | None = None
    name: str | None = None
    phone: str | None = None
    avatar_url: str | None = None
