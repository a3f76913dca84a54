"""Shared shape of the single-use tokens sent by email.

The raw token is handed to the account owner once; only its SHA-256 digest
is stored, so a leaked table cannot be replayed.
"""

import hashlib
import secrets
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Self

# Random bytes per raw token before URL-safe encoding.
TOKEN_BYTES = 32


def hash_token(raw_token: str) -> str:
    """Return the SHA-256 hex digest stored in place of a raw token."""
    return hashlib.sha256(raw_token.encode()).hexdigest()


@dataclass
class SingleUseToken:
    """Single-use token bound to one account.

    Attributes:
        account_id: ID of the account this token belongs to.
        token_hash: SHA-256 hash of the raw token.
        expires_at: When the token stops being accepted.
        id: Unique identifier (UUID string).
        created_at: When the token was created.
    """

    account_id: str
    token_hash: str
    expires_at: datetime
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def generate(cls, account_id: str, ttl: timedelta, now: datetime) -> tuple[Self, str]:
        """Generate a new token entity and its raw value.

        Args:
            account_id: The ID of the owning account.
            ttl: Token lifetime.
            now: Current time from the caller's clock.

        Returns:
            A tuple of (entity, raw_token_string).
        """
        raw_token = secrets.token_urlsafe(TOKEN_BYTES)
        entity = cls(
            account_id=account_id,
            token_hash=hash_token(raw_token),
            expires_at=now + ttl,
            created_at=now,
        )
        return entity, raw_token

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at
