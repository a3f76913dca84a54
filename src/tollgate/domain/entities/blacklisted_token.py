"""Revocation record for a session token."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class BlacklistedToken:
    """Session token revoked by logout.

    Attributes:
        token_id: The revoked token's signed jti claim.
        account_id: Subject of the revoked token.
        expires_at: The token's own expiry; the row is useless after it.
        id: Unique identifier (UUID string).
        created_at: When the token was revoked.
    """

    token_id: str
    account_id: str
    expires_at: datetime
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
