"""Capability interfaces the auth engine is built from.

Concrete implementations live in the infrastructure layer; tests swap in
in-memory fakes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta

from tollgate.domain.entities import Account, PasswordResetToken, VerificationToken


class CredentialStore(ABC):
    """Persistence of account records.

    Lookups return None when nothing matches and never see soft-deleted
    accounts. Failures of the backing store raise StorageError.
    """

    @abstractmethod
    async def create(self, account: Account) -> Account:
        """Insert a new account; raises ConflictError on a uniqueness violation."""
        ...

    @abstractmethod
    async def get_by_id(self, account_id: str) -> Account | None: ...

    @abstractmethod
    async def get_by_username(self, username: str) -> Account | None: ...

    @abstractmethod
    async def get_by_email(self, email: str) -> Account | None: ...

    @abstractmethod
    async def get_by_national_id(self, national_id: str) -> Account | None: ...

    @abstractmethod
    async def update(self, account: Account) -> Account:
        """Replace the stored record with the given one atomically."""
        ...

    @abstractmethod
    async def mark_email_verified(self, account_id: str) -> bool:
        """Set the verified flag; returns False when no account matched."""
        ...


@dataclass(frozen=True)
class CleanupResult:
    """Row counts removed by one expired-token sweep."""

    blacklisted: int = 0
    verification: int = 0
    password_reset: int = 0

    @property
    def total(self) -> int:
        return self.blacklisted + self.verification + self.password_reset


class TokenStore(ABC):
    """Persistence of verification tokens, reset tokens and the session blacklist.

    Single-use tokens go in raw and are stored as digests. The blacklist is
    keyed by the session token's jti claim, which stays the same however the
    token string is encoded.
    """

    @abstractmethod
    async def create_verification_token(self, token: VerificationToken) -> VerificationToken: ...

    @abstractmethod
    async def get_verification_token(self, raw_token: str) -> VerificationToken | None: ...

    @abstractmethod
    async def delete_verification_token(self, raw_token: str) -> bool: ...

    @abstractmethod
    async def create_password_reset_token(self, token: PasswordResetToken) -> PasswordResetToken:
        """Store a reset token, deleting any prior one for the same account first.

        The delete and the insert commit together.
        """
        ...

    @abstractmethod
    async def get_password_reset_token(self, raw_token: str) -> PasswordResetToken | None: ...

    @abstractmethod
    async def delete_password_reset_token(self, raw_token: str) -> bool: ...

    @abstractmethod
    async def add_to_blacklist(self, token_id: str, account_id: str, expires_at: datetime) -> None:
        """Revoke the session with this jti. Revoking it again is a no-op."""
        ...

    @abstractmethod
    async def is_blacklisted(self, token_id: str) -> bool: ...

    @abstractmethod
    async def purge_expired(self, now: datetime) -> CleanupResult:
        """Delete every token row whose expiry is before now."""
        ...


class PasswordHasher(ABC):
    """One-way, salted, adaptive password hashing."""

    @abstractmethod
    def hash(self, plaintext: str) -> str:
        """Hash a password; raises HashingError on failure."""
        ...

    @abstractmethod
    def verify(self, password_hash: str, plaintext: str) -> bool:
        """Return True only for a matching password; malformed hashes are False."""
        ...

    @abstractmethod
    def verify_dummy(self, plaintext: str) -> None:
        """Spend the same work as verify() against a throwaway hash."""
        ...

    @abstractmethod
    def needs_rehash(self, password_hash: str) -> bool:
        """Whether a hash was made with a work factor other than the current one."""
        ...


@dataclass(frozen=True)
class SessionClaims:
    """Decoded claims of a session token.

    Attributes:
        subject: Account ID the token was issued to.
        issued_at: When the token was issued.
        expires_at: When the token stops being accepted.
        token_id: Unique ID of this token.
    """

    subject: str
    issued_at: datetime
    expires_at: datetime
    token_id: str


class TokenCodec(ABC):
    """Issues and verifies signed, time-bounded session tokens."""

    @abstractmethod
    def issue(self, account_id: str, ttl: timedelta) -> str: ...

    @abstractmethod
    def verify(self, token: str, verify_expiry: bool = True) -> SessionClaims:
        """Decode a token.

        Raises:
            InvalidTokenError: Bad signature, algorithm or structure.
            SessionExpiredError: Expired, unless verify_expiry is False.
        """
        ...


class NotificationDispatcher(ABC):
    """Outbound account notifications. Failures raise NotificationError."""

    @abstractmethod
    async def send_verification_email(self, recipient: str, name: str, token: str) -> None: ...

    @abstractmethod
    async def send_password_reset_email(self, recipient: str, name: str, reset_link: str) -> None: ...
