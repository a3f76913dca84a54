"""Authentication engine.

Orchestrates registration, login, session revocation and the email-based
verification and password reset flows on top of the storage, hashing,
token and notification ports. The engine keeps no state between calls.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from tollgate.core.clock import Clock, utc_now
from tollgate.core.logging import get_logger
from tollgate.domain.entities import (
    Account,
    NewAccount,
    PasswordResetToken,
    VerificationToken,
)
from tollgate.domain.exceptions import (
    AccountNotFoundError,
    ConflictError,
    EmailNotVerifiedError,
    HashingError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    InvalidTokenError,
    NotificationError,
    StorageError,
    TokenExpiredError,
    TokenRevokedError,
)
from tollgate.domain.ports import (
    CredentialStore,
    NotificationDispatcher,
    PasswordHasher,
    TokenCodec,
    TokenStore,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthConfig:
    """Tunables of the authentication flows.

    Attributes:
        session_ttl: Lifetime of an issued session token.
        email_verification_required: Whether login waits for a verified email.
        verification_token_ttl: Lifetime of an email verification token.
        reset_token_ttl: Lifetime of a password reset token.
        app_url: Public base URL used to build password reset links.
    """

    session_ttl: timedelta = timedelta(hours=24)
    email_verification_required: bool = True
    verification_token_ttl: timedelta = timedelta(hours=24)
    reset_token_ttl: timedelta = timedelta(hours=24)
    app_url: str = "http://localhost:8000"


@dataclass(frozen=True)
class LoginResult:
    """Outcome of a successful login."""

    account: Account
    token: str
    expires_at: datetime


class AuthEngine:
    """Account authentication and token lifecycle."""

    def __init__(
        self,
        credential_store: CredentialStore,
        token_store: TokenStore,
        hasher: PasswordHasher,
        codec: TokenCodec,
        notifier: NotificationDispatcher,
        config: AuthConfig | None = None,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize the engine.

        Args:
            credential_store: Account persistence.
            token_store: Single-use token and blacklist persistence.
            hasher: Password hasher.
            codec: Session token codec.
            notifier: Outbound email notifications.
            config: Flow tunables; defaults to AuthConfig().
            clock: Time source for token expiry.
        """
        self.credential_store = credential_store
        self.token_store = token_store
        self.hasher = hasher
        self.codec = codec
        self.notifier = notifier
        self.config = config or AuthConfig()
        self.clock = clock

    async def register(self, candidate: NewAccount) -> Account:
        """Create an account.

        Uniqueness is checked for username, email and national ID in that
        order; the storage layer's unique indexes catch any race past these
        checks. When email verification is required a verification token is
        created and sent. A failure in that step is logged and does not undo
        the registration; the owner can ask for a new email.

        Raises:
            ConflictError: Username, email or national ID is already taken.
            HashingError: The password could not be hashed.
            StorageError: The account could not be stored.
        """
        if await self.credential_store.get_by_username(candidate.username) is not None:
            raise ConflictError("username")
        if await self.credential_store.get_by_email(candidate.email) is not None:
            raise ConflictError("email")
        if candidate.national_id and (
            await self.credential_store.get_by_national_id(candidate.national_id) is not None
        ):
            raise ConflictError("national_id")

        now = self.clock()
        account = Account(
            username=candidate.username,
            email=candidate.email,
            password_hash=self.hasher.hash(candidate.password),
            name=candidate.name,
            phone=candidate.phone,
            national_id=candidate.national_id,
            avatar_url=candidate.avatar_url,
            created_at=now,
            updated_at=now,
        )
        account = await self.credential_store.create(account)
        logger.info("Account registered", account_id=account.id, username=account.username)

        if self.config.email_verification_required:
            try:
                await self._send_verification(account)
            except (StorageError, NotificationError) as e:
                logger.warning(
                    "Verification email not sent after registration",
                    account_id=account.id,
                    error=e.message,
                )
        return account

    async def login(self, username: str, password: str) -> LoginResult:
        """Check credentials and issue a session token.

        An unknown username still spends one hash verification so that it
        cannot be told apart from a wrong password by timing.

        Raises:
            InvalidCredentialsError: Unknown username or wrong password.
            EmailNotVerifiedError: Verification is required and pending.
        """
        account = await self.credential_store.get_by_username(username)
        if account is None:
            self.hasher.verify_dummy(password)
            logger.info("Login failed", reason="unknown_username")
            raise InvalidCredentialsError()

        if not self.hasher.verify(account.password_hash, password):
            logger.info("Login failed", reason="wrong_password", account_id=account.id)
            raise InvalidCredentialsError()

        if self.config.email_verification_required and not account.email_verified:
            raise EmailNotVerifiedError()

        if self.hasher.needs_rehash(account.password_hash):
            await self._rehash(account, password)

        token = self.codec.issue(account.id, self.config.session_ttl)
        claims = self.codec.verify(token)
        logger.info("Login succeeded", account_id=account.id)
        return LoginResult(account=account, token=token, expires_at=claims.expires_at)

    async def _rehash(self, account: Account, password: str) -> None:
        try:
            account.password_hash = self.hasher.hash(password)
            await self.credential_store.update(account)
            logger.info("Password hash upgraded", account_id=account.id)
        except (HashingError, StorageError) as e:
            logger.warning("Password rehash failed", account_id=account.id, error=e.message)

    async def logout(self, token: str) -> None:
        """Revoke a session token.

        Expired tokens are accepted so a client can always clear its session.
        The revocation is recorded against the token's jti, so every encoding
        of the same signed token is revoked together.

        Raises:
            InvalidTokenError: The token is forged or malformed.
        """
        claims = self.codec.verify(token, verify_expiry=False)
        await self.token_store.add_to_blacklist(
            claims.token_id, claims.subject, claims.expires_at
        )
        logger.info("Session revoked", account_id=claims.subject)

    async def authenticate(self, token: str) -> Account:
        """Resolve a session token to its live account.

        Raises:
            InvalidTokenError: The token is forged, malformed or its account is gone.
            SessionExpiredError: The token is past its expiry.
            TokenRevokedError: The token was revoked by logout.
        """
        claims = self.codec.verify(token)
        if await self.token_store.is_blacklisted(claims.token_id):
            raise TokenRevokedError()
        account = await self.credential_store.get_by_id(claims.subject)
        if account is None:
            raise InvalidTokenError("Account no longer exists")
        return account

    async def verify_email(self, raw_token: str) -> None:
        """Consume a verification token and mark its account verified.

        The token is deleted only after the account update succeeds.

        Raises:
            InvalidOrExpiredTokenError: The token does not exist.
            TokenExpiredError: The token is past its expiry.
            AccountNotFoundError: The account is gone.
        """
        token = await self.token_store.get_verification_token(raw_token)
        if token is None:
            raise InvalidOrExpiredTokenError()
        if token.is_expired(self.clock()):
            raise TokenExpiredError()
        if not await self.credential_store.mark_email_verified(token.account_id):
            raise AccountNotFoundError()
        await self.token_store.delete_verification_token(raw_token)
        logger.info("Email verified", account_id=token.account_id)

    async def resend_verification(self, email: str) -> None:
        """Send a fresh verification token.

        Unknown and already verified addresses are ignored without error.

        Raises:
            NotificationError: The email could not be sent.
        """
        account = await self.credential_store.get_by_email(email)
        if account is None or account.email_verified:
            logger.debug("Verification resend skipped")
            return
        await self._send_verification(account)

    async def _send_verification(self, account: Account) -> None:
        token, raw_token = VerificationToken.generate(
            account.id, self.config.verification_token_ttl, self.clock()
        )
        await self.token_store.create_verification_token(token)
        await self.notifier.send_verification_email(account.email, account.name, raw_token)
        logger.info("Verification email sent", account_id=account.id)

    async def forgot_password(self, email: str) -> None:
        """Send a password reset link.

        Any earlier reset token for the account stops working. Unknown
        addresses are ignored without error.

        Raises:
            NotificationError: The email could not be sent.
        """
        account = await self.credential_store.get_by_email(email)
        if account is None:
            logger.debug("Password reset requested for unknown email")
            return

        token, raw_token = PasswordResetToken.generate(
            account.id, self.config.reset_token_ttl, self.clock()
        )
        await self.token_store.create_password_reset_token(token)
        reset_link = f"{self.config.app_url.rstrip('/')}/reset-password?token={raw_token}"
        await self.notifier.send_password_reset_email(account.email, account.name, reset_link)
        logger.info("Password reset email sent", account_id=account.id)

    async def reset_password(self, raw_token: str, new_password: str) -> None:
        """Consume a reset token and set a new password.

        Sessions issued before the reset remain valid until they expire or
        are logged out.

        Raises:
            InvalidOrExpiredTokenError: The token does not exist.
            TokenExpiredError: The token is past its expiry.
            AccountNotFoundError: The account is gone.
            HashingError: The new password could not be hashed.
        """
        token = await self.token_store.get_password_reset_token(raw_token)
        if token is None:
            raise InvalidOrExpiredTokenError()
        if token.is_expired(self.clock()):
            raise TokenExpiredError()

        account = await self.credential_store.get_by_id(token.account_id)
        if account is None:
            raise AccountNotFoundError()

        account.password_hash = self.hasher.hash(new_password)
        await self.credential_store.update(account)
        await self.token_store.delete_password_reset_token(raw_token)
        logger.info("Password reset", account_id=account.id)
