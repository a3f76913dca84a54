"""In-memory stand-ins for the auth engine's collaborators."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone

from tollgate.domain.entities import (
    Account,
    BlacklistedToken,
    PasswordResetToken,
    VerificationToken,
    hash_token,
)
from tollgate.domain.exceptions import AccountNotFoundError, ConflictError, NotificationError
from tollgate.domain.ports import (
    CleanupResult,
    CredentialStore,
    NotificationDispatcher,
    PasswordHasher,
    TokenStore,
)

EPOCH = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: datetime = EPOCH) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


class FakeHasher(PasswordHasher):
    """Reversible hasher that records how much work it did."""

    def __init__(self, outdated_prefix: str | None = None) -> None:
        self.verify_calls = 0
        self.dummy_calls = 0
        self.outdated_prefix = outdated_prefix

    def hash(self, plaintext: str) -> str:
        return f"hashed::{plaintext}"

    def verify(self, password_hash: str, plaintext: str) -> bool:
        self.verify_calls += 1
        return password_hash.split("::", 1)[-1] == plaintext and "::" in password_hash

    def verify_dummy(self, plaintext: str) -> None:
        self.dummy_calls += 1

    def needs_rehash(self, password_hash: str) -> bool:
        return self.outdated_prefix is not None and password_hash.startswith(self.outdated_prefix)


class InMemoryCredentialStore(CredentialStore):
    def __init__(self) -> None:
        self.accounts: dict[str, Account] = {}

    def _live(self) -> list[Account]:
        return [a for a in self.accounts.values() if not a.is_deleted]

    async def create(self, account: Account) -> Account:
        for other in self._live():
            if other.username == account.username:
                raise ConflictError("username")
            if other.email == account.email:
                raise ConflictError("email")
            if account.national_id and other.national_id == account.national_id:
                raise ConflictError("national_id")
        self.accounts[account.id] = replace(account)
        return account

    async def get_by_id(self, account_id: str) -> Account | None:
        account = self.accounts.get(account_id)
        return replace(account) if account and not account.is_deleted else None

    async def _find(self, **criteria: str) -> Account | None:
        for account in self._live():
            if all(getattr(account, k) == v for k, v in criteria.items()):
                return replace(account)
        return None

    async def get_by_username(self, username: str) -> Account | None:
        return await self._find(username=username)

    async def get_by_email(self, email: str) -> Account | None:
        return await self._find(email=email)

    async def get_by_national_id(self, national_id: str) -> Account | None:
        return await self._find(national_id=national_id)

    async def update(self, account: Account) -> Account:
        if await self.get_by_id(account.id) is None:
            raise AccountNotFoundError()
        self.accounts[account.id] = replace(account)
        return account

    async def mark_email_verified(self, account_id: str) -> bool:
        account = self.accounts.get(account_id)
        if account is None or account.is_deleted:
            return False
        account.email_verified = True
        return True


class InMemoryTokenStore(TokenStore):
    def __init__(self) -> None:
        self.verification: dict[str, VerificationToken] = {}
        self.password_reset: dict[str, PasswordResetToken] = {}
        self.blacklist: dict[str, BlacklistedToken] = {}

    async def create_verification_token(self, token: VerificationToken) -> VerificationToken:
        self.verification[token.token_hash] = token
        return token

    async def get_verification_token(self, raw_token: str) -> VerificationToken | None:
        return self.verification.get(hash_token(raw_token))

    async def delete_verification_token(self, raw_token: str) -> bool:
        return self.verification.pop(hash_token(raw_token), None) is not None

    async def create_password_reset_token(self, token: PasswordResetToken) -> PasswordResetToken:
        self.password_reset = {
            h: t for h, t in self.password_reset.items() if t.account_id != token.account_id
        }
        self.password_reset[token.token_hash] = token
        return token

    async def get_password_reset_token(self, raw_token: str) -> PasswordResetToken | None:
        return self.password_reset.get(hash_token(raw_token))

    async def delete_password_reset_token(self, raw_token: str) -> bool:
        return self.password_reset.pop(hash_token(raw_token), None) is not None

    async def add_to_blacklist(self, token_id: str, account_id: str, expires_at: datetime) -> None:
        self.blacklist.setdefault(
            token_id,
            BlacklistedToken(token_id=token_id, account_id=account_id, expires_at=expires_at),
        )

    async def is_blacklisted(self, token_id: str) -> bool:
        return token_id in self.blacklist

    async def purge_expired(self, now: datetime) -> CleanupResult:
        def sweep(rows: dict) -> int:
            expired = [h for h, row in rows.items() if row.expires_at < now]
            for h in expired:
                del rows[h]
            return len(expired)

        return CleanupResult(
            blacklisted=sweep(self.blacklist),
            verification=sweep(self.verification),
            password_reset=sweep(self.password_reset),
        )


@dataclass
class SentEmail:
    kind: str
    recipient: str
    name: str
    payload: str


@dataclass
class RecordingNotifier(NotificationDispatcher):
    """Keeps every notification; optionally fails like a broken mail server."""

    sent: list[SentEmail] = field(default_factory=list)
    fail: bool = False

    async def send_verification_email(self, recipient: str, name: str, token: str) -> None:
        if self.fail:
            raise NotificationError()
        self.sent.append(SentEmail("verification", recipient, name, token))

    async def send_password_reset_email(self, recipient: str, name: str, reset_link: str) -> None:
        if self.fail:
            raise NotificationError()
        self.sent.append(SentEmail("password_reset", recipient, name, reset_link))

    def last(self, kind: str) -> SentEmail:
        return [email for email in self.sent if email.kind == kind][-1]
