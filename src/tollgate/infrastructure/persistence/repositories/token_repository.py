"""Repository for single-use tokens and the session blacklist.

Raw single-use tokens never reach the database; every lookup hashes its
argument first. Blacklist rows are keyed by the session token's jti.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from tollgate.core.logging import get_logger
from tollgate.domain.entities import PasswordResetToken, VerificationToken, hash_token
from tollgate.domain.exceptions import StorageError
from tollgate.domain.ports import CleanupResult, TokenStore
from tollgate.infrastructure.persistence.models import (
    BlacklistedTokenModel,
    PasswordResetTokenModel,
    VerificationTokenModel,
)
from tollgate.infrastructure.persistence.repositories.base import SQLAlchemyRepository, as_utc

logger = get_logger(__name__)

# A concurrent forgot-password for the same account can win the unique index.
RESET_TOKEN_ATTEMPTS = 2


class TokenRepository(SQLAlchemyRepository, TokenStore):
    """Repository for verification, password reset and blacklist rows."""

    async def create_verification_token(self, token: VerificationToken) -> VerificationToken:
        model = VerificationTokenModel(
            id=token.id,
            account_id=token.account_id,
            token_hash=token.token_hash,
            expires_at=token.expires_at,
            created_at=token.created_at,
        )
        try:
            async with self._write("create_verification_token"):
                self._session.add(model)
                await self._session.flush()
        except IntegrityError as e:
            raise StorageError() from e
        return token

    async def get_verification_token(self, raw_token: str) -> VerificationToken | None:
        stmt = select(VerificationTokenModel).where(
            VerificationTokenModel.token_hash == hash_token(raw_token)
        )
        async with self._read("get_verification_token"):
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()
        if model is None:
            return None
        return VerificationToken(
            id=model.id,
            account_id=model.account_id,
            token_hash=model.token_hash,
            expires_at=as_utc(model.expires_at),
            created_at=as_utc(model.created_at),
        )

    async def delete_verification_token(self, raw_token: str) -> bool:
        stmt = delete(VerificationTokenModel).where(
            VerificationTokenModel.token_hash == hash_token(raw_token)
        )
        async with self._write("delete_verification_token"):
            result = await self._session.execute(stmt)
        return result.rowcount > 0

    async def create_password_reset_token(self, token: PasswordResetToken) -> PasswordResetToken:
        """Store a reset token, replacing any prior token for the account.

        The delete and the insert share one transaction. If another request
        inserts for the same account in between, the unique index on
        account_id rejects this insert and the whole step is retried once.
        """
        for attempt in range(1, RESET_TOKEN_ATTEMPTS + 1):
            try:
                async with self._write("create_password_reset_token"):
                    await self._session.execute(
                        delete(PasswordResetTokenModel).where(
                            PasswordResetTokenModel.account_id == token.account_id
                        )
                    )
                    self._session.add(
                        PasswordResetTokenModel(
                            id=token.id,
                            account_id=token.account_id,
                            token_hash=token.token_hash,
                            expires_at=token.expires_at,
                            created_at=token.created_at,
                        )
                    )
                    await self._session.flush()
                return token
            except IntegrityError as e:
                if attempt == RESET_TOKEN_ATTEMPTS:
                    raise StorageError() from e
                logger.warning(
                    "Reset token insert collided, retrying",
                    account_id=token.account_id,
                    attempt=attempt,
                )
        raise StorageError()

    async def get_password_reset_token(self, raw_token: str) -> PasswordResetToken | None:
        stmt = select(PasswordResetTokenModel).where(
            PasswordResetTokenModel.token_hash == hash_token(raw_token)
        )
        async with self._read("get_password_reset_token"):
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()
        if model is None:
            return None
        return PasswordResetToken(
            id=model.id,
            account_id=model.account_id,
            token_hash=model.token_hash,
            expires_at=as_utc(model.expires_at),
            created_at=as_utc(model.created_at),
        )

    async def delete_password_reset_token(self, raw_token: str) -> bool:
        stmt = delete(PasswordResetTokenModel).where(
            PasswordResetTokenModel.token_hash == hash_token(raw_token)
        )
        async with self._write("delete_password_reset_token"):
            result = await self._session.execute(stmt)
        return result.rowcount > 0

    async def add_to_blacklist(self, token_id: str, account_id: str, expires_at: datetime) -> None:
        """Record a revoked session by its jti.

        Revoking a session twice leaves the first row in place.
        """
        if await self.is_blacklisted(token_id):
            return
        model = BlacklistedTokenModel(
            id=str(uuid.uuid4()),
            token_id=token_id,
            account_id=account_id,
            expires_at=expires_at,
            created_at=datetime.now(timezone.utc),
        )
        try:
            async with self._write("add_to_blacklist"):
                self._session.add(model)
                await self._session.flush()
        except IntegrityError:
            # Lost a race with a concurrent logout of the same token
            logger.debug("Token already blacklisted", account_id=account_id)

    async def is_blacklisted(self, token_id: str) -> bool:
        stmt = select(BlacklistedTokenModel.id).where(BlacklistedTokenModel.token_id == token_id)
        async with self._read("is_blacklisted"):
            result = await self._session.execute(stmt)
            return result.scalar_one_or_none() is not None

    async def purge_expired(self, now: datetime) -> CleanupResult:
        """Delete expired blacklist, verification and reset rows in one transaction."""
        # Stored expiries may come back naive from SQLite, so skip in-session evaluation
        async with self._write("purge_expired"):
            blacklisted = await self._session.execute(
                delete(BlacklistedTokenModel).where(BlacklistedTokenModel.expires_at < now)
                .execution_options(synchronize_session=False)
            )
            verification = await self._session.execute(
                delete(VerificationTokenModel).where(VerificationTokenModel.expires_at < now)
                .execution_options(synchronize_session=False)
            )
            password_reset = await self._session.execute(
                delete(PasswordResetTokenModel).where(PasswordResetTokenModel.expires_at < now)
                .execution_options(synchronize_session=False)
            )
        return CleanupResult(
            blacklisted=blacklisted.rowcount,
            verification=verification.rowcount,
            password_reset=password_reset.rowcount,
        )
