"""Repository for account database operations.

Implements the credential store on top of SQLAlchemy. Soft-deleted rows are
invisible to every lookup.
"""

import re
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from tollgate.core.logging import get_logger
from tollgate.domain.entities import Account
from tollgate.domain.exceptions import AccountNotFoundError, ConflictError, StorageError
from tollgate.domain.ports import CredentialStore
from tollgate.infrastructure.persistence.models import AccountModel
from tollgate.infrastructure.persistence.repositories.base import SQLAlchemyRepository, as_utc

logger = get_logger(__name__)

# Unique index name -> account field it guards.
UNIQUE_CONSTRAINTS = {
    "uq_accounts_username": "username",
    "uq_accounts_email": "email",
    "uq_accounts_national_id": "national_id",
}

# SQLite names the column instead of the index.
SQLITE_UNIQUE_FAILURE = re.compile(r"UNIQUE constraint failed: accounts\.(\w+)")


def violated_field(orig: BaseException | None) -> str | None:
    """Return the account field whose unique index ``orig`` reports, if any.

    Prefers the constraint name exposed by the driver (``diag.constraint_name``
    on psycopg, ``constraint_name`` on asyncpg). Falls back to the first line
    of the message so a DETAIL line quoting user input is never inspected.
    """
    if orig is None:
        return None
    constraint = getattr(getattr(orig, "diag", None), "constraint_name", None) or getattr(
        orig, "constraint_name", None
    )
    if constraint:
        return UNIQUE_CONSTRAINTS.get(constraint)

    lines = str(orig).splitlines()
    headline = lines[0] if lines else ""
    match = SQLITE_UNIQUE_FAILURE.search(headline)
    if match and match.group(1) in UNIQUE_CONSTRAINTS.values():
        return match.group(1)
    for name, field in UNIQUE_CONSTRAINTS.items():
        if re.search(rf"\b{name}\b", headline):
            return field
    return None


def conflict_from_integrity_error(error: IntegrityError) -> ConflictError | StorageError:
    """Map a uniqueness violation to the account field that caused it."""
    field = violated_field(error.orig)
    if field is not None:
        return ConflictError(field)
    logger.error("Unrecognized integrity error", error=str(error.orig))
    return StorageError()


class AccountRepository(SQLAlchemyRepository, CredentialStore):
    """Repository for account database operations."""

    def _to_model(self, entity: Account) -> AccountModel:
        return AccountModel(
            id=entity.id,
            username=entity.username,
            email=entity.email,
            national_id=entity.national_id,
            password_hash=entity.password_hash,
            name=entity.name,
            phone=entity.phone,
            email_verified=entity.email_verified,
            avatar_url=entity.avatar_url,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            deleted_at=entity.deleted_at,
        )

    def _to_entity(self, model: AccountModel) -> Account:
        return Account(
            id=model.id,
            username=model.username,
            email=model.email,
            national_id=model.national_id,
            password_hash=model.password_hash,
            name=model.name,
            phone=model.phone,
            email_verified=model.email_verified,
            avatar_url=model.avatar_url,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
            deleted_at=as_utc(model.deleted_at),
        )

    async def create(self, account: Account) -> Account:
        """Insert a new account.

        Raises:
            ConflictError: Username, email or national ID is already taken.
            StorageError: Any other database failure.
        """
        try:
            async with self._write("create_account"):
                self._session.add(self._to_model(account))
                await self._session.flush()
        except IntegrityError as e:
            raise conflict_from_integrity_error(e) from e
        logger.debug("Account stored", account_id=account.id)
        return account

    async def _get_one(self, operation: str, *criteria) -> Account | None:
        stmt = (
            select(AccountModel)
            .where(AccountModel.deleted_at.is_(None), *criteria)
            .execution_options(populate_existing=True)
        )
        async with self._read(operation):
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_id(self, account_id: str) -> Account | None:
        return await self._get_one("get_by_id", AccountModel.id == account_id)

    async def get_by_username(self, username: str) -> Account | None:
        return await self._get_one("get_by_username", AccountModel.username == username)

    async def get_by_email(self, email: str) -> Account | None:
        return await self._get_one("get_by_email", AccountModel.email == email)

    async def get_by_national_id(self, national_id: str) -> Account | None:
        return await self._get_one("get_by_national_id", AccountModel.national_id == national_id)

    async def update(self, account: Account) -> Account:
        """Overwrite every mutable column of a live account.

        Returns:
            The account with its refreshed updated_at.

        Raises:
            AccountNotFoundError: No live account has this ID.
            ConflictError: The new values collide with another account.
        """
        account.updated_at = datetime.now(timezone.utc)
        stmt = (
            update(AccountModel)
            .where(AccountModel.id == account.id, AccountModel.deleted_at.is_(None))
            .values(
                username=account.username,
                email=account.email,
                national_id=account.national_id,
                password_hash=account.password_hash,
                name=account.name,
                phone=account.phone,
                email_verified=account.email_verified,
                avatar_url=account.avatar_url,
                updated_at=account.updated_at,
            )
        )
        try:
            async with self._write("update_account"):
                result = await self._session.execute(stmt)
                if result.rowcount == 0:
                    raise AccountNotFoundError()
        except IntegrityError as e:
            raise conflict_from_integrity_error(e) from e
        return account

    async def mark_email_verified(self, account_id: str) -> bool:
        stmt = (
            update(AccountModel)
            .where(AccountModel.id == account_id, AccountModel.deleted_at.is_(None))
            .values(email_verified=True, updated_at=datetime.now(timezone.utc))
        )
        async with self._write("mark_email_verified"):
            result = await self._session.execute(stmt)
        return result.rowcount > 0
