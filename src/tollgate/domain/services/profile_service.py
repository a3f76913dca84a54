"""Service for reading and updating an account's own profile."""

from tollgate.core.logging import get_logger
from tollgate.domain.entities import Account, ProfileUpdate
from tollgate.domain.exceptions import AccountNotFoundError, ConflictError
from tollgate.domain.ports import CredentialStore

logger = get_logger(__name__)


class ProfileService:
    """Profile reads and partial updates for an authenticated account."""

    def __init__(self, credential_store: CredentialStore) -> None:
        self.credential_store = credential_store

    async def get_profile(self, account_id: str) -> Account:
        account = await self.credential_store.get_by_id(account_id)
        if account is None:
            raise AccountNotFoundError()
        return account

    async def update_profile(self, account_id: str, changes: ProfileUpdate) -> Account:
        """Apply the fields set in ``changes`` to the account.

        Args:
            account_id: The account to update.
            changes: Fields to change. None leaves a field as it is, and so does an
                empty name or phone; an empty avatar_url clears it.

        Returns:
            The updated account.

        Raises:
            AccountNotFoundError: The account does not exist.
            ConflictError: The new username belongs to another account.
        """
        account = await self.get_profile(account_id)

        if changes.username is not None and changes.username != account.username:
            existing = await self.credential_store.get_by_username(changes.username)
            if existing is not None and existing.id != account.id:
                raise ConflictError("username")
            account.username = changes.username
        # An empty name or phone means "unchanged", not "clear".
        if changes.name:
            account.name = changes.name
        if changes.phone:
            account.phone = changes.phone
        if changes.avatar_url is not None:
            account.avatar_url = changes.avatar_url

        account = await self.credential_store.update(account)
        logger.info("Profile updated", account_id=account.id)
        return account
