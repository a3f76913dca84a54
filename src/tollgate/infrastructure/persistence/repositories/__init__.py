"""Repository implementations of the domain storage ports."""

from tollgate.infrastructure.persistence.repositories.account_repository import AccountRepository
from tollgate.infrastructure.persistence.repositories.token_repository import TokenRepository

__all__ = ["AccountRepository", "TokenRepository"]
