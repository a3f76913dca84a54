"""Password hashing using Argon2.

Provides secure password hashing and verification using the Argon2id algorithm,
which is the winner of the Password Hashing Competition and recommended by OWASP.
"""

import secrets
from functools import cached_property

from argon2 import PasswordHasher as _Argon2Hasher
from argon2.exceptions import HashingError as _Argon2HashingError
from argon2.exceptions import InvalidHashError, VerificationError

from tollgate.core.logging import get_logger
from tollgate.domain.exceptions import HashingError
from tollgate.domain.ports import PasswordHasher

logger = get_logger(__name__)

# Work factor. Changing these only affects new hashes; old ones still verify.
TIME_COST = 3
MEMORY_COST_KIB = 64 * 1024
PARALLELISM = 4


class Argon2PasswordHasher(PasswordHasher):
    """Argon2id hasher with a fixed work factor."""

    def __init__(self) -> None:
        self._hasher = _Argon2Hasher(
            time_cost=TIME_COST,
            memory_cost=MEMORY_COST_KIB,
            parallelism=PARALLELISM,
        )

    def hash(self, plaintext: str) -> str:
        """Hash a password using Argon2id.

        Args:
            plaintext: The plaintext password to hash.

        Returns:
            The encoded hash, e.g. ``$argon2id$v=19$m=65536,t=3,p=4$...``.

        Raises:
            HashingError: If the underlying library fails.
        """
        try:
            return self._hasher.hash(plaintext)
        except _Argon2HashingError as e:
            logger.error("Password hashing failed", error=str(e))
            raise HashingError() from e

    def verify(self, password_hash: str, plaintext: str) -> bool:
        """Verify a password against a hash.

        A mismatch and an unparseable hash both return False.
        """
        try:
            return self._hasher.verify(password_hash, plaintext)
        except VerificationError:
            return False
        except InvalidHashError:
            logger.warning("Stored password hash could not be parsed")
            return False

    def verify_dummy(self, plaintext: str) -> None:
        self.verify(self._dummy_hash, plaintext)

    def needs_rehash(self, password_hash: str) -> bool:
        """Check whether a hash was produced with an outdated work factor."""
        try:
            return self._hasher.check_needs_rehash(password_hash)
        except InvalidHashError:
            return True

    @cached_property
    def _dummy_hash(self) -> str:
        return self._hasher.hash(secrets.token_urlsafe(16))
