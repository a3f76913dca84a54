"""Domain entities for Tollgate.

Entities are pure Python dataclasses that represent core business concepts.
They have no dependencies on infrastructure or external frameworks.
"""

from tollgate.domain.entities.account import Account, NewAccount, ProfileUpdate
from tollgate.domain.entities.blacklisted_token import BlacklistedToken
from tollgate.domain.entities.password_reset import PasswordResetToken
from tollgate.domain.entities.single_use_token import SingleUseToken, hash_token
from tollgate.domain.entities.verification_token import VerificationToken

__all__ = [
    "Account",
    "BlacklistedToken",
    "NewAccount",
    "PasswordResetToken",
    "ProfileUpdate",
    "SingleUseToken",
    "VerificationToken",
    "hash_token",
]
