"""SQLAlchemy models for the Tollgate tables.

All models inherit from the Base class defined in database.py and are
automatically created on application startup in development mode.
"""

from tollgate.infrastructure.persistence.models.account import AccountModel
from tollgate.infrastructure.persistence.models.blacklisted_token import BlacklistedTokenModel
from tollgate.infrastructure.persistence.models.password_reset import PasswordResetTokenModel
from tollgate.infrastructure.persistence.models.verification_token import VerificationTokenModel

__all__ = [
    "AccountModel",
    "BlacklistedTokenModel",
    "PasswordResetTokenModel",
    "VerificationTokenModel",
]
