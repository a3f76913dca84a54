"""Authentication infrastructure components.

This module provides password hashing and session token signing.
"""

from tollgate.infrastructure.auth.password_hasher import Argon2PasswordHasher
from tollgate.infrastructure.auth.session_token_codec import SessionTokenCodec

__all__ = [
    "Argon2PasswordHasher",
    "SessionTokenCodec",
]
