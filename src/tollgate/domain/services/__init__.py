"""Domain services for Tollgate.

Services contain business logic that doesn't naturally fit within a single entity.
They depend only on the ports in tollgate.domain.ports.
"""

from tollgate.domain.services.auth_engine import AuthConfig, AuthEngine, LoginResult
from tollgate.domain.services.field_validator import (
    DEFAULT_MESSAGES,
    DEFAULT_RULES,
    FieldValidationError,
    FieldValidator,
)
from tollgate.domain.services.profile_service import ProfileService
from tollgate.domain.services.token_cleanup_service import TokenCleanupService

__all__ = [
    "AuthConfig",
    "AuthEngine",
    "DEFAULT_MESSAGES",
    "DEFAULT_RULES",
    "FieldValidationError",
    "FieldValidator",
    "LoginResult",
    "ProfileService",
    "TokenCleanupService",
]
