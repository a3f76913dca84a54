"""Request and response schemas for the HTTP API."""

from tollgate.infrastructure.api.schemas.auth_schemas import (
    AccountResponse,
    ConflictErrorResponse,
    EmailRequest,
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    ResetPasswordRequest,
    ValidationErrorDetail,
    ValidationErrorResponse,
)
from tollgate.infrastructure.api.schemas.users_schemas import UpdateProfileRequest

__all__ = [
    "AccountResponse",
    "ConflictErrorResponse",
    "EmailRequest",
    "ErrorResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "RegisterRequest",
    "RegisterResponse",
    "ResetPasswordRequest",
    "UpdateProfileRequest",
    "ValidationErrorDetail",
    "ValidationErrorResponse",
]
