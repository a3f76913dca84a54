"""Pydantic schemas for authentication endpoints."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    """Request body for account registration."""

    username: str = Field(..., description="Login name (3-20 letters, digits or underscores)")
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=1, description="Password")
    confirm_password: str = Field(..., min_length=1, description="Password confirmation")
    name: str = Field("", max_length=100, description="Display name")
    phone: str = Field("", description="Phone number")
    national_id: str | None = Field(None, description="12-digit national ID number")
    avatar_url: str = Field("", description="Profile picture URL")


class AccountResponse(BaseModel):
    """Account information returned to its owner."""

    id: str = Field(..., description="Account ID")
    username: str = Field(..., description="Login name")
    email: str = Field(..., description="Email address")
    name: str = Field(..., description="Display name")
    phone: str = Field(..., description="Phone number")
    national_id: str | None = Field(None, description="National ID number")
    email_verified: bool = Field(..., description="Whether the email address is confirmed")
    avatar_url: str = Field(..., description="Profile picture URL")
    created_at: datetime = Field(..., description="When the account was created")
    updated_at: datetime = Field(..., description="When the account was last updated")

    model_config = {"from_attributes": True}


class RegisterResponse(BaseModel):
    """Response for a successful registration."""

    message: str
    account: AccountResponse


class LoginRequest(BaseModel):
    """Request body for login."""

    username: str = Field(..., min_length=1, description="Login name")
    password: str = Field(..., min_length=1, description="Password")


class LoginResponse(BaseModel):
    """Response for a successful login."""

    token: str = Field(..., description="Session token")
    token_type: str = Field("bearer", description="Authorization scheme for the token")
    expires_at: datetime = Field(..., description="When the session token expires")
    expires_in: int = Field(..., description="Seconds until the session token expires")
    account: AccountResponse = Field(..., description="Account information")


class EmailRequest(BaseModel):
    """Request body carrying only an email address."""

    email: EmailStr = Field(..., description="Email address")


class ResetPasswordRequest(BaseModel):
    """Request body for completing a password reset."""

    token: str = Field(..., min_length=1, description="Reset token from the email link")
    new_password: str = Field(..., min_length=1, description="New password")
    confirm_password: str | None = Field(None, description="New password confirmation")


class MessageResponse(BaseModel):
    """Response carrying a human-readable message."""

    message: str


class ValidationErrorDetail(BaseModel):
    """Detail for a single validation error."""

    field: str = Field(..., description="Field name that failed validation")
    message: str = Field(..., description="Human-readable error message")
    code: str | None = Field(None, description="Machine-readable error code")


class ValidationErrorResponse(BaseModel):
    """Response for validation errors."""

    error: str = Field(..., description="Error type")
    details: list[ValidationErrorDetail] = Field(..., description="List of validation errors")


class ErrorResponse(BaseModel):
    """Response for domain errors."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Human-readable error message")


class ConflictErrorResponse(ErrorResponse):
    """Response for conflict errors (duplicate account attributes)."""

    field: str = Field(..., description="Field that caused the conflict")
