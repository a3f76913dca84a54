"""Authentication API routes.

Provides endpoints for registration, login, logout, email verification and
password reset.
"""

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from tollgate.core.logging import get_logger
from tollgate.domain.entities import NewAccount
from tollgate.domain.services import FieldValidationError
from tollgate.infrastructure.api.dependencies import (
    AuthEngineDep,
    BearerToken,
    FieldValidatorDep,
)
from tollgate.infrastructure.api.schemas import (
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
    ValidationErrorResponse,
)

logger = get_logger(__name__)

router = APIRouter()

FORGOT_PASSWORD_MESSAGE = "If your email is registered, you will receive a password reset link"
RESEND_VERIFICATION_MESSAGE = (
    "If your email is registered and not yet verified, you will receive a verification email"
)


def validation_error_response(errors: list[FieldValidationError]) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Validation error",
            "details": [{"field": e.field, "message": e.message, "code": e.code} for e in errors],
        },
    )


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=RegisterResponse,
    responses={
        400: {"model": ValidationErrorResponse, "description": "Validation error"},
        409: {"model": ConflictErrorResponse, "description": "Username, email or national ID taken"},
    },
)
async def register(
    request: RegisterRequest,
    engine: AuthEngineDep,
    validator: FieldValidatorDep,
) -> RegisterResponse | JSONResponse:
    """Register a new account.

    When email verification is enabled, a verification link is emailed and
    login is refused until it is followed.
    """
    errors = validator.validate_registration(
        username=request.username,
        password=request.password,
        confirm_password=request.confirm_password,
        name=request.name,
        phone=request.phone,
        national_id=request.national_id,
        avatar_url=request.avatar_url,
    )
    if errors:
        logger.info("Registration failed: validation", error_count=len(errors))
        return validation_error_response(errors)

    account = await engine.register(
        NewAccount(
            username=request.username,
            email=request.email,
            password=request.password,
            name=request.name,
            phone=request.phone,
            national_id=request.national_id or None,
            avatar_url=request.avatar_url,
        )
    )

    if engine.config.email_verification_required:
        message = "Registration successful. Please check your email to verify your account"
    else:
        message = "Registration successful"
    return RegisterResponse(message=message, account=AccountResponse.model_validate(account))


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid username or password"},
        403: {"model": ErrorResponse, "description": "Email not verified"},
    },
)
async def login(request: LoginRequest, engine: AuthEngineDep) -> LoginResponse:
    """Exchange a username and password for a session token."""
    result = await engine.login(request.username, request.password)
    return LoginResponse(
        token=result.token,
        expires_at=result.expires_at,
        expires_in=int(engine.config.session_ttl.total_seconds()),
        account=AccountResponse.model_validate(result.account),
    )


@router.post(
    "/logout",
    response_model=MessageResponse,
    responses={401: {"model": ErrorResponse, "description": "Invalid token"}},
)
async def logout(token: BearerToken, engine: AuthEngineDep) -> MessageResponse:
    """Revoke the bearer token. Expired tokens are accepted."""
    await engine.logout(token)
    return MessageResponse(message="Successfully logged out")


@router.get(
    "/verify-email",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid or expired token"}},
)
async def verify_email(
    engine: AuthEngineDep,
    token: str = Query(..., min_length=1, description="Verification token from the email link"),
) -> MessageResponse:
    """Confirm an email address with the token sent at registration."""
    await engine.verify_email(token)
    return MessageResponse(message="Email verified successfully")


@router.post("/resend-verification", response_model=MessageResponse)
async def resend_verification(request: EmailRequest, engine: AuthEngineDep) -> MessageResponse:
    """Send a new verification email.

    The reply is the same whether or not the address belongs to an
    unverified account.
    """
    await engine.resend_verification(request.email)
    return MessageResponse(message=RESEND_VERIFICATION_MESSAGE)


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(request: EmailRequest, engine: AuthEngineDep) -> MessageResponse:
    """Email a password reset link.

    The reply is the same whether or not the address is registered.
    """
    await engine.forgot_password(request.email)
    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid token or weak password"},
    },
)
async def reset_password(
    request: ResetPasswordRequest,
    engine: AuthEngineDep,
    validator: FieldValidatorDep,
) -> MessageResponse | JSONResponse:
    """Set a new password using the token from a reset email."""
    errors = validator.validate_password_reset(request.new_password, request.confirm_password)
    if errors:
        logger.info("Password reset failed: validation", error_count=len(errors))
        return validation_error_response(errors)

    await engine.reset_password(request.token, request.new_password)
    return MessageResponse(message="Password has been reset successfully")
