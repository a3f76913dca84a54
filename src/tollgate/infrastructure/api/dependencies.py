"""FastAPI dependencies for the account and authentication endpoints.

Long-lived collaborators (hasher, codec, notifier, field validator, engine
config) are built once by the app factory and kept on ``app.state``. The
engine itself is assembled per request around the request's DB session.
"""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from tollgate.core.logging import get_logger
from tollgate.domain.entities import Account
from tollgate.domain.ports import NotificationDispatcher, PasswordHasher, TokenCodec
from tollgate.domain.services import AuthConfig, AuthEngine, FieldValidator, ProfileService
from tollgate.infrastructure.persistence.database import get_db_session
from tollgate.infrastructure.persistence.repositories import AccountRepository, TokenRepository

logger = get_logger(__name__)


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.token_codec


def get_notification_dispatcher(request: Request) -> NotificationDispatcher:
    return request.app.state.notifier


def get_field_validator(request: Request) -> FieldValidator:
    return request.app.state.field_validator


def get_auth_config(request: Request) -> AuthConfig:
    return request.app.state.auth_config


async def get_auth_engine(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
    notifier: Annotated[NotificationDispatcher, Depends(get_notification_dispatcher)],
    config: Annotated[AuthConfig, Depends(get_auth_config)],
) -> AuthEngine:
    """Assemble an engine bound to the request's database session."""
    return AuthEngine(
        credential_store=AccountRepository(session),
        token_store=TokenRepository(session),
        hasher=hasher,
        codec=codec,
        notifier=notifier,
        config=config,
    )


async def get_profile_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> ProfileService:
    return ProfileService(AccountRepository(session))


def extract_bearer_token(authorization: str | None) -> str:
    """Pull the token out of an ``Authorization: Bearer <token>`` header.

    Raises:
        HTTPException: 401 if the header is missing or malformed.
    """
    if authorization is None:
        logger.info("Authentication failed: missing Authorization header")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        logger.info("Authentication failed: invalid Authorization header format")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return parts[1]


def get_bearer_token(authorization: Annotated[str | None, Header()] = None) -> str:
    return extract_bearer_token(authorization)


async def get_current_account(
    token: Annotated[str, Depends(get_bearer_token)],
    engine: Annotated[AuthEngine, Depends(get_auth_engine)],
) -> Account:
    """Resolve the bearer token to its account.

    Revoked, expired and invalid tokens raise domain errors that the
    exception handlers turn into 401 responses.
    """
    return await engine.authenticate(token)


# Type aliases for dependency injection
AuthEngineDep = Annotated[AuthEngine, Depends(get_auth_engine)]
CurrentAccount = Annotated[Account, Depends(get_current_account)]
FieldValidatorDep = Annotated[FieldValidator, Depends(get_field_validator)]
ProfileServiceDep = Annotated[ProfileService, Depends(get_profile_service)]
BearerToken = Annotated[str, Depends(get_bearer_token)]
