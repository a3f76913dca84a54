"""Profile API routes for the authenticated account."""

from fastapi import APIRouter

from tollgate.domain.entities import ProfileUpdate
from tollgate.infrastructure.api.dependencies import (
    CurrentAccount,
    FieldValidatorDep,
    ProfileServiceDep,
)
from tollgate.infrastructure.api.routes.auth_router import validation_error_response
from tollgate.infrastructure.api.schemas import AccountResponse, UpdateProfileRequest

router = APIRouter()


@router.get("/me", response_model=AccountResponse)
async def get_me(account: CurrentAccount) -> AccountResponse:
    """Return the profile of the bearer token's account."""
    return AccountResponse.model_validate(account)


@router.put("/me", response_model=AccountResponse)
async def update_me(
    request: UpdateProfileRequest,
    account: CurrentAccount,
    profiles: ProfileServiceDep,
    validator: FieldValidatorDep,
):
    errors = validator.validate_profile_update(
        username=request.username,
        name=request.name,
        phone=request.phone,
        avatar_url=request.avatar_url,
    )
    if errors:
        return validation_error_response(errors)

    updated = await profiles.update_profile(
        account.id,
        ProfileUpdate(
            username=request.username,
            name=request.name,
            phone=request.phone,
            avatar_url=request.avatar_url,
        ),
    )
    return AccountResponse.model_validate(updated)
