"""Pydantic schemas for profile endpoints."""

from pydantic import BaseModel, Field


class UpdateProfileRequest(BaseModel):
    """Request body for a partial profile update. Omitted fields are unchanged."""

    username: str | None = Field(None, description="New login name")
    name: str | None = Field(None, max_length=100, description="New display name; empty keeps the current one")
    phone: str | None = Field(None, description="New phone number; empty keeps the current one")
    avatar_url: str | None = Field(None, description="New profile picture URL, or empty to clear")
