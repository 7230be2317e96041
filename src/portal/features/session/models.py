"""Pydantic models for the session API."""

from pydantic import BaseModel, ConfigDict, Field


class SessionCreateRequest(BaseModel):
    """
    Credential pair posted by the client after sign-in.

    Both tokens are optional at the schema level so that a missing token is
    answered with 400 rather than a validation error.
    """

    model_config = ConfigDict(populate_by_name=True)

    access_token: str | None = Field(None, alias="accessToken")
    refresh_token: str | None = Field(None, alias="refreshToken")


class SessionResponse(BaseModel):
    """Response model for session creation and deletion."""

    success: bool = True
