"""
Pydantic schemas for authentication endpoints and stored identities.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class GoogleUser(BaseModel):
    """
    Google OAuth identity as stored in the google_users table.

    `id` is the provider's subject identifier and never changes across logins.
    Tokens are stored server-side only and are never returned to clients.
    """
    id: str = Field(..., description="Google subject identifier ('sub')")
    email: str = Field("", description="Primary email address")
    display_name: str = Field("", description="Full display name")
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    access_token: str = Field("", description="Provider access token")
    refresh_token: Optional[str] = None
    token_expiry: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class SessionUserResponse(BaseModel):
    """
    Response for GET /api/auth/user.

    Safe projection of GoogleUser with the web client's camelCase names.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: str
    display_name: str = Field(..., alias="displayName")
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    profile_image_url: Optional[str] = Field(None, alias="profileImageUrl")


class LogoutResponse(BaseModel):
    """Response for GET /api/auth/logout."""
    success: bool = True
    message: str = "Successfully logged out"


# --- Legacy username/password identity (compatibility only) ---

class LegacyUserCreate(BaseModel):
    """Input for LegacyUserStore.create_user."""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LegacyUser(LegacyUserCreate):
    """Numeric-id user record kept for interface compatibility."""
    id: int
