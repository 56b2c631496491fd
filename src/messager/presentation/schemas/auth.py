"""
Schemas for authentication endpoints.

Fields default to empty strings so missing values reach the use case
and produce its 400 messages instead of a generic 422.
"""

from pydantic import BaseModel, ConfigDict, Field


class SignupRequest(BaseModel):
    """Request schema for POST /api/auth/signup."""

    model_config = ConfigDict(populate_by_name=True)

    full_name: str = Field(default="", alias="fullName")
    email: str = Field(default="")
    password: str = Field(default="")


class UpdateProfileRequest(BaseModel):
    """Request schema for PUT /api/auth/update-profile."""

    model_config = ConfigDict(populate_by_name=True)

    profile_pic: str = Field(default="", alias="profilePic")


class LoginRequest(BaseModel):
    """Request schema for POST /api/auth/login."""

    email: str = Field(default="")
    password: str = Field(default="")


class AuthResponse(BaseModel):
    """Public profile plus issued tokens."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    full_name: str = Field(..., alias="fullName")
    email: str
    profile_pic: str = Field(default="", alias="profilePic")
    created_at: str = Field(..., alias="createdAt")
    access_token: str = Field(..., alias="accessToken")
    refresh_token: str = Field(..., alias="refreshToken")


class RefreshResponse(BaseModel):
    """New access token and the rotated refresh token."""

    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(..., alias="accessToken")
    refresh_token: str = Field(..., alias="refreshToken")


class LogoutResponse(BaseModel):
    message: str = "Logged out successfully"
