"""Pydantic request/response schemas for sa_gateway.

All responses are wrapped in ApiResponse at the router layer.
"""

import re

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.sa_common.enums import UserStatus
from src.sa_gateway.user.db_models import UserModel


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=64, pattern=r"^[a-zA-Z0-9_]+$")
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    display_name: str | None = Field(None, min_length=1, max_length=100)

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        """Enforce: at least one uppercase, one lowercase, one digit."""
        if not re.search(r"[A-Z]", v):
            raise ValueError("Password must contain at least one uppercase letter")
        if not re.search(r"[a-z]", v):
            raise ValueError("Password must contain at least one lowercase letter")
        if not re.search(r"\d", v):
            raise ValueError("Password must contain at least one digit")
        return v


class LoginRequest(BaseModel):
    username: str
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class UpdateProfileRequest(BaseModel):
    display_name: str | None = Field(None, min_length=1, max_length=100)
    bio: str | None = Field(None, max_length=500)
    avatar: str | None = Field(None, max_length=500)


class UpdateStatusRequest(BaseModel):
    status: UserStatus


class UserInfo(BaseModel):
    """Public projection of a user record."""

    user_id: str
    username: str
    display_name: str
    avatar: str | None
    bio: str | None
    rating: int
    coins: int
    is_verified: bool
    status: str

    @classmethod
    def from_model(cls, user: UserModel) -> "UserInfo":
        return cls(
            user_id=str(user.id),
            username=user.username,
            display_name=user.display_name,
            avatar=user.avatar,
            bio=user.bio,
            rating=user.rating,
            coins=user.coins,
            is_verified=user.is_verified,
            status=user.status,
        )


class UserProfile(UserInfo):
    followers_count: int
    following_count: int
    posts_count: int
    is_following: bool


class RegisterResponse(BaseModel):
    user_id: str
    username: str
    email: str
    display_name: str
    coins: int
    created_at: str


class LoginResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int = 1800  # 30 minutes in seconds
    user: UserInfo


class RefreshResponse(BaseModel):
    access_token: str
    expires_in: int = 1800
