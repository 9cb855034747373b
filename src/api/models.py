"""Pydantic models for API request/response."""

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, EmailStr, Field

from domain.model.user import User, UserRole, UserSession

StatusFilter = Literal["active", "inactive"]


class UserResponse(BaseModel):
    """Full user record as shown in the admin panel (never the password hash)."""
    id: str
    email: str
    first_name: str
    last_name: str
    display_name: str
    role: UserRole
    providers: list[str]
    is_active: bool
    email_verified: bool
    photo_url: str = ""
    last_sign_in_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            display_name=user.display_name,
            role=user.role,
            providers=list(user.providers),
            is_active=user.is_active,
            email_verified=user.email_verified,
            photo_url=user.photo_url,
            last_sign_in_at=user.last_sign_in_at,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class SessionUserResponse(BaseModel):
    """Session-safe projection returned after sign-in."""
    id: str
    email: str
    display_name: str
    role: UserRole
    is_active: bool
    email_verified: bool
    photo_url: str = ""
    last_sign_in_at: Optional[datetime] = None

    @classmethod
    def from_session(cls, session: UserSession) -> "SessionUserResponse":
        return cls(
            id=session.id,
            email=session.email,
            display_name=session.display_name,
            role=session.role,
            is_active=session.is_active,
            email_verified=session.email_verified,
            photo_url=session.photo_url,
            last_sign_in_at=session.last_sign_in_at,
        )


class AuthResponse(BaseModel):
    """Response model for authentication."""
    token: str
    user: SessionUserResponse


class SignupRequest(BaseModel):
    """Request model for self-service registration."""
    email: EmailStr
    password: str = Field(..., min_length=8)
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    display_name: Optional[str] = Field(None, max_length=100)


class LoginRequest(BaseModel):
    """Request model for credentials sign-in."""
    email: EmailStr
    password: str = Field(..., min_length=1)


class OAuthSignInRequest(BaseModel):
    """Access token obtained by the client from the OAuth provider."""
    access_token: str = Field(..., min_length=1)


class CreateUserRequest(BaseModel):
    """Request model for admin-created accounts."""
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=8)
    display_name: Optional[str] = Field(None, max_length=100)
    photo_url: str = ""
    role: UserRole = UserRole.USER


class UpdateUserRequest(BaseModel):
    """Partial update; omitted fields are left untouched.

    Fields are non-nullable: the None defaults only mark a field as unset and
    are dropped by ``model_dump(exclude_unset=True)``, while an explicit JSON
    null fails validation.
    """
    first_name: str = Field(None, min_length=1, max_length=50)
    last_name: str = Field(None, min_length=1, max_length=50)
    display_name: str = Field(None, max_length=100)
    photo_url: str = None
    role: UserRole = None
    is_active: bool = None


class RoleUpdateRequest(BaseModel):
    role: UserRole


class ActiveUpdateRequest(BaseModel):
    is_active: bool


class UserListResponse(BaseModel):
    """Response model for the user list with pagination."""
    users: list[UserResponse]
    total: int = Field(..., description="Total number of users matching filters")
    has_more: bool


class UserStatsResponse(BaseModel):
    total: int
    active: int
    inactive: int
    signed_in_today: int


class SettingsResponse(BaseModel):
    settings: dict[str, Any]
