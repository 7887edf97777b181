"""Schemas for user profile endpoints. Password hash and refresh token are never exposed."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from workhub.models.user import UserRole


class UserPublic(BaseModel):
    """Outward-facing user representation."""

    id: int
    email: str
    username: str
    role: UserRole
    is_active: bool
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class EditUserRequest(BaseModel):
    """Patch for PATCH /users/me; omitted fields are left unchanged."""

    email: EmailStr | None = None
    username: str | None = Field(default=None, min_length=1, max_length=255)


class UsersListResponse(BaseModel):
    """Response for GET /users (admin only)."""

    users: list[UserPublic]
