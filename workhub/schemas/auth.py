"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, EmailStr, Field

from workhub.models.token import TokenType
from workhub.models.user import UserRole


class RegisterRequest(BaseModel):
    """
    Sign-up payload. Accounts get the USER role and stay inactive until the email
    is verified; global ADMINs are created with workhub.scripts.create_user.
    """

    email: EmailStr = Field(..., description="Email address (unique)")
    username: str = Field(..., min_length=1, max_length=255, description="Display name")
    password: str = Field(..., min_length=8, max_length=128, description="Password")


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1, description="Refresh JWT from login")


class TokenResponse(BaseModel):
    """JWT pair returned after sign-up, login or refresh."""

    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")
    token_type: str = Field(default="bearer", description="Token type")


class GenerateTokenRequest(BaseModel):
    """Request a new single-use token link (resend verification or password reset)."""

    email: EmailStr
    type: TokenType


class PasswordResetRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    """Redeem a password reset token sent by email."""

    user_id: int = Field(..., ge=1)
    token: str = Field(..., min_length=1, max_length=256)
    password: str = Field(..., min_length=8, max_length=128)


class TokenLinkResponse(BaseModel):
    """Acknowledgement for token requests. `link` is only populated in dev."""

    msg: str
    link: str | None = None


class MessageResponse(BaseModel):
    msg: str


class CurrentUser(BaseModel):
    """Authenticated user (id, email, role) for dependency injection."""

    id: int
    email: str
    username: str
    role: UserRole
    is_active: bool

    class Config:
        from_attributes = True
