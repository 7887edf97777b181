"""Registration, login, token refresh, email verification and password reset."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from workhub.api.v1.deps import get_auth_service, get_current_user
from workhub.core.config import Settings, get_settings
from workhub.models import TokenType
from workhub.schemas.auth import (
    CurrentUser,
    GenerateTokenRequest,
    LoginRequest,
    MessageResponse,
    PasswordResetRequest,
    RefreshRequest,
    RegisterRequest,
    ResetPasswordRequest,
    TokenLinkResponse,
    TokenResponse,
)
from workhub.services.auth import AuthService
from workhub.services.token_issuer import TokenPair

logger = logging.getLogger(__name__)
router = APIRouter()


def _token_response(pair: TokenPair) -> TokenResponse:
    return TokenResponse(
        access_token=pair.access_token,
        refresh_token=pair.refresh_token,
        token_type="bearer",
    )


def _link_response(msg: str, link: str, settings: Settings) -> TokenLinkResponse:
    # Links carry the raw secret; only echo them back outside production.
    return TokenLinkResponse(msg=msg, link=link if settings.APP_ENV == "dev" else None)


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenResponse:
    """
    Create an account and return a token pair. A verification link is emailed;
    the account stays inactive until it is redeemed via GET /auth/verify.
    """
    pair = auth.sign_up(body.email, body.username, body.password)
    return _token_response(pair)


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenResponse:
    """
    Authenticate with email and password; returns access and refresh tokens.
    Include the access token in the Authorization header as: Bearer <access_token>
    """
    return _token_response(auth.sign_in(body.email, body.password))


@router.post("/refresh", response_model=TokenResponse)
def refresh(
    body: RefreshRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenResponse:
    """Exchange the most recently issued refresh token for a new pair."""
    return _token_response(auth.refresh(body.refresh_token))


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> None:
    """Forget the persisted refresh token so it can no longer be exchanged."""
    auth.sign_out(current_user.id)


@router.get("/verify", response_model=MessageResponse)
def verify_email(
    email: Annotated[str, Query(min_length=3, max_length=255)],
    token: Annotated[str, Query(min_length=1, max_length=256)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> MessageResponse:
    """Redeem an email verification token and activate the account."""
    auth.verify(email, token)
    return MessageResponse(msg="Email verified")


@router.post("/tokens", response_model=TokenLinkResponse, status_code=status.HTTP_202_ACCEPTED)
def generate_token(
    body: GenerateTokenRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> TokenLinkResponse:
    """Issue a fresh verification or reset link; any earlier link of that type stops working."""
    link = auth.request_token(body.email, body.type)
    msg = (
        "Password reset link sent"
        if body.type == TokenType.RESET_PASSWORD
        else "Verification link sent"
    )
    return _link_response(msg, link, settings)


@router.post(
    "/password-reset",
    response_model=TokenLinkResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
def request_password_reset(
    body: PasswordResetRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> TokenLinkResponse:
    link = auth.request_password_reset(body.email)
    return _link_response("Password reset link sent", link, settings)


@router.post("/password-reset/confirm", response_model=MessageResponse)
def reset_password(
    body: ResetPasswordRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> MessageResponse:
    """Redeem a password reset token and set the new password."""
    auth.reset_password(body.user_id, body.token, body.password)
    return MessageResponse(msg="Password has been reset")
