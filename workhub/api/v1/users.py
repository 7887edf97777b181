"""Profile endpoints for the current user and the admin user listing."""

from typing import Annotated

from fastapi import APIRouter, Depends

from workhub.api.v1.deps import get_auth_service, get_current_user, require_admin
from workhub.schemas.auth import CurrentUser
from workhub.schemas.user import EditUserRequest, UserPublic, UsersListResponse
from workhub.services.auth import AuthService

router = APIRouter()


@router.get("/me", response_model=UserPublic)
def get_me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> UserPublic:
    return UserPublic.model_validate(auth.store.get_by_id(current_user.id))


@router.patch("/me", response_model=UserPublic)
def edit_me(
    body: EditUserRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> UserPublic:
    """Change email and/or username. Omitted fields are left as they are."""
    user = auth.update_profile(current_user.id, email=body.email, username=body.username)
    return UserPublic.model_validate(user)


@router.get("", response_model=UsersListResponse)
def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> UsersListResponse:
    """List all users (global ADMIN only)."""
    return UsersListResponse(
        users=[UserPublic.model_validate(u) for u in auth.store.list_users()]
    )
