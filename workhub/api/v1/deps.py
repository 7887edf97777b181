"""Request dependencies: database-bound services, bearer authentication and role checks."""

from collections.abc import Callable
from typing import Annotated

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from workhub.core.access import is_role_allowed
from workhub.core.config import Settings, get_settings
from workhub.core.database import get_db
from workhub.core.errors import ForbiddenError, UnauthorizedError
from workhub.models import UserRole
from workhub.schemas.auth import CurrentUser
from workhub.services.auth import AuthService
from workhub.services.credential_store import CredentialStore
from workhub.services.notifier import Notifier, build_notifier
from workhub.services.token_issuer import TokenIssuer
from workhub.services.workspaces import WorkspaceService

security = HTTPBearer(auto_error=False)


def get_notifier(settings: Annotated[Settings, Depends(get_settings)]) -> Notifier:
    return build_notifier(settings)


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    notifier: Annotated[Notifier, Depends(get_notifier)],
) -> AuthService:
    return AuthService(CredentialStore(db), settings, notifier)


def get_workspace_service(db: Annotated[Session, Depends(get_db)]) -> WorkspaceService:
    return WorkspaceService(db)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> CurrentUser:
    """Require a valid Bearer access token and return the current user."""
    if credentials is None:
        raise UnauthorizedError("Not authenticated")
    store = CredentialStore(db)
    try:
        payload = TokenIssuer(store, settings).decode_access(credentials.credentials)
    except jwt.PyJWTError:
        raise UnauthorizedError("Invalid or expired token")
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise UnauthorizedError("Invalid token payload")
    user = store.find_by_id(user_id)
    if user is None:
        raise UnauthorizedError("User not found")
    if settings.REQUIRE_ACTIVE_USER and not user.is_active:
        raise ForbiddenError("User is not activated")
    return CurrentUser.model_validate(user)


def require_roles(*roles: UserRole) -> Callable[..., CurrentUser]:
    """
    Build a dependency that admits the current user only if their global role is
    in `roles`. With no roles the route is open to any authenticated user.
    """
    required = frozenset(roles)

    def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        if not is_role_allowed(required, current_user.role):
            raise ForbiddenError("Insufficient permissions")
        return current_user

    return dependency


require_admin = require_roles(UserRole.ADMIN)
