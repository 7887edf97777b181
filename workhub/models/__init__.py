"""SQLAlchemy ORM models."""

from workhub.models.base import Base
from workhub.models.token import SingleUseToken, TokenType
from workhub.models.user import User, UserRole
from workhub.models.workspace import Workspace, WorkspaceMembership, WorkspaceRole

__all__ = [
    "Base",
    "SingleUseToken",
    "TokenType",
    "User",
    "UserRole",
    "Workspace",
    "WorkspaceMembership",
    "WorkspaceRole",
]
