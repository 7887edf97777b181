"""Pydantic request/response schemas."""

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
from workhub.schemas.health import HealthResponse
from workhub.schemas.user import EditUserRequest, UserPublic, UsersListResponse
from workhub.schemas.workspace import (
    AddMemberRequest,
    AddMemberResponse,
    CreateWorkspaceRequest,
    PaginatedWorkspaces,
    PaginationParams,
    UpdateWorkspaceRequest,
    WorkspaceMember,
    WorkspaceOut,
)

__all__ = [
    "AddMemberRequest",
    "AddMemberResponse",
    "CreateWorkspaceRequest",
    "CurrentUser",
    "EditUserRequest",
    "GenerateTokenRequest",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "PaginatedWorkspaces",
    "PaginationParams",
    "PasswordResetRequest",
    "RefreshRequest",
    "RegisterRequest",
    "ResetPasswordRequest",
    "TokenLinkResponse",
    "TokenResponse",
    "UpdateWorkspaceRequest",
    "UsersListResponse",
    "WorkspaceMember",
    "WorkspaceOut",
]
