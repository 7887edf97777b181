"""Schemas for workspace and membership endpoints."""

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from workhub.models.workspace import WorkspaceRole

T = TypeVar("T")


class PaginationParams(BaseModel):
    """Query parameters for paginated listings; page is 1-indexed."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)


class PaginatedResponse(BaseModel, Generic[T]):
    data: list[T]
    has_more: bool
    total_pages: int
    current_pages: int


class WorkspaceOut(BaseModel):
    id: int
    name: str
    description: str | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True


PaginatedWorkspaces = PaginatedResponse[WorkspaceOut]


class CreateWorkspaceRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=5000)


class UpdateWorkspaceRequest(BaseModel):
    """Patch for PATCH /workspaces/{id}; omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=5000)


class WorkspaceMember(BaseModel):
    """One member of a workspace with their workspace role."""

    user_id: int
    role: WorkspaceRole
    email: str
    username: str


class AddMemberRequest(BaseModel):
    member_id: int = Field(..., ge=1)


class AddMemberResponse(BaseModel):
    member_id: int
    msg: str
