"""Workspace CRUD, paginated listings and membership management."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from workhub.api.v1.deps import get_current_user, get_workspace_service, require_roles
from workhub.models import UserRole
from workhub.schemas.auth import CurrentUser
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
from workhub.services.workspaces import Page, WorkspacePatch, WorkspaceService

router = APIRouter()

Service = Annotated[WorkspaceService, Depends(get_workspace_service)]
Caller = Annotated[CurrentUser, Depends(get_current_user)]


def get_pagination(
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> PaginationParams:
    return PaginationParams(page=page, limit=limit)


Pagination = Annotated[PaginationParams, Depends(get_pagination)]


def _page_response(page: Page) -> PaginatedWorkspaces:
    return PaginatedWorkspaces(
        data=[WorkspaceOut.model_validate(w) for w in page.data],
        has_more=page.has_more,
        total_pages=page.total_pages,
        current_pages=page.current_pages,
    )


@router.get("", response_model=PaginatedWorkspaces)
def list_workspaces(
    caller: Annotated[CurrentUser, Depends(require_roles(UserRole.ADMIN, UserRole.USER))],
    pagination: Pagination,
    workspaces: Service,
) -> PaginatedWorkspaces:
    """Every workspace for global admins; otherwise those the caller belongs to."""
    return _page_response(workspaces.list_all(caller.id, pagination.page, pagination.limit))


@router.get("/me", response_model=PaginatedWorkspaces)
def list_my_workspaces(
    caller: Caller,
    pagination: Pagination,
    workspaces: Service,
) -> PaginatedWorkspaces:
    """Workspaces the caller owns."""
    return _page_response(workspaces.list_owned(caller.id, pagination.page, pagination.limit))


@router.get("/member", response_model=PaginatedWorkspaces)
def list_member_workspaces(
    caller: Caller,
    pagination: Pagination,
    workspaces: Service,
) -> PaginatedWorkspaces:
    """Workspaces where the caller is an ADMIN or MEMBER (not OWNER)."""
    return _page_response(
        workspaces.list_member_of(caller.id, pagination.page, pagination.limit)
    )


@router.post("", response_model=WorkspaceOut, status_code=status.HTTP_201_CREATED)
def create_workspace(
    body: CreateWorkspaceRequest,
    caller: Caller,
    workspaces: Service,
) -> WorkspaceOut:
    workspace = workspaces.create_workspace(caller.id, body.name, body.description)
    return WorkspaceOut.model_validate(workspace)


@router.patch("/{workspace_id}", response_model=WorkspaceOut)
def update_workspace(
    workspace_id: int,
    body: UpdateWorkspaceRequest,
    caller: Caller,
    workspaces: Service,
) -> WorkspaceOut:
    """Owner only."""
    workspace = workspaces.update_workspace(
        caller.id,
        workspace_id,
        WorkspacePatch(name=body.name, description=body.description),
    )
    return WorkspaceOut.model_validate(workspace)


@router.delete("/{workspace_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_workspace(
    workspace_id: int,
    caller: Caller,
    workspaces: Service,
) -> None:
    """Owner only. Memberships are deleted with the workspace."""
    workspaces.delete_workspace(caller.id, workspace_id)


@router.get("/{workspace_id}/members", response_model=list[WorkspaceMember])
def list_members(
    workspace_id: int,
    _caller: Caller,
    workspaces: Service,
) -> list[WorkspaceMember]:
    return workspaces.list_members(workspace_id)


@router.post("/{workspace_id}/members", response_model=AddMemberResponse)
def add_member(
    workspace_id: int,
    body: AddMemberRequest,
    caller: Caller,
    workspaces: Service,
) -> AddMemberResponse:
    """Owner or workspace admin. Adding an existing member reports it instead of failing."""
    member_id, msg = workspaces.add_member(caller.id, workspace_id, body.member_id)
    return AddMemberResponse(member_id=member_id, msg=msg)


@router.delete(
    "/{workspace_id}/members/{member_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def remove_member(
    workspace_id: int,
    member_id: int,
    caller: Caller,
    workspaces: Service,
) -> None:
    """Owner or workspace admin. The owner cannot be removed."""
    workspaces.remove_member(caller.id, workspace_id, member_id)
