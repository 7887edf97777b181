"""Workspace CRUD, membership management and paginated listings."""

import logging
import math
from collections.abc import Collection
from dataclasses import dataclass
from typing import Generic, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from workhub.core.errors import NotFoundError, UnauthorizedError
from workhub.models import User, UserRole, Workspace, WorkspaceMembership, WorkspaceRole
from workhub.schemas.workspace import WorkspaceMember

logger = logging.getLogger(__name__)

T = TypeVar("T")

ALL_WORKSPACE_ROLES = frozenset(WorkspaceRole)
MEMBER_ROLES = frozenset({WorkspaceRole.ADMIN, WorkspaceRole.MEMBER})
MANAGER_ROLES = frozenset({WorkspaceRole.OWNER, WorkspaceRole.ADMIN})

ONLY_OWNERS_MESSAGE = "Only owners can make changes"
ONLY_MANAGERS_MESSAGE = "Only owners and admins can manage members"
MEMBER_ADDED = "Member added"
MEMBER_ALREADY_ADDED = "Member already added"


@dataclass(frozen=True)
class Page(Generic[T]):
    data: list[T]
    has_more: bool
    total_pages: int
    current_pages: int


@dataclass(frozen=True)
class WorkspacePatch:
    """Writable workspace fields. None means 'leave unchanged'."""

    name: str | None = None
    description: str | None = None


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def paginate_counts(total_count: int, page: int, limit: int) -> tuple[int, bool]:
    """Return (total_pages, has_more) for a 1-indexed page."""
    total_pages = math.ceil(total_count / limit) if limit > 0 else 0
    return total_pages, page < total_pages


def _validate_page(page: int, limit: int) -> None:
    if page < 1 or limit < 1:
        raise ValueError("page and limit must be positive")


class WorkspaceService:
    """Owns Workspace and WorkspaceMembership rows; reads User only to resolve roles."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _paginate(self, query: Query, page: int, limit: int) -> Page[Workspace]:
        _validate_page(page, limit)
        total_count = query.order_by(None).count()
        rows = query.offset(page_offset(page, limit)).limit(limit).all()
        total_pages, has_more = paginate_counts(total_count, page, limit)
        return Page(data=rows, has_more=has_more, total_pages=total_pages, current_pages=page)

    def _membership(self, user_id: int, workspace_id: int) -> WorkspaceMembership | None:
        return (
            self.db.query(WorkspaceMembership)
            .filter(
                WorkspaceMembership.user_id == user_id,
                WorkspaceMembership.workspace_id == workspace_id,
            )
            .first()
        )

    def _require_role(
        self,
        caller_id: int,
        workspace_id: int,
        allowed: Collection[WorkspaceRole],
        message: str,
    ) -> WorkspaceMembership:
        membership = self._membership(caller_id, workspace_id)
        if membership is None or membership.role not in allowed:
            raise UnauthorizedError(message)
        return membership

    def list_all(self, caller_id: int, page: int = 1, limit: int = 10) -> Page[Workspace]:
        """Global admins see every workspace; other users see the ones they belong to."""
        caller = self.db.query(User).filter(User.id == caller_id).first()
        if caller is None:
            raise NotFoundError("User doesn't exist")
        if caller.role == UserRole.ADMIN:
            return self._paginate(self.db.query(Workspace).order_by(Workspace.id), page, limit)
        return self.list_by_roles(caller_id, page, limit, ALL_WORKSPACE_ROLES)

    def list_owned(self, caller_id: int, page: int = 1, limit: int = 10) -> Page[Workspace]:
        return self.list_by_roles(caller_id, page, limit, {WorkspaceRole.OWNER})

    def list_member_of(self, caller_id: int, page: int = 1, limit: int = 10) -> Page[Workspace]:
        return self.list_by_roles(caller_id, page, limit, MEMBER_ROLES)

    def list_by_roles(
        self,
        caller_id: int,
        page: int,
        limit: int,
        roles: Collection[WorkspaceRole],
    ) -> Page[Workspace]:
        """Workspaces where the caller's membership role is in `roles`."""
        query = (
            self.db.query(Workspace)
            .join(WorkspaceMembership, WorkspaceMembership.workspace_id == Workspace.id)
            .filter(
                WorkspaceMembership.user_id == caller_id,
                WorkspaceMembership.role.in_(list(roles)),
            )
            .order_by(Workspace.id)
        )
        return self._paginate(query, page, limit)

    def get_workspace(self, workspace_id: int) -> Workspace:
        workspace = self.db.query(Workspace).filter(Workspace.id == workspace_id).first()
        if workspace is None:
            raise NotFoundError("Workspace not found")
        return workspace

    def create_workspace(
        self,
        caller_id: int,
        name: str,
        description: str | None = None,
    ) -> Workspace:
        """Create the workspace and the caller's OWNER membership in one commit."""
        workspace = Workspace(name=name, description=description)
        workspace.memberships.append(
            WorkspaceMembership(user_id=caller_id, role=WorkspaceRole.OWNER)
        )
        self.db.add(workspace)
        self.db.commit()
        self.db.refresh(workspace)
        logger.info(
            "Workspace created",
            extra={"workspace_id": workspace.id, "owner_id": caller_id},
        )
        return workspace

    def update_workspace(
        self,
        caller_id: int,
        workspace_id: int,
        patch: WorkspacePatch,
    ) -> Workspace:
        self._require_role(caller_id, workspace_id, {WorkspaceRole.OWNER}, ONLY_OWNERS_MESSAGE)
        workspace = self.get_workspace(workspace_id)
        if patch.name is not None:
            workspace.name = patch.name
        if patch.description is not None:
            workspace.description = patch.description
        self.db.commit()
        self.db.refresh(workspace)
        return workspace

    def delete_workspace(self, caller_id: int, workspace_id: int) -> None:
        """Delete the workspace; memberships go with it."""
        self._require_role(caller_id, workspace_id, {WorkspaceRole.OWNER}, ONLY_OWNERS_MESSAGE)
        workspace = self.get_workspace(workspace_id)
        self.db.delete(workspace)
        self.db.commit()
        logger.info(
            "Workspace deleted",
            extra={"workspace_id": workspace_id, "owner_id": caller_id},
        )

    def list_members(self, workspace_id: int) -> list[WorkspaceMember]:
        self.get_workspace(workspace_id)
        rows = (
            self.db.query(WorkspaceMembership, User)
            .join(User, User.id == WorkspaceMembership.user_id)
            .filter(WorkspaceMembership.workspace_id == workspace_id)
            .order_by(WorkspaceMembership.id)
            .all()
        )
        return [
            WorkspaceMember(
                user_id=user.id,
                role=membership.role,
                email=user.email,
                username=user.username,
            )
            for membership, user in rows
        ]

    def add_member(self, caller_id: int, workspace_id: int, member_id: int) -> tuple[int, str]:
        """
        Add `member_id` with the MEMBER role. Returns (member_id, message).

        Adding an existing member is not an error and creates no second row.
        """
        self._require_role(caller_id, workspace_id, MANAGER_ROLES, ONLY_MANAGERS_MESSAGE)
        if self._membership(member_id, workspace_id) is not None:
            return member_id, MEMBER_ALREADY_ADDED
        if self.db.query(User).filter(User.id == member_id).first() is None:
            raise NotFoundError("User doesn't exist")
        self.db.add(
            WorkspaceMembership(
                user_id=member_id,
                workspace_id=workspace_id,
                role=WorkspaceRole.MEMBER,
            )
        )
        try:
            self.db.commit()
        except IntegrityError:
            # A concurrent add of the same member hit the (user, workspace) unique constraint.
            self.db.rollback()
            return member_id, MEMBER_ALREADY_ADDED
        logger.info(
            "Member added",
            extra={"workspace_id": workspace_id, "member_id": member_id, "added_by": caller_id},
        )
        return member_id, MEMBER_ADDED

    def remove_member(self, caller_id: int, workspace_id: int, member_id: int) -> None:
        """Owners cannot be removed; this keeps exactly one OWNER per workspace."""
        self._require_role(caller_id, workspace_id, MANAGER_ROLES, ONLY_MANAGERS_MESSAGE)
        membership = self._membership(member_id, workspace_id)
        if membership is None:
            raise NotFoundError("Member not found in workspace")
        if membership.role == WorkspaceRole.OWNER:
            raise UnauthorizedError("Workspace owner cannot be removed")
        self.db.delete(membership)
        self.db.commit()
        logger.info(
            "Member removed",
            extra={"workspace_id": workspace_id, "member_id": member_id, "removed_by": caller_id},
        )
