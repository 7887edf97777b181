"""ORM models for workspaces and their memberships."""

import enum

from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from workhub.models.base import Base


class WorkspaceRole(str, enum.Enum):
    """Role of a user inside one workspace (distinct from the global UserRole)."""

    OWNER = "OWNER"
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


class Workspace(Base):
    """Named collaboration container. Exactly one OWNER membership exists per workspace."""

    __tablename__ = "workspaces"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    memberships = relationship(
        "WorkspaceMembership",
        back_populates="workspace",
        cascade="all, delete",
    )


class WorkspaceMembership(Base):
    """Join row linking a user to a workspace with a role; unique per (user, workspace)."""

    __tablename__ = "workspace_memberships"
    __table_args__ = (
        UniqueConstraint("user_id", "workspace_id", name="uq_workspace_memberships_user_workspace"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    workspace_id = Column(
        Integer,
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role = Column(
        Enum(WorkspaceRole, name="workspace_role"),
        nullable=False,
        default=WorkspaceRole.MEMBER,
    )

    user = relationship("User", back_populates="memberships")
    workspace = relationship("Workspace", back_populates="memberships")
