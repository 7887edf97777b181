"""ORM model for application users (auth and RBAC)."""

import enum

from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, String, Text, func
from sqlalchemy.orm import relationship

from workhub.models.base import Base


class UserRole(str, enum.Enum):
    """Global role; ADMIN sees every workspace."""

    ADMIN = "ADMIN"
    USER = "USER"


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    Created inactive on sign-up; activated once by redeeming an email verification token.
    refresh_token holds the latest issued refresh JWT (overwritten on sign-in/refresh).
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    username = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(UserRole, name="user_role"), nullable=False, default=UserRole.USER)
    is_active = Column(Boolean, nullable=False, default=False)
    refresh_token = Column(Text, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    tokens = relationship("SingleUseToken", back_populates="user")
    memberships = relationship("WorkspaceMembership", back_populates="user")
