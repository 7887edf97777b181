"""ORM model for single-use email verification and password reset tokens."""

import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from workhub.models.base import Base


class TokenType(str, enum.Enum):
    EMAIL_VERIFICATION = "EMAIL_VERIFICATION"
    RESET_PASSWORD = "RESET_PASSWORD"


class SingleUseToken(Base):
    """
    Hashed secret bound to one user and one purpose.

    At most one row per (user_id, type); the raw secret is never stored.
    """

    __tablename__ = "single_use_tokens"
    __table_args__ = (
        UniqueConstraint("user_id", "type", name="uq_single_use_tokens_user_type"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type = Column(Enum(TokenType, name="token_type"), nullable=False)
    token_hash = Column(String(128), nullable=False)
    expiration_time = Column(DateTime(timezone=True), nullable=False, index=True)

    user = relationship("User", back_populates="tokens")
