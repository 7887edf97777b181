"""Persistence of users and their single-use tokens."""

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from workhub.core.errors import ConflictError, NotFoundError
from workhub.models import SingleUseToken, TokenType, User, UserRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserPatch:
    """Explicit set of writable user fields. None means 'leave unchanged'."""

    email: str | None = None
    username: str | None = None
    password_hash: str | None = None


class CredentialStore:
    """
    Owns User and SingleUseToken rows. Password hashes are accepted pre-hashed
    and never leave this layer except through the ORM object; routes serialize
    via UserPublic.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(User.email == email).first()

    def find_by_id(self, user_id: int) -> User | None:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_id(self, user_id: int) -> User:
        user = self.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User doesn't exist")
        return user

    def list_users(self) -> list[User]:
        return self.db.query(User).order_by(User.id).all()

    def create(
        self,
        email: str,
        username: str,
        password_hash: str,
        role: UserRole = UserRole.USER,
        is_active: bool = False,
    ) -> User:
        """Insert a new user. Raises ConflictError if the email is already registered."""
        if self.find_by_email(email) is not None:
            raise ConflictError("User already exists")
        user = User(
            email=email,
            username=username,
            password_hash=password_hash,
            role=role,
            is_active=is_active,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as e:
            # Concurrent sign-up with the same email lost the race on the unique index.
            self.db.rollback()
            raise ConflictError("User already exists") from e
        self.db.refresh(user)
        logger.info("User created", extra={"user_id": user.id, "role": user.role.value})
        return user

    def update(self, user_id: int, patch: UserPatch) -> User:
        """Apply the non-None fields of `patch` to the user."""
        user = self.get_by_id(user_id)
        if patch.email is not None and patch.email != user.email:
            if self.find_by_email(patch.email) is not None:
                raise ConflictError("Email already in use")
            user.email = patch.email
        if patch.username is not None:
            user.username = patch.username
        if patch.password_hash is not None:
            user.password_hash = patch.password_hash
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("Email already in use") from e
        self.db.refresh(user)
        return user

    def set_refresh_token(self, user_id: int, token: str | None) -> None:
        user = self.get_by_id(user_id)
        user.refresh_token = token
        self.db.commit()

    def set_activated(self, user_id: int) -> None:
        user = self.get_by_id(user_id)
        user.is_active = True
        self.db.commit()
        logger.info("User activated", extra={"user_id": user_id})

    def find_token(self, user_id: int, token_type: TokenType) -> SingleUseToken | None:
        return (
            self.db.query(SingleUseToken)
            .filter(
                SingleUseToken.user_id == user_id,
                SingleUseToken.type == token_type,
            )
            .first()
        )

    def replace_token(
        self,
        user_id: int,
        token_type: TokenType,
        token_hash: str,
        expiration_time: datetime,
    ) -> SingleUseToken:
        """Delete any token of this (user, type) and insert the new one in one commit."""
        self.db.query(SingleUseToken).filter(
            SingleUseToken.user_id == user_id,
            SingleUseToken.type == token_type,
        ).delete(synchronize_session=False)
        # Flush the delete first so the (user_id, type) unique constraint is free.
        self.db.flush()
        token = SingleUseToken(
            user_id=user_id,
            type=token_type,
            token_hash=token_hash,
            expiration_time=expiration_time,
        )
        self.db.add(token)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("A token for this user is being issued concurrently") from e
        self.db.refresh(token)
        return token

    def delete_token(self, token_id: int) -> bool:
        """
        Conditional delete: True only if this call removed the row. A concurrent
        redemption that already deleted it yields False.
        """
        deleted = (
            self.db.query(SingleUseToken)
            .filter(SingleUseToken.id == token_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted == 1

    def purge_expired_tokens(self, now: datetime) -> int:
        deleted = (
            self.db.query(SingleUseToken)
            .filter(SingleUseToken.expiration_time <= now)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted
