"""Sign-up, sign-in, token refresh, email verification and password reset."""

import hmac
import logging
from typing import TYPE_CHECKING

import jwt

from workhub.core.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    WorkhubError,
)
from workhub.core.security import hash_password, verify_password
from workhub.models import TokenType, User, UserRole
from workhub.services.credential_store import CredentialStore, UserPatch
from workhub.services.notifier import NotificationRequest, Notifier
from workhub.services.single_use_tokens import GeneratedToken, SingleUseTokenManager
from workhub.services.token_issuer import TokenIssuer, TokenPair

if TYPE_CHECKING:
    from workhub.core.config import Settings

logger = logging.getLogger(__name__)

CREDENTIALS_INCORRECT = "Credentials incorrect"


class AuthService:
    """Composes the credential store, token issuer and single-use token manager."""

    def __init__(
        self,
        store: CredentialStore,
        settings: "Settings",
        notifier: Notifier,
    ) -> None:
        self.store = store
        self.settings = settings
        self.notifier = notifier
        self.issuer = TokenIssuer(store, settings)
        self.tokens = SingleUseTokenManager(store, settings)

    def sign_up(
        self,
        email: str,
        username: str,
        password: str,
        role: UserRole | None = None,
    ) -> TokenPair:
        """
        Create an inactive user, issue a token pair and send the verification email.

        A failure to deliver the email is logged and does not undo the account;
        the user can request a new verification link later.
        """
        if self.store.find_by_email(email) is not None:
            raise ConflictError("User already exists")
        user = self.store.create(
            email=email,
            username=username,
            password_hash=hash_password(password),
            role=role or UserRole.USER,
        )
        pair = self.issuer.issue(user.id, user.email)
        try:
            self.request_token(user.email, TokenType.EMAIL_VERIFICATION)
        except WorkhubError as e:
            logger.warning(
                "Verification email not dispatched after sign-up",
                extra={"user_id": user.id, "reason": e.message[:200]},
            )
        return pair

    def sign_in(self, email: str, password: str) -> TokenPair:
        """Unknown email and wrong password produce the same ForbiddenError."""
        user = self.store.find_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            raise ForbiddenError(CREDENTIALS_INCORRECT)
        return self.issuer.issue(user.id, user.email)

    def refresh(self, refresh_token: str) -> TokenPair:
        """Mint a new pair from the refresh token last issued to the user."""
        try:
            payload = self.issuer.decode_refresh(refresh_token)
            user_id = int(payload["sub"])
        except (jwt.PyJWTError, KeyError, TypeError, ValueError) as e:
            raise UnauthorizedError("Invalid or expired refresh token") from e
        user = self.store.find_by_id(user_id)
        if (
            user is None
            or user.refresh_token is None
            or not hmac.compare_digest(user.refresh_token, refresh_token)
        ):
            raise UnauthorizedError("Invalid or expired refresh token")
        return self.issuer.issue(user.id, user.email)

    def sign_out(self, user_id: int) -> None:
        self.store.set_refresh_token(user_id, None)

    def verify(self, email: str, presented_secret: str) -> None:
        """Redeem the email verification token and activate the user."""
        user = self.store.find_by_email(email)
        if user is None:
            raise NotFoundError("User doesn't exist")
        self.tokens.redeem(user.id, TokenType.EMAIL_VERIFICATION, presented_secret)
        self.store.set_activated(user.id)

    def request_token(self, email: str, token_type: TokenType) -> str:
        """
        Generate a token of `token_type` for `email` and hand its link to the notifier.

        Returns the link. Notifier failures propagate as ServiceUnavailableError.
        """
        generated = self.tokens.generate(email, token_type)
        self._notify(generated)
        return generated.link

    def request_password_reset(self, email: str) -> str:
        return self.request_token(email, TokenType.RESET_PASSWORD)

    def reset_password(self, user_id: int, presented_secret: str, new_password: str) -> User:
        """Redeem the reset token, store the new password hash and drop the refresh token."""
        self.tokens.redeem(user_id, TokenType.RESET_PASSWORD, presented_secret)
        user = self.store.update(user_id, UserPatch(password_hash=hash_password(new_password)))
        self.store.set_refresh_token(user_id, None)
        logger.info("Password reset", extra={"user_id": user_id})
        return user

    def update_profile(
        self,
        user_id: int,
        email: str | None = None,
        username: str | None = None,
    ) -> User:
        return self.store.update(user_id, UserPatch(email=email, username=username))

    def _notify(self, generated: GeneratedToken) -> None:
        self.notifier.send(
            NotificationRequest(
                email=generated.user.email,
                username=generated.user.username,
                type=generated.type,
                link=generated.link,
            )
        )
