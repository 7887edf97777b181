"""Generate and redeem single-use email verification and password reset tokens."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from workhub.core.errors import NotFoundError, TokenExpiredError
from workhub.core.security import generate_token_secret, hash_token_secret, verify_token_secret
from workhub.models import TokenType, User
from workhub.services.credential_store import CredentialStore

if TYPE_CHECKING:
    from workhub.core.config import Settings

logger = logging.getLogger(__name__)

# Lifetime and front-end route per token type.
TOKEN_LIFETIMES = {
    TokenType.RESET_PASSWORD: timedelta(minutes=15),
    TokenType.EMAIL_VERIFICATION: timedelta(hours=24),
}
LINK_PATHS = {
    TokenType.RESET_PASSWORD: "resetPassword",
    TokenType.EMAIL_VERIFICATION: "emailVerification",
}

INVALID_TOKEN_MESSAGE = "Invalid or expired token"


@dataclass(frozen=True)
class GeneratedToken:
    """Result of generate(): the link embeds the raw secret, which is not stored anywhere."""

    link: str
    user: User
    type: TokenType
    expiration_time: datetime


def _as_utc(value: datetime) -> datetime:
    # SQLite returns naive datetimes; every stored value is UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def build_link(client_url: str, token_type: TokenType, raw_secret: str, user_id: int) -> str:
    return f"{client_url}/{LINK_PATHS[token_type]}?token={raw_secret}&id={user_id}"


class SingleUseTokenManager:
    """At most one live token per (user, type); redemption is keyed by (user, type)."""

    def __init__(self, store: CredentialStore, settings: "Settings") -> None:
        self.store = store
        self.settings = settings

    def generate(
        self,
        email: str,
        token_type: TokenType,
        now: datetime | None = None,
    ) -> GeneratedToken:
        """
        Replace any existing token of `token_type` for the user with a fresh one.

        Raises NotFoundError if no user has this email.
        """
        user = self.store.find_by_email(email)
        if user is None:
            raise NotFoundError("User doesn't exist")
        now = now or datetime.now(UTC)
        expiration_time = now + TOKEN_LIFETIMES[token_type]
        raw_secret = generate_token_secret()
        self.store.replace_token(
            user.id,
            token_type,
            hash_token_secret(raw_secret),
            expiration_time,
        )
        logger.info(
            "Single-use token generated",
            extra={"user_id": user.id, "token_type": token_type.value},
        )
        return GeneratedToken(
            link=build_link(self.settings.CLIENT_URL, token_type, raw_secret, user.id),
            user=user,
            type=token_type,
            expiration_time=expiration_time,
        )

    def redeem(
        self,
        user_id: int,
        token_type: TokenType,
        presented_secret: str,
        now: datetime | None = None,
    ) -> None:
        """
        Consume the user's token of `token_type` if `presented_secret` matches.

        Raises NotFoundError on a missing token or mismatch, TokenExpiredError if the
        token is past its expiration. The caller applies the side effect (activation,
        password change) only after this returns.
        """
        token = self.store.find_token(user_id, token_type)
        if token is None or not verify_token_secret(presented_secret, token.token_hash):
            raise NotFoundError(INVALID_TOKEN_MESSAGE)
        token_id = token.id
        now = now or datetime.now(UTC)
        if _as_utc(token.expiration_time) <= now:
            self.store.delete_token(token_id)
            raise TokenExpiredError(INVALID_TOKEN_MESSAGE)
        if not self.store.delete_token(token_id):
            # Another redemption of the same secret won the race.
            raise NotFoundError(INVALID_TOKEN_MESSAGE)
        logger.info(
            "Single-use token redeemed",
            extra={"user_id": user_id, "token_type": token_type.value},
        )

    def purge_expired(self, now: datetime | None = None) -> int:
        """Delete every token whose expiration time has passed. Returns rows deleted."""
        return self.store.purge_expired_tokens(now or datetime.now(UTC))
