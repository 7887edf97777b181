"""Issue access/refresh JWT pairs and persist the latest refresh token per user."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from workhub.core.security import create_token, decode_token
from workhub.services.credential_store import CredentialStore

if TYPE_CHECKING:
    from workhub.core.config import Settings


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class TokenIssuer:
    """
    Signs two independently keyed bearer tokens carrying {sub, email}.

    Lifetimes come from ACCESS_TOKEN_EXPIRE_MINUTES / REFRESH_TOKEN_EXPIRE_MINUTES
    (both 15 by default).
    """

    def __init__(self, store: CredentialStore, settings: "Settings") -> None:
        self.store = store
        self.settings = settings

    def issue(self, user_id: int, email: str) -> TokenPair:
        access_token = create_token(self.settings, "access", user_id, email)
        refresh_token = create_token(self.settings, "refresh", user_id, email)
        self.store.set_refresh_token(user_id, refresh_token)
        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    def decode_access(self, token: str) -> dict[str, Any]:
        """Signature and expiry check only; the persisted refresh token is not consulted."""
        return decode_token(self.settings, "access", token)

    def decode_refresh(self, token: str) -> dict[str, Any]:
        return decode_token(self.settings, "refresh", token)
