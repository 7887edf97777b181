"""Garbage collection of expired single-use tokens."""

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from workhub.services.credential_store import CredentialStore
from workhub.services.single_use_tokens import SingleUseTokenManager

if TYPE_CHECKING:
    from workhub.core.config import Settings

logger = logging.getLogger(__name__)


def run_token_cleanup(
    session: Session,
    settings: "Settings",
    now: datetime | None = None,
) -> int:
    """
    Delete verification/reset tokens whose expiration time has passed.

    Returns the number of rows deleted. Idempotent: safe to run repeatedly.
    """
    if not settings.TOKEN_CLEANUP_ENABLED:
        logger.info("Token cleanup is disabled (TOKEN_CLEANUP_ENABLED=false); skipping.")
        return 0

    now = now or datetime.now(UTC)
    manager = SingleUseTokenManager(CredentialStore(session), settings)
    deleted_count = manager.purge_expired(now)

    if deleted_count > 0:
        logger.info(
            "Token cleanup run: cutoff=%s, tokens_deleted=%s",
            now.isoformat(),
            deleted_count,
        )
    return deleted_count
