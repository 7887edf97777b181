"""Password hashing, JWT creation/verification and single-use token secrets."""

import hashlib
import hmac
import secrets
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any, Literal

import bcrypt
import jwt

if TYPE_CHECKING:
    from workhub.core.config import Settings

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128

# 32 random bytes -> 64 hex chars (256-bit secret).
TOKEN_SECRET_BYTES = 32

TokenKind = Literal["access", "refresh"]


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds or BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def _signing_params(settings: "Settings", kind: TokenKind) -> tuple[str, int]:
    if kind == "access":
        return (
            settings.ACCESS_TOKEN_SECRET.get_secret_value(),
            settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        )
    return (
        settings.REFRESH_TOKEN_SECRET.get_secret_value(),
        settings.REFRESH_TOKEN_EXPIRE_MINUTES,
    )


def create_token(
    settings: "Settings",
    kind: TokenKind,
    sub: str | int,
    email: str,
    now: datetime | None = None,
) -> str:
    """Create a signed JWT with sub (user id), email, type, iat and exp."""
    now = now or datetime.now(UTC)
    secret, expire_minutes = _signing_params(settings, kind)
    payload: dict[str, Any] = {
        "sub": str(sub),
        "email": email,
        "type": kind,
        "exp": now + timedelta(minutes=expire_minutes),
        "iat": now,
        # Unique id so two tokens minted within the same second still differ.
        "jti": secrets.token_hex(8),
    }
    return jwt.encode(payload, secret, algorithm=settings.JWT_ALGORITHM)


def decode_token(settings: "Settings", kind: TokenKind, token: str) -> dict[str, Any]:
    """
    Decode and validate a JWT of the given kind; return payload.
    Raises jwt.PyJWTError on invalid signature, expiry or wrong token type.
    """
    secret, _ = _signing_params(settings, kind)
    payload = jwt.decode(token, secret, algorithms=[settings.JWT_ALGORITHM])
    if payload.get("type") != kind:
        raise jwt.InvalidTokenError(f"Expected a {kind} token")
    return payload


def generate_token_secret() -> str:
    """Return a new random single-use secret (hex)."""
    return secrets.token_hex(TOKEN_SECRET_BYTES)


def hash_token_secret(raw_secret: str) -> str:
    """One-way hash of a single-use secret; only this value is persisted."""
    return hashlib.sha256(raw_secret.encode("utf-8")).hexdigest()


def verify_token_secret(raw_secret: str, stored_hash: str) -> bool:
    """Constant-time comparison of a presented secret against its stored hash."""
    return hmac.compare_digest(hash_token_secret(raw_secret), stored_hash)
