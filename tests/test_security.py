"""Unit tests for workhub.core.security and workhub.core.access."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import jwt

from workhub.core.access import is_role_allowed
from workhub.core.config import Settings
from workhub.core.security import (
    create_token,
    decode_token,
    generate_token_secret,
    hash_password,
    hash_token_secret,
    verify_password,
    verify_token_secret,
)
from workhub.models import UserRole


def _settings(**overrides: object) -> Settings:
    values = {
        "DATABASE_URL": "sqlite://",
        "ACCESS_TOKEN_SECRET": "access-secret-for-tests",
        "REFRESH_TOKEN_SECRET": "refresh-secret-for-tests",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestPasswordHashing(unittest.TestCase):
    """bcrypt hash/verify round trip and rejection of wrong or malformed input."""

    def setUp(self) -> None:
        patcher = patch("workhub.core.security.BCRYPT_ROUNDS", 4)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_hash_is_salted_and_verifies(self) -> None:
        first = hash_password("correct horse battery")
        second = hash_password("correct horse battery")
        self.assertNotEqual(first, second)
        self.assertTrue(verify_password("correct horse battery", first))
        self.assertTrue(verify_password("correct horse battery", second))

    def test_wrong_password_does_not_verify(self) -> None:
        hashed = hash_password("correct horse battery")
        self.assertFalse(verify_password("wrong password", hashed))

    def test_malformed_hash_returns_false(self) -> None:
        self.assertFalse(verify_password("anything", "not-a-bcrypt-hash"))


class TestJwt(unittest.TestCase):
    """Access and refresh tokens are signed with different keys and typed."""

    def setUp(self) -> None:
        self.settings = _settings()

    def test_access_token_round_trip(self) -> None:
        token = create_token(self.settings, "access", 7, "a@example.com")
        payload = decode_token(self.settings, "access", token)
        self.assertEqual(payload["sub"], "7")
        self.assertEqual(payload["email"], "a@example.com")
        self.assertEqual(payload["type"], "access")

    def test_refresh_token_not_accepted_as_access(self) -> None:
        token = create_token(self.settings, "refresh", 7, "a@example.com")
        with self.assertRaises(jwt.PyJWTError):
            decode_token(self.settings, "access", token)

    def test_access_token_not_accepted_as_refresh(self) -> None:
        token = create_token(self.settings, "access", 7, "a@example.com")
        with self.assertRaises(jwt.PyJWTError):
            decode_token(self.settings, "refresh", token)

    def test_expired_token_rejected(self) -> None:
        issued = datetime.now(UTC) - timedelta(minutes=30)
        token = create_token(self.settings, "access", 7, "a@example.com", now=issued)
        with self.assertRaises(jwt.ExpiredSignatureError):
            decode_token(self.settings, "access", token)

    def test_token_from_other_secret_rejected(self) -> None:
        other = _settings(
            ACCESS_TOKEN_SECRET="another-access-secret",
            REFRESH_TOKEN_SECRET="another-refresh-secret",
        )
        token = create_token(other, "access", 7, "a@example.com")
        with self.assertRaises(jwt.InvalidSignatureError):
            decode_token(self.settings, "access", token)

    def test_expiry_uses_configured_lifetime(self) -> None:
        settings = _settings(ACCESS_TOKEN_EXPIRE_MINUTES=5)
        now = datetime.now(UTC).replace(microsecond=0)
        token = create_token(settings, "access", 1, "a@example.com", now=now)
        payload = jwt.decode(token, options={"verify_signature": False})
        self.assertEqual(payload["exp"] - payload["iat"], 5 * 60)


class TestSingleUseSecrets(unittest.TestCase):
    def test_secret_is_256_bit_hex(self) -> None:
        secret = generate_token_secret()
        self.assertEqual(len(secret), 64)
        int(secret, 16)

    def test_secrets_are_unique(self) -> None:
        self.assertNotEqual(generate_token_secret(), generate_token_secret())

    def test_hash_is_not_the_secret_and_verifies(self) -> None:
        secret = generate_token_secret()
        stored = hash_token_secret(secret)
        self.assertNotEqual(stored, secret)
        self.assertTrue(verify_token_secret(secret, stored))
        self.assertFalse(verify_token_secret(generate_token_secret(), stored))


class TestIsRoleAllowed(unittest.TestCase):
    """Role-in-set check used by route dependencies."""

    def test_empty_requirement_allows_anyone(self) -> None:
        self.assertTrue(is_role_allowed(set(), UserRole.USER))
        self.assertTrue(is_role_allowed(set(), None))

    def test_missing_role_denied_when_restricted(self) -> None:
        self.assertFalse(is_role_allowed({UserRole.ADMIN}, None))

    def test_role_in_set_allowed(self) -> None:
        self.assertTrue(is_role_allowed({UserRole.ADMIN, UserRole.USER}, UserRole.USER))

    def test_role_not_in_set_denied(self) -> None:
        self.assertFalse(is_role_allowed({UserRole.ADMIN}, UserRole.USER))
