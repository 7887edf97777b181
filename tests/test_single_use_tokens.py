"""Tests for workhub.services.single_use_tokens against an in-memory SQLite database."""

import unittest
from datetime import UTC, datetime, timedelta
from urllib.parse import parse_qs, urlparse

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from workhub.core.config import Settings
from workhub.core.errors import NotFoundError, TokenExpiredError
from workhub.core.security import hash_token_secret
from workhub.models import Base, SingleUseToken, TokenType
from workhub.services.credential_store import CredentialStore
from workhub.services.single_use_tokens import SingleUseTokenManager


def _settings() -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        CLIENT_URL="https://app.example.com",
        ACCESS_TOKEN_SECRET="access-secret-for-tests",
        REFRESH_TOKEN_SECRET="refresh-secret-for-tests",
    )


def _make_session() -> Session:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autoflush=False)()


def _secret_from_link(link: str) -> tuple[str, int]:
    query = parse_qs(urlparse(link).query)
    return query["token"][0], int(query["id"][0])


class TokenManagerTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db = _make_session()
        self.addCleanup(self.db.close)
        self.store = CredentialStore(self.db)
        self.manager = SingleUseTokenManager(self.store, _settings())
        self.user = self.store.create("ada@example.com", "ada", "not-a-real-hash")

    def _token_rows(self) -> list[SingleUseToken]:
        return self.db.query(SingleUseToken).all()


class TestGenerate(TokenManagerTestCase):
    def test_unknown_email_raises_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            self.manager.generate("nobody@example.com", TokenType.EMAIL_VERIFICATION)

    def test_link_embeds_raw_secret_and_user_id(self) -> None:
        generated = self.manager.generate("ada@example.com", TokenType.EMAIL_VERIFICATION)
        self.assertTrue(
            generated.link.startswith("https://app.example.com/emailVerification?token=")
        )
        secret, user_id = _secret_from_link(generated.link)
        self.assertEqual(user_id, self.user.id)
        self.assertEqual(len(secret), 64)

    def test_reset_link_path(self) -> None:
        generated = self.manager.generate("ada@example.com", TokenType.RESET_PASSWORD)
        self.assertIn("/resetPassword?token=", generated.link)

    def test_only_hash_is_stored(self) -> None:
        generated = self.manager.generate("ada@example.com", TokenType.EMAIL_VERIFICATION)
        secret, _ = _secret_from_link(generated.link)
        rows = self._token_rows()
        self.assertEqual(len(rows), 1)
        self.assertNotEqual(rows[0].token_hash, secret)
        self.assertEqual(rows[0].token_hash, hash_token_secret(secret))

    def test_expiration_depends_on_type(self) -> None:
        now = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
        reset = self.manager.generate("ada@example.com", TokenType.RESET_PASSWORD, now=now)
        verify = self.manager.generate("ada@example.com", TokenType.EMAIL_VERIFICATION, now=now)
        self.assertEqual(reset.expiration_time, now + timedelta(minutes=15))
        self.assertEqual(verify.expiration_time, now + timedelta(hours=24))

    def test_regenerating_same_type_keeps_one_row_and_invalidates_old_secret(self) -> None:
        first = self.manager.generate("ada@example.com", TokenType.RESET_PASSWORD)
        second = self.manager.generate("ada@example.com", TokenType.RESET_PASSWORD)
        self.assertEqual(len(self._token_rows()), 1)
        old_secret, _ = _secret_from_link(first.link)
        new_secret, _ = _secret_from_link(second.link)
        self.assertNotEqual(old_secret, new_secret)
        with self.assertRaises(NotFoundError):
            self.manager.redeem(self.user.id, TokenType.RESET_PASSWORD, old_secret)
        self.manager.redeem(self.user.id, TokenType.RESET_PASSWORD, new_secret)

    def test_different_types_coexist(self) -> None:
        self.manager.generate("ada@example.com", TokenType.RESET_PASSWORD)
        self.manager.generate("ada@example.com", TokenType.EMAIL_VERIFICATION)
        types = {row.type for row in self._token_rows()}
        self.assertEqual(types, {TokenType.RESET_PASSWORD, TokenType.EMAIL_VERIFICATION})


class TestRedeem(TokenManagerTestCase):
    def test_redeem_deletes_token(self) -> None:
        generated = self.manager.generate("ada@example.com", TokenType.EMAIL_VERIFICATION)
        secret, _ = _secret_from_link(generated.link)
        self.manager.redeem(self.user.id, TokenType.EMAIL_VERIFICATION, secret)
        self.assertEqual(self._token_rows(), [])

    def test_second_redemption_fails_with_not_found(self) -> None:
        generated = self.manager.generate("ada@example.com", TokenType.EMAIL_VERIFICATION)
        secret, _ = _secret_from_link(generated.link)
        self.manager.redeem(self.user.id, TokenType.EMAIL_VERIFICATION, secret)
        with self.assertRaises(NotFoundError):
            self.manager.redeem(self.user.id, TokenType.EMAIL_VERIFICATION, secret)

    def test_wrong_secret_fails_and_keeps_token(self) -> None:
        self.manager.generate("ada@example.com", TokenType.EMAIL_VERIFICATION)
        with self.assertRaises(NotFoundError):
            self.manager.redeem(self.user.id, TokenType.EMAIL_VERIFICATION, "0" * 64)
        self.assertEqual(len(self._token_rows()), 1)

    def test_secret_of_other_type_is_rejected(self) -> None:
        generated = self.manager.generate("ada@example.com", TokenType.RESET_PASSWORD)
        secret, _ = _secret_from_link(generated.link)
        with self.assertRaises(NotFoundError):
            self.manager.redeem(self.user.id, TokenType.EMAIL_VERIFICATION, secret)

    def test_expired_token_fails_even_with_matching_secret(self) -> None:
        issued = datetime.now(UTC) - timedelta(minutes=16)
        generated = self.manager.generate(
            "ada@example.com", TokenType.RESET_PASSWORD, now=issued
        )
        secret, _ = _secret_from_link(generated.link)
        with self.assertRaises(TokenExpiredError):
            self.manager.redeem(self.user.id, TokenType.RESET_PASSWORD, secret)
        self.assertEqual(self._token_rows(), [])

    def test_expired_error_is_not_found_class(self) -> None:
        self.assertTrue(issubclass(TokenExpiredError, NotFoundError))

    def test_unknown_user_fails_with_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            self.manager.redeem(9999, TokenType.EMAIL_VERIFICATION, "0" * 64)


class TestPurgeExpired(TokenManagerTestCase):
    def test_only_expired_rows_are_deleted(self) -> None:
        other = self.store.create("bob@example.com", "bob", "not-a-real-hash")
        old = datetime.now(UTC) - timedelta(days=2)
        self.manager.generate("ada@example.com", TokenType.EMAIL_VERIFICATION, now=old)
        self.manager.generate("bob@example.com", TokenType.EMAIL_VERIFICATION)
        deleted = self.manager.purge_expired()
        self.assertEqual(deleted, 1)
        remaining = self._token_rows()
        self.assertEqual([row.user_id for row in remaining], [other.id])
