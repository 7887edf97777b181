"""Unit and integration tests for run_token_cleanup: delete-only purge of expired tokens."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from workhub.models import Base, SingleUseToken, TokenType, User
from workhub.services.token_cleanup import run_token_cleanup


class TestTokenCleanupDisabled(unittest.TestCase):
    """When TOKEN_CLEANUP_ENABLED is False, run_token_cleanup does nothing."""

    def test_returns_zero_and_does_not_query(self) -> None:
        settings = MagicMock()
        settings.TOKEN_CLEANUP_ENABLED = False
        session = MagicMock()
        self.assertEqual(run_token_cleanup(session, settings), 0)
        session.query.assert_not_called()


class TestTokenCleanupNothingExpired(unittest.TestCase):
    def test_returns_zero(self) -> None:
        settings = MagicMock()
        settings.TOKEN_CLEANUP_ENABLED = True
        session = MagicMock()
        session.query.return_value.filter.return_value.delete.return_value = 0
        self.assertEqual(run_token_cleanup(session, settings), 0)
        session.commit.assert_called_once()


class TestTokenCleanupDeletesExpired(unittest.TestCase):
    def test_returns_deleted_count(self) -> None:
        settings = MagicMock()
        settings.TOKEN_CLEANUP_ENABLED = True
        session = MagicMock()
        session.query.return_value.filter.return_value.delete.return_value = 2
        self.assertEqual(run_token_cleanup(session, settings), 2)
        session.add.assert_not_called()
        session.commit.assert_called_once()


class TestTokenCleanupIntegration(unittest.TestCase):
    """Real SQLite database: expired rows go, live rows stay."""

    def test_cleanup_against_sqlite(self) -> None:
        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(engine)
        db = sessionmaker(bind=engine)()
        self.addCleanup(db.close)

        now = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
        user = User(email="ada@example.com", username="ada", password_hash="x")
        db.add(user)
        db.flush()
        db.add_all(
            [
                SingleUseToken(
                    user_id=user.id,
                    type=TokenType.RESET_PASSWORD,
                    token_hash="a" * 64,
                    expiration_time=now - timedelta(minutes=1),
                ),
                SingleUseToken(
                    user_id=user.id,
                    type=TokenType.EMAIL_VERIFICATION,
                    token_hash="b" * 64,
                    expiration_time=now + timedelta(hours=1),
                ),
            ]
        )
        db.commit()

        settings = MagicMock()
        settings.TOKEN_CLEANUP_ENABLED = True
        self.assertEqual(run_token_cleanup(db, settings, now=now), 1)
        remaining = db.query(SingleUseToken).all()
        self.assertEqual([t.type for t in remaining], [TokenType.EMAIL_VERIFICATION])
        # Second run is a no-op.
        self.assertEqual(run_token_cleanup(db, settings, now=now), 0)
