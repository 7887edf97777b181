"""Tests for the create_user command."""

import unittest
from unittest.mock import patch

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from workhub.models import Base, User, UserRole
from workhub.scripts import create_user


class TestCreateUser(unittest.TestCase):
    def setUp(self) -> None:
        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(engine)
        self.db = sessionmaker(bind=engine)()
        self.addCleanup(self.db.close)

        for target, value in (
            ("workhub.scripts.create_user.SessionLocal", lambda: self.db),
            ("workhub.core.security.BCRYPT_ROUNDS", 4),
        ):
            p = patch(target, value)
            p.start()
            self.addCleanup(p.stop)

    def test_creates_active_admin(self) -> None:
        code = create_user.main(["root@example.com", "root", "correct-horse", "ADMIN", "--active"])
        self.assertEqual(code, 0)
        user = self.db.query(User).one()
        self.assertEqual(user.role, UserRole.ADMIN)
        self.assertTrue(user.is_active)

    def test_defaults_to_inactive_user(self) -> None:
        self.assertEqual(create_user.main(["ada@example.com", "ada", "correct-horse"]), 0)
        user = self.db.query(User).one()
        self.assertEqual(user.role, UserRole.USER)
        self.assertFalse(user.is_active)

    def test_duplicate_email_fails(self) -> None:
        create_user.main(["ada@example.com", "ada", "correct-horse"])
        self.assertEqual(create_user.main(["ada@example.com", "ada", "correct-horse"]), 1)
        self.assertEqual(self.db.query(User).count(), 1)

    def test_short_password_fails(self) -> None:
        self.assertEqual(create_user.main(["ada@example.com", "ada", "short"]), 1)
        self.assertEqual(self.db.query(User).count(), 0)
