"""
Pytest configuration. Tests run against in-memory SQLite and never reach a
real database, mail server or broker.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("EMAIL_DELIVERY", "log")
os.environ.setdefault("APP_ENV", "dev")
