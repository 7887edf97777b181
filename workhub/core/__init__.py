"""Core app configuration, database and security helpers."""

from workhub.core.config import get_settings, settings
from workhub.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
