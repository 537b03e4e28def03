"""Core app configuration, database and security helpers."""

from rolodex.core.config import get_settings, settings
from rolodex.core.database import SessionLocal, get_db

__all__ = ["get_settings", "settings", "SessionLocal", "get_db"]
