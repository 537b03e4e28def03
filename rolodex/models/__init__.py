"""SQLAlchemy ORM models."""

from rolodex.models.base import Base
from rolodex.models.account import AccountRecord
from rolodex.models.config import PlatformConfig

__all__ = ["AccountRecord", "Base", "PlatformConfig"]
