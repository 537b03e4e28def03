"""ORM model for dynamic platform configuration (key -> JSON value)."""

from sqlalchemy import Column, DateTime, Integer, String, Text, func

from rolodex.models.base import Base


class PlatformConfig(Base):
    """One configuration entry; config_value holds JSON text (e.g. a list of usernames)."""

    __tablename__ = "platform_configs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    config_key = Column(String(255), nullable=False, unique=True, index=True)
    config_value = Column(Text, nullable=False, default="")
    description = Column(String(1024), nullable=False, default="")
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
