"""Dynamic configuration source backed by the platform_configs table."""

import json
import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from rolodex.models import PlatformConfig

logger = logging.getLogger(__name__)


class ConfigStoreError(Exception):
    """Raised when the configuration table cannot be read."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class ConfigStore:
    """Reads JSON-valued configuration entries by key."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def get_value(self, key: str) -> str | None:
        """Raw config_value for key, or None if the key is not configured."""
        with self._session_factory() as session:
            try:
                return session.scalars(
                    select(PlatformConfig.config_value).where(
                        PlatformConfig.config_key == key
                    )
                ).first()
            except SQLAlchemyError as e:
                raise ConfigStoreError(f"Reading config {key!r} failed.", cause=e) from e

    def get_string_array(self, key: str) -> list[str] | None:
        """
        Parse the value for key as a JSON array of strings.

        Returns None when the key is absent or the value is not a JSON array of
        strings (logged). Raises ConfigStoreError if the table is unreachable.
        """
        raw = self.get_value(key)
        if raw is None or not raw.strip():
            return None
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Config %s is not valid JSON; ignoring value.", key)
            return None
        if not isinstance(parsed, list) or not all(isinstance(x, str) for x in parsed):
            logger.warning("Config %s is not a JSON array of strings; ignoring value.", key)
            return None
        return parsed

    def set_value(self, key: str, value: str, description: str = "") -> None:
        """Insert or replace a config entry."""
        with self._session_factory() as session:
            try:
                entry = session.scalars(
                    select(PlatformConfig).where(PlatformConfig.config_key == key)
                ).first()
                if entry is None:
                    session.add(
                        PlatformConfig(
                            config_key=key,
                            config_value=value,
                            description=description,
                        )
                    )
                else:
                    entry.config_value = value
                    if description:
                        entry.description = description
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise ConfigStoreError(f"Writing config {key!r} failed.", cause=e) from e
