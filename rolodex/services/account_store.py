"""Backing store for account records: thin SQLAlchemy data access returning affected-row counts."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from rolodex.models import AccountRecord


class AccountStoreError(Exception):
    """Raised when the account table cannot be read or written."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class DuplicateKeyError(AccountStoreError):
    """Raised when an insert violates the unique username constraint."""


class AccountStore:
    """
    Account persistence through a session factory.

    Each call opens its own short-lived session so the store can be shared by
    request threads and the background refresh thread.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def insert(self, record: AccountRecord) -> int:
        """Insert one account. Raises DuplicateKeyError if the username exists."""
        with self._session_factory() as session:
            try:
                session.add(record)
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise DuplicateKeyError(
                    f"Account {record.username!r} already exists.", cause=e
                ) from e
            except SQLAlchemyError as e:
                session.rollback()
                raise AccountStoreError("Insert into accounts failed.", cause=e) from e
        return 1

    def delete_by_username(self, username: str) -> int:
        with self._session_factory() as session:
            try:
                deleted = (
                    session.query(AccountRecord)
                    .filter(AccountRecord.username == username)
                    .delete(synchronize_session=False)
                )
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise AccountStoreError("Delete from accounts failed.", cause=e) from e
        return deleted

    def update_by_username(self, record: AccountRecord) -> int:
        """Overwrite password_hash and role of the row matching record.username."""
        with self._session_factory() as session:
            try:
                updated = (
                    session.query(AccountRecord)
                    .filter(AccountRecord.username == record.username)
                    .update(
                        {
                            AccountRecord.password_hash: record.password_hash,
                            AccountRecord.role: record.role,
                        },
                        synchronize_session=False,
                    )
                )
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise AccountStoreError("Update of accounts failed.", cause=e) from e
        return updated

    def get_by_username(self, username: str) -> AccountRecord | None:
        with self._session_factory() as session:
            try:
                return session.scalars(
                    select(AccountRecord).where(AccountRecord.username == username)
                ).first()
            except SQLAlchemyError as e:
                raise AccountStoreError("Read from accounts failed.", cause=e) from e

    def list_all(self) -> list[AccountRecord]:
        with self._session_factory() as session:
            try:
                return list(
                    session.scalars(select(AccountRecord).order_by(AccountRecord.id))
                )
            except SQLAlchemyError as e:
                raise AccountStoreError("Read from accounts failed.", cause=e) from e

    def search_by_prefix(self, prefix: str, limit: int = 50) -> list[AccountRecord]:
        """Accounts whose username starts with prefix (LIKE wildcards in prefix are escaped)."""
        escaped = prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        with self._session_factory() as session:
            try:
                return list(
                    session.scalars(
                        select(AccountRecord)
                        .where(AccountRecord.username.like(f"{escaped}%", escape="\\"))
                        .order_by(AccountRecord.username)
                        .limit(limit)
                    )
                )
            except SQLAlchemyError as e:
                raise AccountStoreError("Read from accounts failed.", cause=e) from e
