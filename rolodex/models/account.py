"""ORM model for persisted accounts (credentials and role)."""

from sqlalchemy import Column, DateTime, Integer, String, func

from rolodex.models.base import Base


class AccountRecord(Base):
    """
    Account row owned by the backing store.

    role: one of AccountRole values ('normal', 'rd', 'op'); unknown values
    resolve to 'normal' when the role snapshot is built.
    """

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="normal")
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

    def __repr__(self) -> str:
        # password_hash omitted
        return f"AccountRecord(username={self.username!r}, role={self.role!r})"
