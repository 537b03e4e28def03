"""Role snapshot: immutable username -> role mapping, rebuilt from the accounts table and swapped atomically."""

import logging
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType

from rolodex.models import AccountRecord
from rolodex.schemas.account import AccountRole
from rolodex.services.account_store import AccountStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoleSnapshot:
    """Complete username -> role mapping as of one refresh. Never mutated after construction."""

    roles: Mapping[str, AccountRole]
    version: int
    loaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def role_of(self, username: str) -> AccountRole:
        """Mapped role; unknown usernames get least privilege (NORMAL)."""
        return self.roles.get(username, AccountRole.NORMAL)

    def usernames_with_role(self, *roles: AccountRole) -> list[str]:
        wanted = set(roles)
        return [username for username, role in self.roles.items() if role in wanted]

    def __len__(self) -> int:
        return len(self.roles)


# Served when the first synchronous load fails; never published.
EMPTY_ROLE_SNAPSHOT = RoleSnapshot(roles=MappingProxyType({}), version=0)


def build_role_snapshot(records: Iterable[AccountRecord] | None, version: int) -> RoleSnapshot:
    """Build the full mapping before anything is published. A None record list is an empty store."""
    roles: dict[str, AccountRole] = {}
    for record in records or ():
        roles[record.username] = AccountRole.parse(record.role)
    return RoleSnapshot(roles=MappingProxyType(roles), version=version)


class RoleSnapshotCache:
    """
    Holds the published RoleSnapshot.

    Readers take the current reference without locking. Rebuilds (scheduled or
    first-use) are serialized by a writer lock and published by a single
    attribute assignment, so readers see either the old or the new snapshot.
    A failed rebuild keeps the previous snapshot.
    """

    def __init__(self, store: AccountStore) -> None:
        self._store = store
        self._snapshot: RoleSnapshot | None = None
        self._version = 0
        self._refresh_lock = threading.Lock()

    @property
    def current(self) -> RoleSnapshot | None:
        """Published snapshot, or None if no refresh has succeeded yet."""
        return self._snapshot

    def refresh(self) -> bool:
        """Rebuild from the store and publish. Returns False (previous snapshot kept) on failure."""
        with self._refresh_lock:
            return self._refresh_locked()

    def _refresh_locked(self) -> bool:
        try:
            records = self._store.list_all()
            snapshot = build_role_snapshot(records, version=self._version + 1)
        except Exception:
            logger.exception(
                "Role snapshot refresh failed; keeping version %s.",
                self._snapshot.version if self._snapshot else None,
            )
            return False
        self._version = snapshot.version
        self._snapshot = snapshot
        logger.debug(
            "Role snapshot published",
            extra={"snapshot_version": snapshot.version, "account_count": len(snapshot)},
        )
        return True

    def get(self) -> RoleSnapshot:
        """
        Published snapshot, loading it synchronously on first use.

        Concurrent first callers wait for the one in-flight load. If that load
        fails an empty snapshot is returned (everyone NORMAL) and the next call
        retries.
        """
        snapshot = self._snapshot
        if snapshot is not None:
            return snapshot
        with self._refresh_lock:
            if self._snapshot is None:
                self._refresh_locked()
            snapshot = self._snapshot
        return snapshot if snapshot is not None else EMPTY_ROLE_SNAPSHOT
