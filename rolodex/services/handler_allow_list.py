"""Handler allow-list: usernames granted order-handler privilege by configuration, regardless of role."""

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from rolodex.services.config_store import ConfigStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HandlerAllowList:
    """Ordered, immutable list of allow-listed usernames as of one refresh."""

    usernames: tuple[str, ...]
    version: int
    loaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    _members: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_members", frozenset(self.usernames))

    @classmethod
    def from_usernames(cls, usernames: Iterable[str] | None, version: int) -> "HandlerAllowList":
        """None (not configured) and an empty list both give an empty allow-list."""
        return cls(usernames=tuple(usernames or ()), version=version)

    def __contains__(self, username: object) -> bool:
        return username in self._members

    def __iter__(self):
        return iter(self.usernames)

    def __len__(self) -> int:
        return len(self.usernames)

    @property
    def is_empty(self) -> bool:
        return not self.usernames


EMPTY_HANDLER_ALLOW_LIST = HandlerAllowList(usernames=(), version=0)


class HandlerAllowListCache:
    """
    Holds the published HandlerAllowList; same single-writer, lock-free-read
    lifecycle as the role snapshot, refreshed independently of it.
    """

    def __init__(self, config_store: ConfigStore, config_key: str) -> None:
        self._config_store = config_store
        self._config_key = config_key
        self._allow_list: HandlerAllowList | None = None
        self._version = 0
        self._refresh_lock = threading.Lock()

    @property
    def config_key(self) -> str:
        return self._config_key

    @property
    def current(self) -> HandlerAllowList | None:
        return self._allow_list

    def refresh(self) -> bool:
        """Re-read the configured usernames and publish. Returns False (previous list kept) on failure."""
        with self._refresh_lock:
            return self._refresh_locked()

    def _refresh_locked(self) -> bool:
        try:
            usernames = self._config_store.get_string_array(self._config_key)
            allow_list = HandlerAllowList.from_usernames(usernames, version=self._version + 1)
        except Exception:
            logger.exception("Handler allow-list refresh failed; keeping previous list.")
            return False
        self._version = allow_list.version
        self._allow_list = allow_list
        logger.debug(
            "Handler allow-list published",
            extra={"allow_list_version": allow_list.version, "handler_count": len(allow_list)},
        )
        return True

    def get(self) -> HandlerAllowList:
        """Published allow-list, loading it synchronously on first use; empty if that load fails."""
        allow_list = self._allow_list
        if allow_list is not None:
            return allow_list
        with self._refresh_lock:
            if self._allow_list is None:
                self._refresh_locked()
            allow_list = self._allow_list
        return allow_list if allow_list is not None else EMPTY_HANDLER_ALLOW_LIST
