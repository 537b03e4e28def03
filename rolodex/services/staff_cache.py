"""In-process cache of staff directory entries with size bound, sliding expiry and absolute expiry."""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from cachetools import TTLCache

from rolodex.schemas.account import DirectoryEntry
from rolodex.services.staff_directory import StaffDirectory, StaffDirectoryError

logger = logging.getLogger(__name__)

@dataclass
class _Slot:
    entry: DirectoryEntry
    accessed_at: float

class StaffDirectoryCache:
    """
    username -> DirectoryEntry, filled lazily from the directory on miss.

    TTLCache provides the LRU size bound and the expiry since write; the
    sliding expiry since last access is checked on read. Directory misses
    and directory failures are not cached and resolve to None. The lock is
    never held across a directory call; concurrent misses on the same key
    may both query the directory, and the last write wins.
    """

    def __init__(
        self,
        directory: StaffDirectory,
        max_size: int = 1000,
        expire_after_access: float = 600 * 60,
        expire_after_write: float = 600 * 60,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._directory = directory
        self._expire_after_access = expire_after_access
        self._timer = timer
        self._cache: TTLCache[str, _Slot] = TTLCache(
            maxsize=max_size, ttl=expire_after_write, timer=timer
        )
        self._lock = threading.Lock()

    def get_if_present(self, username: str) -> DirectoryEntry | None:
        """Cached entry for username, or None; never queries the directory."""
        with self._lock:
            slot = self._cache.get(username)
            if slot is None:
                return None
            now = self._timer()
            if now - slot.accessed_at >= self._expire_after_access:
                del self._cache[username]
                return None
            slot.accessed_at = now
            return slot.entry

    def put(self, username: str, entry: DirectoryEntry) -> None:
        with self._lock:
            self._cache[username] = _Slot(entry=entry, accessed_at=self._timer())

    def lookup(self, username: str) -> DirectoryEntry | None:
        """Cached entry, else query the directory and cache a found entry. Never raises on directory failure."""
        entry = self.get_if_present(username)
        if entry is not None:
            return entry
        try:
            entry = self._directory.lookup_by_username(username)
        except StaffDirectoryError as e:
            logger.warning("Staff directory lookup for %s failed: %s", username, e.message)
            return None
        if entry is None:
            return None
        self.put(username, entry)
        return entry

    def __len__(self) -> int:
        with self._lock:
            self._cache.expire()
            return len(self._cache)
