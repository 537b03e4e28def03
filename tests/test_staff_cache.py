"""Unit tests for rolodex.services.staff_cache: lazy fill, sliding and absolute expiry, size bound."""

import unittest
from unittest.mock import MagicMock

from rolodex.schemas.account import DirectoryEntry
from rolodex.services.staff_cache import StaffDirectoryCache
from rolodex.services.staff_directory import StaffDirectoryError


class FakeTimer:
    """Manually advanced clock (seconds)."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _entry(username: str = "alice", display_name: str = "Alice Liddell") -> DirectoryEntry:
    return DirectoryEntry(username=username, display_name=display_name, department="Platform")


def _directory(entries: dict[str, DirectoryEntry] | None = None) -> MagicMock:
    entries = entries if entries is not None else {"alice": _entry()}
    directory = MagicMock()
    directory.lookup_by_username.side_effect = lambda u: entries.get(u)
    return directory


class TestLookupFill(unittest.TestCase):
    """A found entry is cached; a directory miss is not cached."""

    def test_second_lookup_does_not_query_directory(self) -> None:
        directory = _directory()
        cache = StaffDirectoryCache(directory, timer=FakeTimer())
        first = cache.lookup("alice")
        second = cache.lookup("alice")
        self.assertEqual(first, _entry())
        self.assertEqual(second, _entry())
        directory.lookup_by_username.assert_called_once_with("alice")

    def test_miss_returns_none_and_requeries(self) -> None:
        directory = _directory({})
        cache = StaffDirectoryCache(directory, timer=FakeTimer())
        self.assertIsNone(cache.lookup("ghost"))
        self.assertIsNone(cache.lookup("ghost"))
        self.assertEqual(directory.lookup_by_username.call_count, 2)
        self.assertEqual(len(cache), 0)

    def test_directory_failure_resolves_to_none(self) -> None:
        directory = MagicMock()
        directory.lookup_by_username.side_effect = StaffDirectoryError("down")
        cache = StaffDirectoryCache(directory, timer=FakeTimer())
        with self.assertLogs("rolodex.services.staff_cache", level="WARNING"):
            self.assertIsNone(cache.lookup("alice"))

    def test_get_if_present_never_queries(self) -> None:
        directory = _directory()
        cache = StaffDirectoryCache(directory, timer=FakeTimer())
        self.assertIsNone(cache.get_if_present("alice"))
        directory.lookup_by_username.assert_not_called()


class TestExpiry(unittest.TestCase):
    """Entries expire after the access window or the write window, whichever comes first."""

    def test_requery_after_access_expiry(self) -> None:
        timer = FakeTimer()
        directory = _directory()
        cache = StaffDirectoryCache(
            directory, expire_after_access=60, expire_after_write=3600, timer=timer
        )
        cache.lookup("alice")
        timer.advance(61)
        cache.lookup("alice")
        self.assertEqual(directory.lookup_by_username.call_count, 2)

    def test_access_slides_expiry(self) -> None:
        timer = FakeTimer()
        directory = _directory()
        cache = StaffDirectoryCache(
            directory, expire_after_access=60, expire_after_write=3600, timer=timer
        )
        cache.lookup("alice")
        for _ in range(5):
            timer.advance(50)
            cache.lookup("alice")
        directory.lookup_by_username.assert_called_once()

    def test_write_expiry_caps_sliding_expiry(self) -> None:
        timer = FakeTimer()
        directory = _directory()
        cache = StaffDirectoryCache(
            directory, expire_after_access=60, expire_after_write=120, timer=timer
        )
        cache.lookup("alice")
        timer.advance(50)
        cache.lookup("alice")
        timer.advance(50)
        cache.lookup("alice")
        directory.lookup_by_username.assert_called_once()
        timer.advance(50)  # 150s since write, 50s since last access
        cache.lookup("alice")
        self.assertEqual(directory.lookup_by_username.call_count, 2)


class TestSizeBound(unittest.TestCase):
    """Beyond max_size the least recently used entry is evicted."""

    def test_evicts_least_recently_used(self) -> None:
        entries = {u: _entry(u, u.title()) for u in ("a", "b", "c")}
        directory = _directory(entries)
        cache = StaffDirectoryCache(directory, max_size=2, timer=FakeTimer())
        cache.lookup("a")
        cache.lookup("b")
        cache.lookup("a")  # b is now least recently used
        cache.lookup("c")
        self.assertIsNotNone(cache.get_if_present("a"))
        self.assertIsNone(cache.get_if_present("b"))
        self.assertIsNotNone(cache.get_if_present("c"))
        self.assertEqual(len(cache), 2)


if __name__ == "__main__":
    unittest.main()
