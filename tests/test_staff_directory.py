"""Unit tests for rolodex.services.staff_directory: HTTP directory client and adapter selection (no network)."""

import unittest
from unittest.mock import MagicMock

import httpx
from pydantic import SecretStr

from rolodex.models import AccountRecord
from rolodex.schemas.account import DirectoryEntry
from rolodex.services.account_store import AccountStoreError
from rolodex.services.staff_directory import (
    AccountStaffDirectory,
    HttpStaffDirectory,
    StaffDirectoryError,
    build_staff_directory,
)

BASE_URL = "https://directory.example.com"


def _client(handler) -> HttpStaffDirectory:
    return HttpStaffDirectory(
        BASE_URL, timeout=5.0, token="t0ken", transport=httpx.MockTransport(handler)
    )


class TestHttpLookup(unittest.TestCase):
    """lookup_by_username maps 200 to an entry, 404 to None, other failures to StaffDirectoryError."""

    def test_found(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={"username": "alice", "displayName": "Alice Liddell", "department": "Ops"},
            )

        entry = _client(handler).lookup_by_username("alice")
        self.assertEqual(
            entry, DirectoryEntry(username="alice", display_name="Alice Liddell", department="Ops")
        )
        self.assertEqual(seen[0].url.path, "/staff/alice")
        self.assertEqual(seen[0].headers["Authorization"], "Bearer t0ken")

    def test_username_is_path_escaped(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(404)

        _client(handler).lookup_by_username("a/b")
        self.assertEqual(seen[0].url.raw_path, b"/staff/a%2Fb")

    def test_not_found_is_none(self) -> None:
        self.assertIsNone(_client(lambda r: httpx.Response(404)).lookup_by_username("ghost"))

    def test_server_error_raises(self) -> None:
        with self.assertRaises(StaffDirectoryError):
            _client(lambda r: httpx.Response(503)).lookup_by_username("alice")

    def test_invalid_json_raises(self) -> None:
        with self.assertRaises(StaffDirectoryError):
            _client(lambda r: httpx.Response(200, text="<html>")).lookup_by_username("alice")

    def test_entry_without_username_raises(self) -> None:
        with self.assertRaises(StaffDirectoryError):
            _client(lambda r: httpx.Response(200, json={"display_name": "x"})).lookup_by_username("alice")

    def test_connection_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with self.assertRaises(StaffDirectoryError) as ctx:
            _client(handler).lookup_by_username("alice")
        self.assertIsInstance(ctx.exception.cause, httpx.ConnectError)


class TestHttpSearch(unittest.TestCase):
    """search_by_prefix accepts a bare list or a {"staff": [...]} wrapper."""

    def test_bare_list(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[{"username": "alice", "display_name": "Alice"}])

        hits = _client(handler).search_by_prefix("al")
        self.assertEqual([h.username for h in hits], ["alice"])
        self.assertEqual(seen[0].url.params["prefix"], "al")

    def test_wrapped_list(self) -> None:
        body = {"staff": [{"username": "alan", "display_name": "Alan"}, {"username": "alice"}]}
        hits = _client(lambda r: httpx.Response(200, json=body)).search_by_prefix("al")
        self.assertEqual([h.display_name for h in hits], ["Alan", "alice"])

    def test_error_status_raises(self) -> None:
        with self.assertRaises(StaffDirectoryError):
            _client(lambda r: httpx.Response(500)).search_by_prefix("al")


class TestAccountStaffDirectory(unittest.TestCase):
    """The accounts-table directory uses the username as display name."""

    def test_lookup(self) -> None:
        store = MagicMock()
        store.get_by_username.return_value = AccountRecord(username="alice", password_hash="h", role="op")
        entry = AccountStaffDirectory(store).lookup_by_username("alice")
        self.assertEqual(entry, DirectoryEntry(username="alice", display_name="alice"))

    def test_lookup_missing(self) -> None:
        store = MagicMock()
        store.get_by_username.return_value = None
        self.assertIsNone(AccountStaffDirectory(store).lookup_by_username("ghost"))

    def test_store_failure_becomes_directory_error(self) -> None:
        store = MagicMock()
        store.get_by_username.side_effect = AccountStoreError("db down")
        store.search_by_prefix.side_effect = AccountStoreError("db down")
        directory = AccountStaffDirectory(store)
        with self.assertRaises(StaffDirectoryError):
            directory.lookup_by_username("alice")
        with self.assertRaises(StaffDirectoryError):
            directory.search_by_prefix("al")


class TestBuildStaffDirectory(unittest.TestCase):
    """HTTP directory when a URL is configured, else the accounts table."""

    def test_http_when_url_set(self) -> None:
        settings = MagicMock()
        settings.STAFF_DIRECTORY_URL = BASE_URL
        settings.STAFF_DIRECTORY_TOKEN = SecretStr("t0ken")
        settings.STAFF_DIRECTORY_TIMEOUT_SEC = 2.0
        directory = build_staff_directory(settings, MagicMock())
        self.assertIsInstance(directory, HttpStaffDirectory)
        directory.close()

    def test_accounts_table_when_url_unset(self) -> None:
        settings = MagicMock()
        settings.STAFF_DIRECTORY_URL = None
        self.assertIsInstance(build_staff_directory(settings, MagicMock()), AccountStaffDirectory)


if __name__ == "__main__":
    unittest.main()
