"""Staff directory adapters: external HTTP directory, or the accounts table when none is configured."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from rolodex.schemas.account import DirectoryEntry
from rolodex.services.account_store import AccountStore, AccountStoreError

if TYPE_CHECKING:
    from rolodex.core.config import Settings

logger = logging.getLogger(__name__)


class StaffDirectoryError(Exception):
    """Raised when the directory is unreachable or returns an unusable payload."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class StaffDirectory(Protocol):
    """Directory collaborator: profile lookup by username and keyword search."""

    def lookup_by_username(self, username: str) -> DirectoryEntry | None: ...

    def search_by_prefix(self, prefix: str) -> list[DirectoryEntry]: ...


def _parse_entry(data: Any) -> DirectoryEntry:
    """Accept both snake_case and camelCase directory payloads."""
    if not isinstance(data, dict):
        raise StaffDirectoryError("Directory entry is not a JSON object.")
    try:
        return DirectoryEntry(
            username=data.get("username") or "",
            display_name=data.get("display_name") or data.get("displayName") or data.get("username") or "",
            department=data.get("department"),
        )
    except ValidationError as e:
        raise StaffDirectoryError("Directory entry does not match expected schema.", cause=e) from e


class HttpStaffDirectory:
    """
    Client for a REST staff directory.

    GET {base}/staff/{username} -> entry (404 means not found)
    GET {base}/staff?prefix=... -> list of entries
    """

    def __init__(
        self,
        base_url: str,
        timeout: float,
        token: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout),
            headers=headers,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def _get(self, path: str, params: dict[str, str] | None = None) -> httpx.Response:
        try:
            return self._client.get(path, params=params)
        except httpx.TimeoutException as e:
            raise StaffDirectoryError("Staff directory request timed out.", cause=e) from e
        except httpx.HTTPError as e:
            raise StaffDirectoryError("Staff directory is unreachable.", cause=e) from e

    def lookup_by_username(self, username: str) -> DirectoryEntry | None:
        resp = self._get(f"/staff/{quote(username, safe='')}")
        if resp.status_code == 404:
            return None
        if resp.status_code >= 400:
            raise StaffDirectoryError(
                f"Staff directory returned status {resp.status_code} for {username!r}."
            )
        try:
            body = resp.json()
        except ValueError as e:
            raise StaffDirectoryError("Staff directory response is not valid JSON.", cause=e) from e
        return _parse_entry(body)

    def search_by_prefix(self, prefix: str) -> list[DirectoryEntry]:
        resp = self._get("/staff", params={"prefix": prefix})
        if resp.status_code >= 400:
            raise StaffDirectoryError(
                f"Staff directory search returned status {resp.status_code}."
            )
        try:
            body = resp.json()
        except ValueError as e:
            raise StaffDirectoryError("Staff directory response is not valid JSON.", cause=e) from e
        # Some directories wrap results: {"staff": [...]}
        if isinstance(body, dict):
            body = body.get("staff", [])
        if not isinstance(body, list):
            raise StaffDirectoryError("Staff directory search result is not a list.")
        return [_parse_entry(item) for item in body]


class AccountStaffDirectory:
    """Directory built on the accounts table: display name is the username, no department."""

    def __init__(self, store: AccountStore) -> None:
        self._store = store

    def lookup_by_username(self, username: str) -> DirectoryEntry | None:
        try:
            record = self._store.get_by_username(username)
        except AccountStoreError as e:
            raise StaffDirectoryError("Account directory lookup failed.", cause=e) from e
        if record is None:
            return None
        return DirectoryEntry(username=record.username, display_name=record.username)

    def search_by_prefix(self, prefix: str) -> list[DirectoryEntry]:
        try:
            records = self._store.search_by_prefix(prefix)
        except AccountStoreError as e:
            raise StaffDirectoryError("Account directory search failed.", cause=e) from e
        return [DirectoryEntry(username=r.username, display_name=r.username) for r in records]


def build_staff_directory(settings: Settings, store: AccountStore) -> StaffDirectory:
    """HTTP directory when STAFF_DIRECTORY_URL is set, else the accounts-table directory."""
    if settings.STAFF_DIRECTORY_URL:
        token = (
            settings.STAFF_DIRECTORY_TOKEN.get_secret_value()
            if settings.STAFF_DIRECTORY_TOKEN is not None
            else None
        )
        logger.info("Using HTTP staff directory at %s", settings.STAFF_DIRECTORY_URL)
        return HttpStaffDirectory(
            settings.STAFF_DIRECTORY_URL,
            timeout=settings.STAFF_DIRECTORY_TIMEOUT_SEC,
            token=token,
        )
    logger.info("STAFF_DIRECTORY_URL not set; using accounts table as staff directory.")
    return AccountStaffDirectory(store)
