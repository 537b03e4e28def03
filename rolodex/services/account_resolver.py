"""Account resolver: cached role and handler queries, resolved account views, and CRUD pass-through."""

import logging

from rolodex.core.security import hash_password
from rolodex.models import AccountRecord
from rolodex.schemas.account import Account, AccountRole, DirectoryEntry
from rolodex.schemas.result import ResultStatus
from rolodex.services.account_store import AccountStore, AccountStoreError, DuplicateKeyError
from rolodex.services.handler_allow_list import HandlerAllowListCache
from rolodex.services.role_snapshot import RoleSnapshotCache
from rolodex.services.staff_cache import StaffDirectoryCache
from rolodex.services.staff_directory import StaffDirectory

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_USERNAME = "rolodex"
DEFAULT_SYSTEM_DISPLAY_NAME = "System"

# Roles enumerated by list_privileged_roles (operators and R&D staff).
PRIVILEGED_ROLES = (AccountRole.OP, AccountRole.RD)


class AccountResolver:
    """
    Read path answers from the published role snapshot and handler allow-list
    plus the staff directory cache; it never queries the accounts table except
    for the first-use load. CRUD goes straight to the store and does not touch
    any cache: changes show up after the next scheduled refresh.
    """

    def __init__(
        self,
        store: AccountStore,
        roles: RoleSnapshotCache,
        allow_list: HandlerAllowListCache,
        staff_cache: StaffDirectoryCache,
        directory: StaffDirectory,
        system_username: str = DEFAULT_SYSTEM_USERNAME,
        system_display_name: str = DEFAULT_SYSTEM_DISPLAY_NAME,
    ) -> None:
        self._store = store
        self._roles = roles
        self._allow_list = allow_list
        self._staff_cache = staff_cache
        self._directory = directory
        self._system_username = system_username
        self._system_display_name = system_display_name

    @property
    def system_username(self) -> str:
        return self._system_username

    @property
    def handler_config_key(self) -> str:
        """Configuration key holding the handler allow-list."""
        return self._allow_list.config_key

    # Role and handler queries

    def role_of(self, username: str) -> AccountRole:
        """Cached role of username; NORMAL when unknown."""
        return self._roles.get().role_of(username)

    def is_operator(self, username: str) -> bool:
        """True only for role OP; the allow-list is not consulted."""
        return self.role_of(username) is AccountRole.OP

    def is_handler(self, username: str) -> bool:
        """True for OP accounts and for allow-listed usernames of any role."""
        if self.is_operator(username):
            return True
        return username in self._allow_list.get()

    def list_privileged_roles(self) -> dict[str, AccountRole]:
        """username -> role for every OP or RD account in the snapshot."""
        snapshot = self._roles.get()
        return {u: snapshot.role_of(u) for u in snapshot.usernames_with_role(*PRIVILEGED_ROLES)}

    def list_operator_accounts(self) -> list[Account]:
        return [
            self.resolve_account(u)
            for u, role in self.list_privileged_roles().items()
            if role is AccountRole.OP
        ]

    def list_handler_accounts(self) -> list[Account]:
        """
        Allow-listed accounts, or every OP account when the allow-list is empty
        or not configured.

        Allow-listed usernames that do not resolve (e.g. deleted accounts) are
        skipped; the result is best-effort rather than all-or-nothing.
        """
        allow_list = self._allow_list.get()
        if allow_list.is_empty:
            return self.list_operator_accounts()

        accounts = []
        for username in allow_list:
            account = self.find_account(username)
            if account is None:
                logger.debug("Skipping unresolvable allow-listed handler %s", username)
                continue
            accounts.append(account)
        return accounts

    # Account views

    def resolve_account(self, username: str) -> Account:
        """
        Composite view of username. The system username is always OP with the
        system display name. Without a directory entry the display name is
        the username and department is unset.
        """
        if username == self._system_username:
            return Account(
                username=username,
                role=AccountRole.OP,
                display_name=self._system_display_name,
            )

        role = self.role_of(username)
        entry = self._staff_cache.lookup(username)
        if entry is None:
            return Account(username=username, role=role, display_name=username)
        return Account(
            username=username,
            role=role,
            display_name=entry.display_name or username,
            department=entry.department,
        )

    def find_account(self, username: str) -> Account | None:
        """Resolved view for the system username or a username in the role snapshot, else None."""
        if username != self._system_username and username not in self._roles.get().roles:
            return None
        return self.resolve_account(username)

    def search_by_prefix(self, prefix: str) -> list[DirectoryEntry]:
        """Live directory search; not cached."""
        return self._directory.search_by_prefix(prefix)

    # CRUD pass-through

    def create(
        self,
        username: str,
        password: str,
        role: AccountRole = AccountRole.NORMAL,
    ) -> ResultStatus:
        record = AccountRecord(
            username=username,
            password_hash=hash_password(password),
            role=role.value,
        )
        try:
            if self._store.insert(record) > 0:
                return ResultStatus.SUCCESS
        except DuplicateKeyError:
            logger.info("Create account failed, account already exists: %s", username)
            return ResultStatus.DUPLICATE_RESOURCE
        except AccountStoreError:
            logger.exception("Create account failed, backing store error: %s", username)
        return ResultStatus.BACKING_STORE_ERROR

    def delete(self, username: str) -> ResultStatus:
        try:
            if self._store.delete_by_username(username) > 0:
                return ResultStatus.SUCCESS
            return ResultStatus.RESOURCE_NOT_FOUND
        except AccountStoreError:
            logger.exception("Delete account failed: %s", username)
        return ResultStatus.BACKING_STORE_ERROR

    def update(
        self,
        username: str,
        role: AccountRole | None = None,
        password: str | None = None,
    ) -> ResultStatus:
        """Update role and password. Omitted fields keep their stored values."""
        try:
            existing = self._store.get_by_username(username)
            if existing is None:
                return ResultStatus.RESOURCE_NOT_FOUND
            password_hash = (
                hash_password(password) if password is not None else existing.password_hash
            )
            record = AccountRecord(
                username=username,
                password_hash=password_hash,
                role=role.value if role is not None else existing.role,
            )
            if self._store.update_by_username(record) > 0:
                return ResultStatus.SUCCESS
            # Row removed after the existence check.
            return ResultStatus.RESOURCE_NOT_FOUND
        except AccountStoreError:
            logger.exception("Update account failed: %s", username)
        return ResultStatus.BACKING_STORE_ERROR

    def get_one(self, username: str) -> AccountRecord | None:
        return self._store.get_by_username(username)

    def list_all(self) -> list[AccountRecord]:
        return self._store.list_all()
