"""Wire stores, caches, the resolver and the refresh scheduler; FastAPI dependency functions."""

from dataclasses import dataclass
from functools import lru_cache

from sqlalchemy.orm import Session, sessionmaker

from rolodex.core.config import Settings, get_settings
from rolodex.core.database import SessionLocal
from rolodex.services.account_resolver import AccountResolver
from rolodex.services.account_store import AccountStore
from rolodex.services.config_store import ConfigStore
from rolodex.services.handler_allow_list import HandlerAllowListCache
from rolodex.services.refresh_scheduler import RefreshScheduler
from rolodex.services.role_snapshot import RoleSnapshotCache
from rolodex.services.staff_cache import StaffDirectoryCache
from rolodex.services.staff_directory import StaffDirectory, build_staff_directory


@dataclass
class AccountServices:
    """Process-scoped account state: built once, caches populated by the scheduler."""

    store: AccountStore
    config_store: ConfigStore
    roles: RoleSnapshotCache
    allow_list: HandlerAllowListCache
    directory: StaffDirectory
    staff_cache: StaffDirectoryCache
    resolver: AccountResolver
    scheduler: RefreshScheduler


def build_account_services(
    settings: Settings,
    session_factory: sessionmaker[Session],
    directory: StaffDirectory | None = None,
) -> AccountServices:
    store = AccountStore(session_factory)
    config_store = ConfigStore(session_factory)
    roles = RoleSnapshotCache(store)
    allow_list = HandlerAllowListCache(config_store, settings.HANDLER_ALLOW_LIST_CONFIG_KEY)
    if directory is None:
        directory = build_staff_directory(settings, store)
    staff_cache = StaffDirectoryCache(
        directory,
        max_size=settings.STAFF_CACHE_MAX_SIZE,
        expire_after_access=settings.STAFF_CACHE_EXPIRE_AFTER_ACCESS_MIN * 60,
        expire_after_write=settings.STAFF_CACHE_EXPIRE_AFTER_WRITE_MIN * 60,
    )
    resolver = AccountResolver(
        store=store,
        roles=roles,
        allow_list=allow_list,
        staff_cache=staff_cache,
        directory=directory,
        system_username=settings.SYSTEM_USERNAME,
        system_display_name=settings.SYSTEM_DISPLAY_NAME,
    )
    scheduler = RefreshScheduler(
        roles,
        allow_list,
        interval=settings.ROLE_REFRESH_INTERVAL_SEC,
    )
    return AccountServices(
        store=store,
        config_store=config_store,
        roles=roles,
        allow_list=allow_list,
        directory=directory,
        staff_cache=staff_cache,
        resolver=resolver,
        scheduler=scheduler,
    )


@lru_cache
def get_account_services() -> AccountServices:
    """Return the process-wide services (safe to call from dependencies)."""
    return build_account_services(get_settings(), SessionLocal)


# FastAPI dependency functions
def get_account_resolver() -> AccountResolver:
    return get_account_services().resolver


def get_config_store() -> ConfigStore:
    return get_account_services().config_store
