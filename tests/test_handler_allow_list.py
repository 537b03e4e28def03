"""Tests for the handler allow-list cache and the JSON config store behind it."""

import json
import unittest
from unittest.mock import MagicMock

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from rolodex.models import Base
from rolodex.services.config_store import ConfigStore, ConfigStoreError
from rolodex.services.handler_allow_list import (
    EMPTY_HANDLER_ALLOW_LIST,
    HandlerAllowList,
    HandlerAllowListCache,
)

CONFIG_KEY = "ADMIN_ORDER_HANDLER_CONFIG"


def _sqlite_session_factory() -> sessionmaker:
    """In-memory SQLite shared across threads, with all tables created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


class TestHandlerAllowList(unittest.TestCase):
    """HandlerAllowList keeps order and answers literal membership."""

    def test_membership_and_order(self) -> None:
        allow_list = HandlerAllowList.from_usernames(["carol", "alice"], version=1)
        self.assertIn("alice", allow_list)
        self.assertNotIn("Alice", allow_list)
        self.assertEqual(list(allow_list), ["carol", "alice"])
        self.assertFalse(allow_list.is_empty)

    def test_none_and_empty_are_both_empty(self) -> None:
        self.assertTrue(HandlerAllowList.from_usernames(None, version=1).is_empty)
        self.assertTrue(HandlerAllowList.from_usernames([], version=1).is_empty)


class TestHandlerAllowListCache(unittest.TestCase):
    """Refresh publishes the configured list; failures keep the previous one."""

    def test_refresh_publishes_configured_usernames(self) -> None:
        config_store = MagicMock()
        config_store.get_string_array.return_value = ["alice", "bob"]
        cache = HandlerAllowListCache(config_store, CONFIG_KEY)
        self.assertTrue(cache.refresh())
        config_store.get_string_array.assert_called_once_with(CONFIG_KEY)
        self.assertEqual(cache.current.usernames, ("alice", "bob"))

    def test_unconfigured_key_publishes_empty_list(self) -> None:
        config_store = MagicMock()
        config_store.get_string_array.return_value = None
        cache = HandlerAllowListCache(config_store, CONFIG_KEY)
        cache.refresh()
        self.assertIsNotNone(cache.current)
        self.assertTrue(cache.current.is_empty)

    def test_failed_refresh_keeps_previous_list(self) -> None:
        config_store = MagicMock()
        config_store.get_string_array.return_value = ["alice"]
        cache = HandlerAllowListCache(config_store, CONFIG_KEY)
        cache.refresh()
        previous = cache.current
        config_store.get_string_array.side_effect = ConfigStoreError("db down")
        with self.assertLogs("rolodex.services.handler_allow_list", level="ERROR"):
            self.assertFalse(cache.refresh())
        self.assertIs(cache.current, previous)
        self.assertIn("alice", cache.get())

    def test_first_get_loads_and_failure_gives_empty(self) -> None:
        config_store = MagicMock()
        config_store.get_string_array.side_effect = ConfigStoreError("db down")
        cache = HandlerAllowListCache(config_store, CONFIG_KEY)
        with self.assertLogs("rolodex.services.handler_allow_list", level="ERROR"):
            self.assertIs(cache.get(), EMPTY_HANDLER_ALLOW_LIST)
        self.assertIsNone(cache.current)


class TestConfigStore(unittest.TestCase):
    """ConfigStore.get_string_array against a real (SQLite) platform_configs table."""

    def setUp(self) -> None:
        self.store = ConfigStore(_sqlite_session_factory())

    def test_missing_key_is_none(self) -> None:
        self.assertIsNone(self.store.get_string_array(CONFIG_KEY))

    def test_round_trip_json_array(self) -> None:
        self.store.set_value(CONFIG_KEY, json.dumps(["alice", "bob"]))
        self.assertEqual(self.store.get_string_array(CONFIG_KEY), ["alice", "bob"])

    def test_set_value_replaces_existing(self) -> None:
        self.store.set_value(CONFIG_KEY, json.dumps(["alice"]))
        self.store.set_value(CONFIG_KEY, json.dumps([]))
        self.assertEqual(self.store.get_string_array(CONFIG_KEY), [])

    def test_malformed_value_is_none(self) -> None:
        self.store.set_value(CONFIG_KEY, "not json")
        with self.assertLogs("rolodex.services.config_store", level="WARNING"):
            self.assertIsNone(self.store.get_string_array(CONFIG_KEY))

    def test_non_string_array_is_none(self) -> None:
        self.store.set_value(CONFIG_KEY, json.dumps({"users": ["alice"]}))
        with self.assertLogs("rolodex.services.config_store", level="WARNING"):
            self.assertIsNone(self.store.get_string_array(CONFIG_KEY))

    def test_cache_reads_through_config_store(self) -> None:
        self.store.set_value(CONFIG_KEY, json.dumps(["carol"]))
        cache = HandlerAllowListCache(self.store, CONFIG_KEY)
        self.assertIn("carol", cache.get())


if __name__ == "__main__":
    unittest.main()
