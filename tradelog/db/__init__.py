"""Persistence for tradelog."""

from tradelog.db.store import (
    DEFAULT_TRADES_KEY,
    KeyValueStore,
    RedisKeyValueStore,
    SqliteKeyValueStore,
    TradeStore,
    open_key_value_store,
    with_ids,
)

__all__ = [
    "DEFAULT_TRADES_KEY",
    "KeyValueStore",
    "RedisKeyValueStore",
    "SqliteKeyValueStore",
    "TradeStore",
    "open_key_value_store",
    "with_ids",
]
