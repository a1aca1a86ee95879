"""Key-value backed trade store for tradelog."""

import json
import logging
import sqlite3
import uuid
from abc import ABC, abstractmethod
from datetime import date
from pathlib import Path
from typing import Iterable, Optional

import redis
from pydantic import ValidationError

from tradelog.errors import StoreCorruptedError, StoreUnavailableError
from tradelog.models import TradeRecord

logger = logging.getLogger(__name__)

DEFAULT_TRADES_KEY = "trades:v2:data"


class KeyValueStore(ABC):
    """Minimal get/set/scan/delete key-value service."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Get the value for a key, or None if it is not set."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Set a key, overwriting any previous value."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete a key. Deleting a missing key is not an error."""
        pass

    @abstractmethod
    def scan(self, prefix: str = "") -> list[str]:
        """List keys starting with a prefix."""
        pass

    def close(self) -> None:
        """Release any held connections."""


class SqliteKeyValueStore(KeyValueStore):
    """SQLite-based key-value store."""

    def __init__(self, db_path: Path):
        """Initialize the store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Cannot create database directory %s: %s", self.db_path.parent, e)
            raise StoreUnavailableError(
                f"Cannot create database directory {self.db_path.parent}: {e}"
            ) from e

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            logger.error("Cannot open database %s: %s", self.db_path, e)
            raise StoreUnavailableError(f"Cannot open database {self.db_path}: {e}") from e
        conn.row_factory = sqlite3.Row
        return conn

    def _execute(self, sql: str, params: tuple = (), commit: bool = False) -> list[sqlite3.Row]:
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(sql, params)
            rows = cursor.fetchall()
            if commit:
                conn.commit()
            return rows
        except sqlite3.Error as e:
            logger.error("Database error on %s: %s", self.db_path, e)
            raise StoreUnavailableError(f"Database error: {e}") from e
        finally:
            conn.close()

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        self._execute(
            """
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
            """,
            commit=True,
        )

    def get(self, key: str) -> Optional[str]:
        rows = self._execute("SELECT value FROM kv WHERE key = ?", (key,))
        return rows[0]["value"] if rows else None

    def set(self, key: str, value: str) -> None:
        self._execute(
            "INSERT OR REPLACE INTO kv (key, value) VALUES (?, ?)",
            (key, value),
            commit=True,
        )

    def delete(self, key: str) -> None:
        self._execute("DELETE FROM kv WHERE key = ?", (key,), commit=True)

    def scan(self, prefix: str = "") -> list[str]:
        rows = self._execute(
            "SELECT key FROM kv WHERE substr(key, 1, ?) = ? ORDER BY key",
            (len(prefix), prefix),
        )
        return [row["key"] for row in rows]


class RedisKeyValueStore(KeyValueStore):
    """Redis-based key-value store.

    The client (and its connection pool) is created on first use and
    reused for the life of the store.
    """

    def __init__(self, url: str = "redis://localhost:6379"):
        """Initialize the store.

        Args:
            url: Redis connection URL.
        """
        self.url = url
        self._client: Optional[redis.Redis] = None

    def _get_client(self) -> redis.Redis:
        if self._client is None:
            self._client = redis.Redis.from_url(self.url, decode_responses=True)
        return self._client

    def _call(self, method: str, *args):
        try:
            return getattr(self._get_client(), method)(*args)
        except redis.exceptions.RedisError as e:
            logger.error("Redis %s failed on %s: %s", method, self.url, e)
            raise StoreUnavailableError(f"Redis unavailable at {self.url}: {e}") from e

    def get(self, key: str) -> Optional[str]:
        return self._call("get", key)

    def set(self, key: str, value: str) -> None:
        self._call("set", key, value)

    def delete(self, key: str) -> None:
        self._call("delete", key)

    def scan(self, prefix: str = "") -> list[str]:
        try:
            return sorted(self._get_client().scan_iter(match=f"{prefix}*"))
        except redis.exceptions.RedisError as e:
            logger.error("Redis scan failed on %s: %s", self.url, e)
            raise StoreUnavailableError(f"Redis unavailable at {self.url}: {e}") from e

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None


def open_key_value_store(config: dict) -> KeyValueStore:
    """Create the key-value backend named in the config.

    Args:
        config: Full configuration dictionary.

    Returns:
        KeyValueStore instance.

    Raises:
        ValueError: If the backend name is unknown.
    """
    store_config = config.get("store", {})
    backend = store_config.get("backend", "sqlite")

    if backend == "sqlite":
        return SqliteKeyValueStore(Path(store_config["path"]).expanduser())
    if backend == "redis":
        return RedisKeyValueStore(store_config.get("redis_url", "redis://localhost:6379"))

    raise ValueError(f"Unknown store backend '{backend}'. Use 'sqlite' or 'redis'.")


def with_ids(records: Iterable[TradeRecord]) -> list[TradeRecord]:
    """Give every record without an id a new one."""
    return [
        r if r.id else r.model_copy(update={"id": uuid.uuid4().hex})
        for r in records
    ]


class TradeStore:
    """Persists the trade collection under a single key.

    The whole collection is stored as one JSON document
    (``{"trades": [...]}``). Writes replace the document; concurrent
    writers are not coordinated and the last write wins.
    """

    def __init__(self, kv: KeyValueStore, key: str = DEFAULT_TRADES_KEY):
        """Initialize the trade store.

        Args:
            kv: Backing key-value store.
            key: Key holding the trade collection.
        """
        self.kv = kv
        self.key = key

    def _load(self) -> list[TradeRecord]:
        raw = self.kv.get(self.key)
        if not raw:
            return []
        try:
            payload = json.loads(raw)
            return [TradeRecord.model_validate(item) for item in payload.get("trades", [])]
        except (json.JSONDecodeError, AttributeError, TypeError, ValidationError) as e:
            logger.error("Stored trades under %s could not be decoded: %s", self.key, e)
            raise StoreCorruptedError(f"Stored trades under '{self.key}' are corrupted: {e}") from e

    def _write(self, trades: list[TradeRecord]) -> None:
        payload = {
            "trades": [t.model_dump(mode="json", by_alias=True) for t in trades],
        }
        self.kv.set(self.key, json.dumps(payload))

    # ==================== Collection ====================

    def save_all(self, records: Iterable[TradeRecord]) -> int:
        """Save records, merging by id into the stored collection.

        Records without an id are given a new one. The collection is
        written once, so either every record is saved or none are.

        Args:
            records: Records to save.

        Returns:
            Number of records saved.
        """
        incoming = with_ids(records)
        if not incoming:
            return 0

        merged = {t.id: t for t in self._load()}
        for record in incoming:
            merged[record.id] = record

        self._write(list(merged.values()))
        logger.info("Saved %d trades under %s (%d total)", len(incoming), self.key, len(merged))
        return len(incoming)

    def get_all(self) -> list[TradeRecord]:
        """Get every stored trade, in stored order."""
        return self._load()

    def clear_all(self) -> None:
        """Delete the whole trade collection."""
        self.kv.delete(self.key)
        logger.info("Cleared trades under %s", self.key)

    # ==================== Single-trade helpers ====================

    def save(self, record: TradeRecord) -> TradeRecord:
        """Save one record and return it with its id."""
        [record] = with_ids([record])
        self.save_all([record])
        return record

    def get_by_id(self, trade_id: str) -> Optional[TradeRecord]:
        """Get a trade by id.

        Returns:
            Trade if found, None otherwise.
        """
        return next((t for t in self._load() if t.id == trade_id), None)

    def delete(self, trade_id: str) -> bool:
        """Delete a trade by id.

        Returns:
            True if a trade was removed.
        """
        trades = self._load()
        remaining = [t for t in trades if t.id != trade_id]
        if len(remaining) == len(trades):
            return False
        self._write(remaining)
        logger.info("Deleted trade %s", trade_id)
        return True

    def update(self, trade_id: str, **changes) -> Optional[TradeRecord]:
        """Update fields of a stored trade.

        Args:
            trade_id: Trade id.
            **changes: Field values to replace (field names, not aliases).

        Returns:
            The updated trade, or None if no trade has that id.
        """
        trades = self._load()
        for index, trade in enumerate(trades):
            if trade.id == trade_id:
                updated = TradeRecord.model_validate(
                    {**trade.model_dump(), **changes, "id": trade_id}
                )
                trades[index] = updated
                self._write(trades)
                return updated
        return None

    def get_by_symbol(self, symbol: str) -> list[TradeRecord]:
        """Get all trades for a symbol (case-insensitive)."""
        wanted = symbol.upper()
        return [t for t in self._load() if t.symbol.upper() == wanted]

    def get_by_date_range(self, start: date, end: date) -> list[TradeRecord]:
        """Get trades whose entry date falls within [start, end]."""
        low, high = start.isoformat(), end.isoformat()
        return [t for t in self._load() if low <= t.trade_date <= high]

    def count(self) -> int:
        """Number of stored trades."""
        return len(self._load())

    def close(self) -> None:
        """Release the backing store's connections."""
        self.kv.close()
