"""Cache that uses SQLite to store cached values."""

import sqlite3
import time
from typing import Callable, Optional

from cache.cache import Cache
from cache.cache_error import CacheError
from models.config import SQLiteDatabaseConfiguration
from log import get_logger
from utils.connection_decorator import connection

logger = get_logger("cache.sqlite_cache")


class SQLiteCache(Cache):
    """Cache that uses SQLite to store cached values.

    The cache itself is stored in following table:

    ```
         Column      |            Type             | Nullable |
    -----------------+-----------------------------+----------+
     key             | text                        | not null |
     value           | text                        | not null |
     expires_at      | real                        | not null |
    Indexes:
        "ai_response_cache_pkey" PRIMARY KEY, btree (key)
        "ai_response_cache_expiration" btree (expires_at)
    ```
    """

    CREATE_CACHE_TABLE = """
        CREATE TABLE IF NOT EXISTS ai_response_cache (
            key        text NOT NULL,
            value      text NOT NULL,
            expires_at real NOT NULL,
            PRIMARY KEY(key)
        );
        """

    CREATE_INDEX = """
        CREATE INDEX IF NOT EXISTS ai_response_cache_expiration
            ON ai_response_cache (expires_at)
        """

    SELECT_ENTRY_STATEMENT = """
        SELECT value, expires_at
          FROM ai_response_cache
         WHERE key=?
        """

    UPSERT_ENTRY_STATEMENT = """
        INSERT INTO ai_response_cache(key, value, expires_at)
        VALUES (?, ?, ?)
        ON CONFLICT (key)
        DO UPDATE SET value = excluded.value, expires_at = excluded.expires_at
        """

    DELETE_ENTRY_STATEMENT = """
        DELETE FROM ai_response_cache
         WHERE key=?
        """

    DELETE_BY_PREFIX_STATEMENT = """
        DELETE FROM ai_response_cache
         WHERE substr(key, 1, ?)=?
        """

    DELETE_EXPIRED_STATEMENT = """
        DELETE FROM ai_response_cache
         WHERE expires_at <= ?
        """

    def __init__(
        self,
        config: SQLiteDatabaseConfiguration,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Create a new instance of SQLite cache."""
        self.sqlite_config = config
        self._clock = clock

        # initialize connection to DB
        self.connect()

    # pylint: disable=W0201
    def connect(self) -> None:
        """Initialize connection to database."""
        logger.info("Connecting to storage")
        # make sure the connection will have known state
        # even if SQLite is not alive
        self.connection = None
        config = self.sqlite_config
        try:
            self.connection = sqlite3.connect(
                database=config.db_path, check_same_thread=False
            )
            self.initialize_cache()
        except sqlite3.Error as e:
            if self.connection is not None:
                self.connection.close()
            logger.exception("Error initializing SQLite cache:\n%s", e)
            raise

    def connected(self) -> bool:
        """Check if connection to cache is alive."""
        if self.connection is None:
            logger.warning("Not connected, need to reconnect later")
            return False
        cursor = None
        try:
            cursor = self.connection.cursor()
            cursor.execute("SELECT 1")
            return True
        except sqlite3.Error as e:
            logger.error("Disconnected from storage: %s", e)
            return False
        finally:
            if cursor is not None:
                try:
                    cursor.close()
                except Exception:  # pylint: disable=broad-exception-caught
                    logger.warning("Unable to close cursor")

    def initialize_cache(self) -> None:
        """Initialize cache - create table and drop expired entries."""
        if self.connection is None:
            logger.error("Cache is disconnected")
            raise CacheError("Initialize_cache: cache is disconnected")

        cursor = self.connection.cursor()

        logger.info("Initializing table for cache")
        cursor.execute(SQLiteCache.CREATE_CACHE_TABLE)

        logger.info("Initializing index for cache")
        cursor.execute(SQLiteCache.CREATE_INDEX)

        cursor.execute(SQLiteCache.DELETE_EXPIRED_STATEMENT, (self._clock(),))

        cursor.close()
        self.connection.commit()

    @connection
    def get(self, key: str) -> Optional[str]:
        """Get the value associated with the given key.

        Args:
            key: Cache key.

        Returns:
            The value associated with the key, or None if not found or expired.
        """
        if self.connection is None:
            logger.error("Cache is disconnected")
            raise CacheError("get: cache is disconnected")

        cursor = self.connection.cursor()
        cursor.execute(self.SELECT_ENTRY_STATEMENT, (key,))
        row = cursor.fetchone()
        cursor.close()

        if row is None:
            return None
        value, expires_at = row
        if self._clock() >= expires_at:
            self.delete(key)
            return None
        return value

    @connection
    def set(self, key: str, value: str, ttl: int) -> None:
        """Set the value associated with the given key.

        Args:
            key: Cache key.
            value: Value to store.
            ttl: Time-to-live in seconds.
        """
        if self.connection is None:
            logger.error("Cache is disconnected")
            raise CacheError("set: cache is disconnected")

        cursor = self.connection.cursor()
        cursor.execute(
            self.UPSERT_ENTRY_STATEMENT, (key, value, self._clock() + ttl)
        )
        cursor.close()
        self.connection.commit()

    @connection
    def delete(self, key: str) -> bool:
        """Delete value associated with the given key."""
        if self.connection is None:
            logger.error("Cache is disconnected")
            raise CacheError("delete: cache is disconnected")

        cursor = self.connection.cursor()
        cursor.execute(self.DELETE_ENTRY_STATEMENT, (key,))
        deleted = cursor.rowcount > 0
        cursor.close()
        self.connection.commit()
        return deleted

    @connection
    def clear(self, prefix: str) -> int:
        """Delete all entries whose key starts with given prefix."""
        if self.connection is None:
            logger.error("Cache is disconnected")
            raise CacheError("clear: cache is disconnected")

        cursor = self.connection.cursor()
        cursor.execute(self.DELETE_BY_PREFIX_STATEMENT, (len(prefix), prefix))
        deleted = cursor.rowcount
        cursor.close()
        self.connection.commit()
        return deleted

    def ready(self) -> bool:
        """Check if the cache is ready."""
        return self.connected()
