"""PostgreSQL cache implementation."""

import time
from typing import Callable, Optional

import psycopg2

from cache.cache import Cache
from cache.cache_error import CacheError
from models.config import PostgreSQLDatabaseConfiguration
from log import get_logger
from utils.connection_decorator import connection

logger = get_logger("cache.postgres_cache")


class PostgresCache(Cache):
    """Cache that uses PostgreSQL to store cached values.

    The cache itself lives stored in following table:

    ```
         Column      |              Type              | Nullable |
    -----------------+--------------------------------+----------+
     key             | text                           | not null |
     value           | text                           | not null |
     expires_at      | double precision               | not null |
    Indexes:
        "ai_response_cache_pkey" PRIMARY KEY, btree (key)
        "ai_response_cache_expiration" btree (expires_at)
    ```

    Expiration time is stored as seconds since epoch, as computed by the
    service, so all service instances need reasonably synchronized clocks.
    """

    CREATE_CACHE_TABLE = """
        CREATE TABLE IF NOT EXISTS ai_response_cache (
            key        text NOT NULL,
            value      text NOT NULL,
            expires_at double precision NOT NULL,
            PRIMARY KEY(key)
        );
        """

    CREATE_INDEX = """
        CREATE INDEX IF NOT EXISTS ai_response_cache_expiration
            ON ai_response_cache (expires_at)
        """

    SELECT_ENTRY_STATEMENT = """
        SELECT value
          FROM ai_response_cache
         WHERE key=%s AND expires_at > %s
        """

    UPSERT_ENTRY_STATEMENT = """
        INSERT INTO ai_response_cache(key, value, expires_at)
        VALUES (%s, %s, %s)
        ON CONFLICT (key)
        DO UPDATE SET value = EXCLUDED.value, expires_at = EXCLUDED.expires_at
        """

    DELETE_ENTRY_STATEMENT = """
        DELETE FROM ai_response_cache
         WHERE key=%s
        """

    DELETE_BY_PREFIX_STATEMENT = """
        DELETE FROM ai_response_cache
         WHERE left(key, %s)=%s
        """

    DELETE_EXPIRED_STATEMENT = """
        DELETE FROM ai_response_cache
         WHERE expires_at <= %s
        """

    def __init__(
        self,
        config: PostgreSQLDatabaseConfiguration,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Create a new instance of PostgreSQL cache."""
        self.postgres_config = config
        self._clock = clock

        # initialize connection to DB
        self.connect()

    # pylint: disable=W0201
    def connect(self) -> None:
        """Initialize connection to database."""
        logger.info("Connecting to storage")
        # make sure the connection will have known state
        # even if PostgreSQL is not alive
        self.connection = None
        config = self.postgres_config
        try:
            self.connection = psycopg2.connect(
                host=config.host,
                port=config.port,
                user=config.user,
                password=config.password.get_secret_value(),
                dbname=config.db,
                sslmode=config.ssl_mode,
                gssencmode=config.gss_encmode,
            )
            self.initialize_cache()
        except Exception as e:
            if self.connection is not None:
                self.connection.close()
            logger.exception("Error initializing Postgres cache:\n%s", e)
            raise
        self.connection.autocommit = True

    def connected(self) -> bool:
        """Check if connection to cache is alive."""
        if self.connection is None:
            logger.warning("Not connected, need to reconnect later")
            return False
        try:
            with self.connection.cursor() as cursor:
                cursor.execute("SELECT 1")
            return True
        except (psycopg2.OperationalError, psycopg2.InterfaceError) as e:
            logger.error("Disconnected from storage: %s", e)
            return False

    def initialize_cache(self) -> None:
        """Initialize cache - create table and drop expired entries."""
        if self.connection is None:
            logger.error("Cache is disconnected")
            raise CacheError("Initialize_cache: cache is disconnected")

        # cursor as context manager is not used there on purpose
        # any CREATE statement can raise it's own exception
        # and it should not interfere with other statements
        cursor = self.connection.cursor()

        logger.info("Initializing table for cache")
        cursor.execute(PostgresCache.CREATE_CACHE_TABLE)

        logger.info("Initializing index for cache")
        cursor.execute(PostgresCache.CREATE_INDEX)

        cursor.execute(PostgresCache.DELETE_EXPIRED_STATEMENT, (self._clock(),))

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

        with self.connection.cursor() as cursor:
            cursor.execute(self.SELECT_ENTRY_STATEMENT, (key, self._clock()))
            row = cursor.fetchone()

        if row is None:
            return None
        return row[0]

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

        with self.connection.cursor() as cursor:
            cursor.execute(
                self.UPSERT_ENTRY_STATEMENT, (key, value, self._clock() + ttl)
            )

    @connection
    def delete(self, key: str) -> bool:
        """Delete value associated with the given key."""
        if self.connection is None:
            logger.error("Cache is disconnected")
            raise CacheError("delete: cache is disconnected")

        with self.connection.cursor() as cursor:
            cursor.execute(self.DELETE_ENTRY_STATEMENT, (key,))
            return cursor.rowcount > 0

    @connection
    def clear(self, prefix: str) -> int:
        """Delete all entries whose key starts with given prefix."""
        if self.connection is None:
            logger.error("Cache is disconnected")
            raise CacheError("clear: cache is disconnected")

        with self.connection.cursor() as cursor:
            cursor.execute(self.DELETE_BY_PREFIX_STATEMENT, (len(prefix), prefix))
            return cursor.rowcount

    def ready(self) -> bool:
        """Check if the cache is ready."""
        return self.connected()
