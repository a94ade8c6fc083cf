"""Rate limiter that keeps counters in SQLite or PostgreSQL database."""

import sqlite3
import time
from typing import Any, Callable, Optional

import psycopg2

from log import get_logger
from models.config import (
    PostgreSQLDatabaseConfiguration,
    RateLimitPolicy,
    RateLimitsConfiguration,
    SQLiteDatabaseConfiguration,
)
from ratelimit.connect_pg import connect_pg
from ratelimit.connect_sqlite import connect_sqlite
from ratelimit.rate_limiter import RateLimiter
from ratelimit.sql import (
    CREATE_RATE_LIMITS_TABLE,
    DELETE_OLD_WINDOWS_PG,
    DELETE_OLD_WINDOWS_SQLITE,
    DELETE_SUBJECT_PG,
    DELETE_SUBJECT_SQLITE,
    INCREMENT_HITS_PG,
    INCREMENT_HITS_SQLITE,
    SELECT_HITS_PG,
    SELECT_HITS_SQLITE,
)
from utils.connection_decorator import connection

logger = get_logger(__name__)


class DatabaseRateLimiter(RateLimiter):
    """Rate limiter with counters shared by all workers through database.

    Counters are stored in following table:

    ```
         Column     |  Type   | Nullable |
    ----------------+---------+----------+
     policy         | text    | not null |
     subject        | text    | not null |
     window_start   | bigint  | not null |
     hits           | integer | not null |
    Indexes:
        "rate_limits_pkey" PRIMARY KEY, btree (policy, subject, window_start)
    ```
    """

    def __init__(
        self,
        configuration: RateLimitsConfiguration,
        name: str,
        policy: RateLimitPolicy,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize rate limiter and connect to database."""
        super().__init__(name, policy, clock)
        self.sqlite_connection_config: Optional[SQLiteDatabaseConfiguration] = (
            configuration.sqlite
        )
        self.postgres_connection_config: Optional[
            PostgreSQLDatabaseConfiguration
        ] = configuration.postgres
        self.connection: Any = None
        self.connect()

    def connect(self) -> None:
        """Initialize connection to database."""
        logger.info("Initializing connection to rate limiter database")
        if self.postgres_connection_config is not None:
            self.connection = connect_pg(self.postgres_connection_config)
        if self.sqlite_connection_config is not None:
            self.connection = connect_sqlite(self.sqlite_connection_config)

        try:
            self._initialize_tables()
        except Exception as e:
            self.connection.close()
            logger.exception("Error initializing rate limiter database:\n%s", e)
            raise

    def connected(self) -> bool:
        """Check if connection to database is alive."""
        if self.connection is None:
            logger.warning("Not connected, need to reconnect later")
            return False
        cursor = None
        try:
            cursor = self.connection.cursor()
            cursor.execute("SELECT 1")
            return True
        except (psycopg2.OperationalError, psycopg2.InterfaceError, sqlite3.Error) as e:
            logger.error("Disconnected from storage: %s", e)
            return False
        finally:
            if cursor is not None:
                try:
                    cursor.close()
                except Exception:  # pylint: disable=broad-exception-caught
                    logger.warning("Unable to close cursor")

    def _initialize_tables(self) -> None:
        """Initialize tables used by rate limiter."""
        logger.info("Initializing tables for rate limiter")
        cursor = self.connection.cursor()
        cursor.execute(CREATE_RATE_LIMITS_TABLE)
        cursor.close()
        self.connection.commit()

    def _statements(self) -> tuple[str, str, str, str]:
        """Select statements for configured database."""
        if self.postgres_connection_config is not None:
            return (
                INCREMENT_HITS_PG,
                SELECT_HITS_PG,
                DELETE_OLD_WINDOWS_PG,
                DELETE_SUBJECT_PG,
            )
        return (
            INCREMENT_HITS_SQLITE,
            SELECT_HITS_SQLITE,
            DELETE_OLD_WINDOWS_SQLITE,
            DELETE_SUBJECT_SQLITE,
        )

    @connection
    def _increment(self, subject: str, window_start: int) -> int:
        increment, _, delete_old, _ = self._statements()
        # it is not possible to use context manager there, because SQLite does
        # not support it
        cursor = self.connection.cursor()
        cursor.execute(delete_old, (self.name, subject, window_start))
        cursor.execute(increment, (self.name, subject, window_start))
        row = cursor.fetchone()
        cursor.close()
        self.connection.commit()
        return row[0]

    @connection
    def _count(self, subject: str, window_start: int) -> int:
        _, select, _, _ = self._statements()
        cursor = self.connection.cursor()
        cursor.execute(select, (self.name, subject, window_start))
        row = cursor.fetchone()
        cursor.close()
        return 0 if row is None else row[0]

    @connection
    def reset(self, subject: str) -> None:
        """Forget all requests of given subject."""
        _, _, _, delete_subject = self._statements()
        cursor = self.connection.cursor()
        cursor.execute(delete_subject, (self.name, subject))
        cursor.close()
        self.connection.commit()
