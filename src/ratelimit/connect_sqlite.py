"""SQLite connection handler."""

import sqlite3
from typing import Any

from log import get_logger
from models.config import SQLiteDatabaseConfiguration

logger = get_logger(__name__)


def connect_sqlite(config: SQLiteDatabaseConfiguration) -> Any:
    """Initialize connection to database."""
    logger.info("Connecting to SQLite rate limiter storage")
    try:
        # one connection is shared by all requests handled by the worker
        return sqlite3.connect(
            database=config.db_path, isolation_level=None, check_same_thread=False
        )
    except sqlite3.Error as e:
        logger.exception("Error initializing SQLite rate limiter storage:\n%s", e)
        raise
