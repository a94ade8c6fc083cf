"""Unit tests for CacheFactory class."""

from pathlib import Path

import pytest
from pytest_mock import MockerFixture
from pydantic import SecretStr

from constants import (
    CACHE_TYPE_NOOP,
    CACHE_TYPE_MEMORY,
    CACHE_TYPE_SQLITE,
    CACHE_TYPE_POSTGRES,
)

from models.config import (
    ResponseCacheConfiguration,
    InMemoryCacheConfig,
    SQLiteDatabaseConfiguration,
    PostgreSQLDatabaseConfiguration,
)

from cache.cache_factory import CacheFactory
from cache.noop_cache import NoopCache
from cache.in_memory_cache import InMemoryCache
from cache.sqlite_cache import SQLiteCache
from cache.postgres_cache import PostgresCache


@pytest.fixture(scope="module", name="noop_cache_config_fixture")
def noop_cache_config() -> ResponseCacheConfiguration:
    """Fixture containing initialized instance of ResponseCacheConfiguration."""
    return ResponseCacheConfiguration(type=CACHE_TYPE_NOOP)


@pytest.fixture(scope="module", name="memory_cache_config_fixture")
def memory_cache_config() -> ResponseCacheConfiguration:
    """Fixture containing initialized instance of InMemory cache."""
    return ResponseCacheConfiguration(
        type=CACHE_TYPE_MEMORY, memory=InMemoryCacheConfig(max_entries=10)
    )


@pytest.fixture(scope="module", name="postgres_cache_config_fixture")
def postgres_cache_config() -> ResponseCacheConfiguration:
    """Fixture containing initialized instance of PostgreSQL cache."""
    return ResponseCacheConfiguration(
        type=CACHE_TYPE_POSTGRES,
        postgres=PostgreSQLDatabaseConfiguration(
            db="database", user="user", password=SecretStr("password")
        ),
    )


@pytest.fixture(name="sqlite_cache_config_fixture")
def sqlite_cache_config(tmpdir: Path) -> ResponseCacheConfiguration:
    """Fixture containing initialized instance of SQLite cache."""
    db_path = str(tmpdir / "test.sqlite")
    return ResponseCacheConfiguration(
        type=CACHE_TYPE_SQLITE, sqlite=SQLiteDatabaseConfiguration(db_path=db_path)
    )


def test_disabled_cache() -> None:
    """Check that no-op cache is used when caching is disabled."""
    cache = CacheFactory.response_cache(
        ResponseCacheConfiguration(enabled=False, type=CACHE_TYPE_MEMORY)
    )
    assert isinstance(cache, NoopCache)


def test_noop_cache(noop_cache_config_fixture) -> None:
    """Check if NoopCache is returned by factory with proper configuration."""
    cache = CacheFactory.response_cache(noop_cache_config_fixture)
    assert isinstance(cache, NoopCache)


def test_memory_cache(memory_cache_config_fixture) -> None:
    """Check if InMemoryCache is returned by factory with proper configuration."""
    cache = CacheFactory.response_cache(memory_cache_config_fixture)
    assert isinstance(cache, InMemoryCache)
    assert cache.capacity == 10


def test_memory_cache_no_config() -> None:
    """Check that factory fails without in-memory cache configuration."""
    config = ResponseCacheConfiguration(type=CACHE_TYPE_MEMORY)
    # simulate configuration changed after validation
    config.memory = None
    with pytest.raises(ValueError, match="Expecting configuration for in-memory cache"):
        CacheFactory.response_cache(config)


def test_sqlite_cache(sqlite_cache_config_fixture) -> None:
    """Check if SQLiteCache is returned by factory with proper configuration."""
    cache = CacheFactory.response_cache(sqlite_cache_config_fixture)
    assert isinstance(cache, SQLiteCache)


def test_postgres_cache(postgres_cache_config_fixture, mocker: MockerFixture) -> None:
    """Check if PostgresCache is returned by factory with proper configuration."""
    # prevent real connection to PG instance
    mocker.patch("psycopg2.connect")
    cache = CacheFactory.response_cache(postgres_cache_config_fixture)
    assert isinstance(cache, PostgresCache)


def test_invalid_cache_type() -> None:
    """Check that wrong cache type is reported."""
    config = ResponseCacheConfiguration(type=CACHE_TYPE_NOOP)
    config.type = "foo bar baz"  # type: ignore[assignment]
    with pytest.raises(ValueError, match="Invalid cache type"):
        CacheFactory.response_cache(config)
