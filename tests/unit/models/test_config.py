"""Unit tests for configuration models."""

import pytest
from pydantic import SecretStr, ValidationError

import constants
from models.config import (
    Configuration,
    InMemoryCacheConfig,
    PostgreSQLDatabaseConfiguration,
    ProviderConfiguration,
    ProvidersConfiguration,
    RateLimitsConfiguration,
    ResponseCacheConfiguration,
    ServiceConfiguration,
    SQLiteDatabaseConfiguration,
)


def test_service_configuration_defaults() -> None:
    """Test the ServiceConfiguration default values."""
    s = ServiceConfiguration()
    assert s.host == "localhost"
    assert s.port == 8080
    assert s.workers == 1


def test_service_configuration_port_value() -> None:
    """Test the ServiceConfiguration port value validation."""
    with pytest.raises(ValidationError, match="Input should be greater than 0"):
        ServiceConfiguration(port=-10)

    with pytest.raises(ValueError, match="Port value should be less than 65536"):
        ServiceConfiguration(port=100000)


def test_provider_configuration_direct_key() -> None:
    """Test that credential given directly in configuration is used."""
    p = ProviderConfiguration(api_key=SecretStr("sk-123"))
    assert p.credentialed is True
    assert p.resolve_api_key() == "sk-123"


def test_provider_configuration_environment_key(monkeypatch) -> None:
    """Test that credential is read from environment on every resolution."""
    p = ProviderConfiguration(api_key_env="TEST_PROVIDER_KEY")
    monkeypatch.delenv("TEST_PROVIDER_KEY", raising=False)
    assert p.credentialed is False

    monkeypatch.setenv("TEST_PROVIDER_KEY", "sk-from-env")
    assert p.credentialed is True
    assert p.resolve_api_key() == "sk-from-env"


@pytest.mark.parametrize("value", ["", "   ", "\t\n"])
def test_provider_configuration_blank_key(value: str) -> None:
    """Test that blank credential means the provider is not configured."""
    p = ProviderConfiguration(api_key=SecretStr(value))
    assert p.credentialed is False
    assert p.resolve_api_key() is None


def test_provider_configuration_no_key() -> None:
    """Test provider without any credential source."""
    assert ProviderConfiguration().credentialed is False


def test_providers_configuration_defaults(monkeypatch) -> None:
    """Test that default providers read well known environment variables."""
    monkeypatch.setenv(constants.DEFAULT_OPENAI_API_KEY_ENV, "sk-1")
    monkeypatch.delenv(constants.DEFAULT_GEMINI_API_KEY_ENV, raising=False)
    providers = ProvidersConfiguration()
    assert providers.credentials() == {"openai": True, "gemini": False}
    assert providers.gemini.default_model == constants.DEFAULT_GEMINI_MODEL


def test_providers_configuration_unknown_provider() -> None:
    """Test retrieving configuration for unknown provider."""
    with pytest.raises(ValueError, match="Unknown provider: foo"):
        ProvidersConfiguration().get("foo")


def test_response_cache_configuration_default() -> None:
    """Test that in-memory cache is used by default."""
    c = ResponseCacheConfiguration()
    assert c.enabled is True
    assert c.ttl == constants.DEFAULT_CACHE_TTL
    assert c.type == constants.CACHE_TYPE_MEMORY
    assert c.memory == InMemoryCacheConfig()


def test_response_cache_configuration_sqlite_without_config() -> None:
    """Test that SQLite cache needs its configuration."""
    with pytest.raises(ValueError, match="SQLite cache is selected, but not configured"):
        ResponseCacheConfiguration(type=constants.CACHE_TYPE_SQLITE)


def test_response_cache_configuration_postgres_without_config() -> None:
    """Test that PostgreSQL cache needs its configuration."""
    with pytest.raises(
        ValueError, match="PostgreSQL cache is selected, but not configured"
    ):
        ResponseCacheConfiguration(type=constants.CACHE_TYPE_POSTGRES)


def test_response_cache_configuration_more_backends() -> None:
    """Test that only configuration for selected backend can be provided."""
    with pytest.raises(ValueError, match="Only SQLite cache config must be provided"):
        ResponseCacheConfiguration(
            type=constants.CACHE_TYPE_SQLITE,
            sqlite=SQLiteDatabaseConfiguration(db_path="/tmp/cache.db"),
            memory=InMemoryCacheConfig(),
        )


def test_response_cache_configuration_unknown_type() -> None:
    """Test that unknown cache type is rejected."""
    with pytest.raises(ValidationError):
        ResponseCacheConfiguration(type="redis")


def test_response_cache_configuration_ttl() -> None:
    """Test that TTL must be positive."""
    with pytest.raises(ValidationError):
        ResponseCacheConfiguration(ttl=0)


def test_rate_limits_configuration_defaults() -> None:
    """Test default rate limit policies."""
    r = RateLimitsConfiguration()
    assert r.policy("default").window == 15 * 60
    assert r.policy("default").max_requests == 100
    assert r.policy("expensive").window == 60 * 60
    assert r.policy("expensive").max_requests == 10
    assert r.exempt_loopback is True


def test_rate_limits_configuration_unknown_policy() -> None:
    """Test retrieving unknown rate limit policy."""
    with pytest.raises(ValueError, match="Unknown rate limit policy: cheap"):
        RateLimitsConfiguration().policy("cheap")


def test_rate_limits_configuration_two_storages() -> None:
    """Test that only one storage can be configured for rate limiter."""
    with pytest.raises(ValueError, match="Only one rate limiter storage"):
        RateLimitsConfiguration(
            sqlite=SQLiteDatabaseConfiguration(db_path="/tmp/limits.db"),
            postgres=PostgreSQLDatabaseConfiguration(
                db="db", user="user", password=SecretStr("password")
            ),
        )


def test_configuration_default_priority() -> None:
    """Test that OpenAI is the primary provider by default."""
    cfg = Configuration(name="test")
    assert cfg.provider_priority == ["openai", "gemini"]


@pytest.mark.parametrize(
    "priority,message",
    [
        ([], "Provider priority list can not be empty"),
        (["openai", "anthropic"], "Unknown providers in priority list"),
        (["gemini", "gemini"], "Provider priority list contains duplicates"),
    ],
)
def test_configuration_wrong_priority(priority: list[str], message: str) -> None:
    """Test validation of provider priority list."""
    with pytest.raises(ValueError, match=message):
        Configuration(name="test", provider_priority=priority)


def test_configuration_unknown_field() -> None:
    """Test that unknown fields are rejected."""
    with pytest.raises(ValidationError):
        Configuration(name="test", foo="bar")


def test_dump_configuration(tmp_path) -> None:
    """Test the ability to dump configuration without exposing secrets."""
    cfg = Configuration(
        name="test",
        providers=ProvidersConfiguration(
            openai=ProviderConfiguration(api_key=SecretStr("sk-secret"))
        ),
    )
    dump_file = tmp_path / "configuration.json"
    cfg.dump(str(dump_file))

    content = dump_file.read_text(encoding="utf-8")
    assert '"name": "test"' in content
    assert "sk-secret" not in content
