"""Model with service configuration."""

import os
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
    PositiveFloat,
    PositiveInt,
    SecretStr,
)

from typing_extensions import Self, Literal

import constants


class ConfigurationBase(BaseModel):
    """Base class for all configuration models that rejects unknown fields."""

    model_config = ConfigDict(extra="forbid")


class SQLiteDatabaseConfiguration(ConfigurationBase):
    """SQLite database configuration."""

    db_path: str


class InMemoryCacheConfig(ConfigurationBase):
    """In-memory cache configuration."""

    max_entries: PositiveInt = constants.DEFAULT_CACHE_MAX_ENTRIES


class PostgreSQLDatabaseConfiguration(ConfigurationBase):
    """PostgreSQL database configuration."""

    host: str = "localhost"
    port: PositiveInt = 5432
    db: str
    user: str
    password: SecretStr
    ssl_mode: str = constants.POSTGRES_DEFAULT_SSL_MODE
    gss_encmode: str = constants.POSTGRES_DEFAULT_GSS_ENCMODE

    @model_validator(mode="after")
    def check_postgres_configuration(self) -> Self:
        """Check PostgreSQL configuration."""
        if self.port > 65535:
            raise ValueError("Port value should be less than 65536")
        return self


class ServiceConfiguration(ConfigurationBase):
    """Service configuration."""

    host: str = "localhost"
    port: PositiveInt = 8080
    workers: PositiveInt = 1
    color_log: bool = True
    access_log: bool = True

    @model_validator(mode="after")
    def check_service_configuration(self) -> Self:
        """Check service configuration."""
        if self.port > 65535:
            raise ValueError("Port value should be less than 65536")
        return self


class ProviderConfiguration(ConfigurationBase):
    """Credentials and endpoint of one AI provider.

    The credential is either given directly in `api_key` or read from the
    environment variable named by `api_key_env`. It is resolved every time it
    is needed, so rotating the environment takes effect without restart.
    """

    api_key: Optional[SecretStr] = None
    api_key_env: Optional[str] = None
    base_url: Optional[str] = None
    default_model: Optional[str] = None

    def resolve_api_key(self) -> Optional[str]:
        """Return the credential or None when the provider is not credentialed."""
        if self.api_key is not None:
            value = self.api_key.get_secret_value()
        elif self.api_key_env is not None:
            value = os.environ.get(self.api_key_env, "")
        else:
            value = ""
        value = value.strip()
        return value or None

    @property
    def credentialed(self) -> bool:
        """Check if a non-empty credential is available."""
        return self.resolve_api_key() is not None


def _openai_configuration() -> ProviderConfiguration:
    return ProviderConfiguration(api_key_env=constants.DEFAULT_OPENAI_API_KEY_ENV)


def _gemini_configuration() -> ProviderConfiguration:
    return ProviderConfiguration(
        api_key_env=constants.DEFAULT_GEMINI_API_KEY_ENV,
        default_model=constants.DEFAULT_GEMINI_MODEL,
    )


class ProvidersConfiguration(ConfigurationBase):
    """Configuration of all known AI providers."""

    openai: ProviderConfiguration = Field(default_factory=_openai_configuration)
    gemini: ProviderConfiguration = Field(default_factory=_gemini_configuration)

    def get(self, name: str) -> ProviderConfiguration:
        """Return configuration for provider with given name."""
        match name:
            case constants.PROVIDER_OPENAI:
                return self.openai
            case constants.PROVIDER_GEMINI:
                return self.gemini
            case _:
                raise ValueError(f"Unknown provider: {name}")

    def credentials(self) -> dict[str, bool]:
        """Return credential presence for every known provider."""
        return {
            name: self.get(name).credentialed for name in constants.SUPPORTED_PROVIDERS
        }


class ResponseCacheConfiguration(ConfigurationBase):
    """Response cache configuration."""

    enabled: bool = True
    ttl: PositiveInt = constants.DEFAULT_CACHE_TTL
    type: Literal["noop", "memory", "sqlite", "postgres"] = constants.CACHE_TYPE_MEMORY
    memory: Optional[InMemoryCacheConfig] = None
    sqlite: Optional[SQLiteDatabaseConfiguration] = None
    postgres: Optional[PostgreSQLDatabaseConfiguration] = None

    @model_validator(mode="after")
    def check_cache_configuration(self) -> Self:
        """Check response cache configuration."""
        match self.type:
            case constants.CACHE_TYPE_MEMORY:
                # no other DBs configuration allowed
                if any([self.sqlite, self.postgres]):
                    raise ValueError("Only memory cache config must be provided")
                if self.memory is None:
                    self.memory = InMemoryCacheConfig()
            case constants.CACHE_TYPE_SQLITE:
                if self.sqlite is None:
                    raise ValueError("SQLite cache is selected, but not configured")
                if any([self.memory, self.postgres]):
                    raise ValueError("Only SQLite cache config must be provided")
            case constants.CACHE_TYPE_POSTGRES:
                if self.postgres is None:
                    raise ValueError("PostgreSQL cache is selected, but not configured")
                if any([self.memory, self.sqlite]):
                    raise ValueError("Only PostgreSQL cache config must be provided")
        return self


class RateLimitPolicy(ConfigurationBase):
    """Ceiling of requests allowed per caller in one time window."""

    window: PositiveInt
    max_requests: PositiveInt


def _default_policy() -> RateLimitPolicy:
    return RateLimitPolicy(
        window=constants.DEFAULT_RATE_LIMIT_WINDOW,
        max_requests=constants.DEFAULT_RATE_LIMIT_MAX_REQUESTS,
    )


def _expensive_policy() -> RateLimitPolicy:
    return RateLimitPolicy(
        window=constants.EXPENSIVE_RATE_LIMIT_WINDOW,
        max_requests=constants.EXPENSIVE_RATE_LIMIT_MAX_REQUESTS,
    )


class RateLimitsConfiguration(ConfigurationBase):
    """Rate limiter configuration."""

    default: RateLimitPolicy = Field(default_factory=_default_policy)
    expensive: RateLimitPolicy = Field(default_factory=_expensive_policy)
    exempt_loopback: bool = True
    sqlite: Optional[SQLiteDatabaseConfiguration] = None
    postgres: Optional[PostgreSQLDatabaseConfiguration] = None

    @model_validator(mode="after")
    def check_storage_configuration(self) -> Self:
        """Check that at most one storage is configured."""
        if self.sqlite is not None and self.postgres is not None:
            raise ValueError("Only one rate limiter storage can be provided")
        return self

    def policy(self, name: str) -> RateLimitPolicy:
        """Return policy with given name."""
        match name:
            case constants.RATE_LIMIT_POLICY_DEFAULT:
                return self.default
            case constants.RATE_LIMIT_POLICY_EXPENSIVE:
                return self.expensive
            case _:
                raise ValueError(f"Unknown rate limit policy: {name}")


class TimeoutsConfiguration(ConfigurationBase):
    """Timeouts for provider calls per operation class, in seconds."""

    text: PositiveFloat = constants.DEFAULT_TEXT_TIMEOUT
    multimodal: PositiveFloat = constants.DEFAULT_MULTIMODAL_TIMEOUT


class Configuration(ConfigurationBase):
    """Global service configuration."""

    name: str
    service: ServiceConfiguration = Field(default_factory=ServiceConfiguration)
    providers: ProvidersConfiguration = Field(default_factory=ProvidersConfiguration)
    provider_priority: list[str] = Field(
        default_factory=lambda: list(constants.SUPPORTED_PROVIDERS)
    )
    response_cache: ResponseCacheConfiguration = Field(
        default_factory=ResponseCacheConfiguration
    )
    rate_limits: RateLimitsConfiguration = Field(
        default_factory=RateLimitsConfiguration
    )
    timeouts: TimeoutsConfiguration = Field(default_factory=TimeoutsConfiguration)

    @model_validator(mode="after")
    def check_provider_priority(self) -> Self:
        """Check that provider priority lists known providers only once."""
        if not self.provider_priority:
            raise ValueError("Provider priority list can not be empty")
        unknown = set(self.provider_priority) - set(constants.SUPPORTED_PROVIDERS)
        if unknown:
            raise ValueError(f"Unknown providers in priority list: {sorted(unknown)}")
        if len(set(self.provider_priority)) != len(self.provider_priority):
            raise ValueError("Provider priority list contains duplicates")
        return self

    def dump(self, filename: str = "configuration.json") -> None:
        """Dump actual configuration into JSON file."""
        with open(filename, "w", encoding="utf-8") as fout:
            fout.write(self.model_dump_json(indent=4))
