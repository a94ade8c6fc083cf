"""Constants used in business logic."""

# Known AI providers
PROVIDER_OPENAI = "openai"
PROVIDER_GEMINI = "gemini"
# Supported providers in default priority order; the first one is the primary
SUPPORTED_PROVIDERS = (PROVIDER_OPENAI, PROVIDER_GEMINI)

# Environment variables consulted when no credential is set in configuration
DEFAULT_OPENAI_API_KEY_ENV = "OPENAI_API_KEY"
DEFAULT_GEMINI_API_KEY_ENV = "GOOGLE_API_KEY"

# Model used by the single-prompt provider when the request names a model of
# another provider
DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"

# Message roles accepted in normalized requests
MESSAGE_ROLE_SYSTEM = "system"
MESSAGE_ROLE_USER = "user"
MESSAGE_ROLE_ASSISTANT = "assistant"

# Sampling temperature bounds
MIN_TEMPERATURE = 0.0
MAX_TEMPERATURE = 2.0

# Response cache
CACHE_KEY_PREFIX = "ai:"
DEFAULT_CACHE_TTL = 3600
CACHE_TYPE_NOOP = "noop"
CACHE_TYPE_MEMORY = "memory"
CACHE_TYPE_SQLITE = "sqlite"
CACHE_TYPE_POSTGRES = "postgres"
DEFAULT_CACHE_MAX_ENTRIES = 10000

# Rate limiting policies
RATE_LIMIT_POLICY_DEFAULT = "default"
RATE_LIMIT_POLICY_EXPENSIVE = "expensive"
DEFAULT_RATE_LIMIT_WINDOW = 15 * 60
DEFAULT_RATE_LIMIT_MAX_REQUESTS = 100
EXPENSIVE_RATE_LIMIT_WINDOW = 60 * 60
EXPENSIVE_RATE_LIMIT_MAX_REQUESTS = 10
# Callers never subject to rate limiting when loopback exemption is enabled
LOOPBACK_ADDRESSES = frozenset({"127.0.0.1", "::1", "localhost"})

# Per operation class timeouts for provider calls, in seconds
DEFAULT_TEXT_TIMEOUT = 30.0
DEFAULT_MULTIMODAL_TIMEOUT = 60.0

# Content returned by a provider that produced nothing usable
EMPTY_RESPONSE_MESSAGE = "Empty response from provider"
NO_PROVIDERS_CONFIGURED_MESSAGE = "No AI providers configured"

# PostgreSQL connection constants
# See: https://www.postgresql.org/docs/current/libpq-connect.html#LIBPQ-CONNECT-SSLMODE
POSTGRES_DEFAULT_SSL_MODE = "prefer"
# See: https://www.postgresql.org/docs/current/libpq-connect.html#LIBPQ-CONNECT-GSSENCMODE
POSTGRES_DEFAULT_GSS_ENCMODE = "prefer"

# Environment variable with path to configuration file, used by uvicorn workers
CONFIGURATION_PATH_ENV = "AI_ORCHESTRATOR_CONFIG_PATH"
DEFAULT_CONFIGURATION_FILE = "ai-orchestrator.yaml"
