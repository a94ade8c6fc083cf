"""Unit tests."""

from configuration import configuration  # noqa: F401

config_dict = {
    "name": "test",
    "service": {
        "host": "localhost",
        "port": 8080,
        "workers": 1,
        "color_log": True,
        "access_log": True,
    },
    "providers": {
        "openai": {"api_key": "sk-test-openai"},
        "gemini": {"api_key_env": "TEST_GEMINI_API_KEY_NOT_SET"},
    },
    "provider_priority": ["openai", "gemini"],
    "response_cache": {"type": "memory", "ttl": 3600},
    "rate_limits": {
        "default": {"window": 900, "max_requests": 100},
        "expensive": {"window": 3600, "max_requests": 10},
        "exempt_loopback": True,
    },
}

# NOTE: Configuration must be initialized before importing endpoints,
# since the application reads it during import time
configuration.init_from_dict(config_dict)
