"""Configuration loader."""

import logging
from typing import Any, Optional

import yaml
from models.config import (
    Configuration,
    ProvidersConfiguration,
    RateLimitsConfiguration,
    ResponseCacheConfiguration,
    ServiceConfiguration,
    TimeoutsConfiguration,
)


logger = logging.getLogger(__name__)


class LogicError(Exception):
    """Error in application logic."""


class AppConfig:
    """Singleton class to load and store the configuration."""

    _instance = None

    def __new__(cls, *args: Any, **kwargs: Any) -> "AppConfig":
        """Create a new instance of the class."""
        if not isinstance(cls._instance, cls):
            cls._instance = super().__new__(cls, *args, **kwargs)
        return cls._instance

    def __init__(self) -> None:
        """Initialize the class instance."""
        self._configuration: Optional[Configuration] = None

    def load_configuration(self, filename: str) -> None:
        """Load configuration from YAML file."""
        with open(filename, encoding="utf-8") as fin:
            config_dict = yaml.safe_load(fin)
            # secrets are hidden by pydantic when the model is printed, but the
            # raw dictionary can contain them
            logger.info("Loaded configuration from %s", filename)
            self.init_from_dict(config_dict)

    def init_from_dict(self, config_dict: dict[Any, Any]) -> None:
        """Initialize configuration from a dictionary."""
        self._configuration = Configuration(**config_dict)

    @property
    def is_loaded(self) -> bool:
        """Check if configuration has been loaded."""
        return self._configuration is not None

    @property
    def configuration(self) -> Configuration:
        """Return the whole configuration."""
        if self._configuration is None:
            raise LogicError("logic error: configuration is not loaded")
        return self._configuration

    @property
    def service_configuration(self) -> ServiceConfiguration:
        """Return service configuration."""
        if self._configuration is None:
            raise LogicError("logic error: configuration is not loaded")
        return self._configuration.service

    @property
    def providers_configuration(self) -> ProvidersConfiguration:
        """Return AI providers configuration."""
        if self._configuration is None:
            raise LogicError("logic error: configuration is not loaded")
        return self._configuration.providers

    @property
    def response_cache_configuration(self) -> ResponseCacheConfiguration:
        """Return response cache configuration."""
        if self._configuration is None:
            raise LogicError("logic error: configuration is not loaded")
        return self._configuration.response_cache

    @property
    def rate_limits_configuration(self) -> RateLimitsConfiguration:
        """Return rate limiter configuration."""
        if self._configuration is None:
            raise LogicError("logic error: configuration is not loaded")
        return self._configuration.rate_limits

    @property
    def timeouts_configuration(self) -> TimeoutsConfiguration:
        """Return provider call timeouts."""
        if self._configuration is None:
            raise LogicError("logic error: configuration is not loaded")
        return self._configuration.timeouts


configuration: AppConfig = AppConfig()
