"""Application configuration helpers."""

from __future__ import annotations

from .env import env_int, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .feeds import FEED_SOURCES, FeedConfig, FeedKind, FeedSource, get_feed_config
from .http_resilience import NO_RETRY, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config
from .translation import TranslationConfig, get_translation_config

__all__ = [
    "FEED_SOURCES",
    "NO_RETRY",
    "ConfigurationError",
    "DatabaseConfig",
    "FeedConfig",
    "FeedKind",
    "FeedSource",
    "MissingConfigurationError",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "TranslationConfig",
    "configure_logging",
    "env_int",
    "get_database_config",
    "get_feed_config",
    "get_storage_config",
    "get_translation_config",
    "require_env_vars",
]
