"""Application configuration helpers."""

from __future__ import annotations

from .env import env_float, env_int, optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .importing import ImportConfig, get_import_config
from .logging import configure_logging, resolve_log_level
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_database_uri,
    get_storage_config,
)
from .venues import KnownVenue, VenueRegistry, get_venue_registry, load_venue_file

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "ImportConfig",
    "KnownVenue",
    "MissingConfigurationError",
    "StorageConfig",
    "VenueRegistry",
    "configure_logging",
    "env_float",
    "env_int",
    "get_database_config",
    "get_database_uri",
    "get_import_config",
    "get_storage_config",
    "get_venue_registry",
    "load_venue_file",
    "optional_env_var",
    "require_env_vars",
    "resolve_log_level",
]
