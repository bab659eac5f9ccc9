"""
Core module for media-resolver.

This module provides the foundational components used throughout the application:
    - exceptions: Custom exception classes for error handling
    - config: Configuration loading and credential persistence
    - logger: Logging system with console and file outputs
    - http: requests-based HTTP client

Usage:
    from media_resolver.core import (
        Config, load_config, resolve_credential,
        HttpClient,
        setup_logging, get_logger,
        MediaResolverError, ParseError, ConfigError
    )
"""

from media_resolver.core.config import (
    Config,
    Credential,
    LoggingConfig,
    NetworkConfig,
    SoundCloudConfig,
    YouTubeConfig,
    default_config,
    load_config,
    load_credential,
    resolve_credential,
    save_credential,
)
from media_resolver.core.exceptions import (
    ConfigError,
    MediaResolverError,
    NetworkError,
    ParseError,
    StateError,
    ValidationError,
)
from media_resolver.core.http import HttpClient, parse_json_object
from media_resolver.core.logger import (
    get_logger,
    log_skipped_entry,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    # Config
    "Config",
    "Credential",
    "SoundCloudConfig",
    "NetworkConfig",
    "YouTubeConfig",
    "LoggingConfig",
    "default_config",
    "load_config",
    "load_credential",
    "save_credential",
    "resolve_credential",
    # Exceptions
    "MediaResolverError",
    "ParseError",
    "ConfigError",
    "ValidationError",
    "NetworkError",
    "StateError",
    # HTTP
    "HttpClient",
    "parse_json_object",
    # Logger
    "setup_logging",
    "get_logger",
    "log_skipped_entry",
    "shutdown_logging",
]
