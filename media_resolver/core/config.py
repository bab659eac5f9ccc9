"""
Configuration management for media-resolver.

This module handles loading, validating, and providing access to the
application configuration stored in config.yaml, and the persisted
SoundCloud credential stored in the data file.

The configuration file contains:
    - SoundCloud client_id override and data file location
    - Network settings (timeout, User-Agent)
    - Default YouTube search language
    - Optional directory for log files

Configuration File Location:
    By default config.yaml is looked up in the current working directory.
    Unlike the credential, the file is optional: when it is absent every
    setting takes its default value.

Example config.yaml:
    soundcloud:
      client_id: null
      data_file: ".data/soundcloud.data"

    network:
      timeout: 30
      user_agent: "Mozilla/5.0 ..."

    youtube:
      language: "en-US;q=0.9"

    logging:
      directory: "~/.cache/media-resolver/logs"

Credential Data File:
    A small JSON document, {"client_id": "..."}, written by the
    'authorize' command and read once at startup.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from media_resolver.core.exceptions import ConfigError


# Default configuration file name (looked up in current working directory)
CONFIG_FILENAME = "config.yaml"

# Default location of the persisted SoundCloud credential
DEFAULT_DATA_FILE = Path(".data") / "soundcloud.data"

DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
DEFAULT_LANGUAGE = "en-US;q=0.9"


@dataclass(frozen=True)
class Credential:
    """
    SoundCloud API credential.

    Attributes:
        client_id: The public client_id used by the SoundCloud web player.
                   Sent as a query parameter with every api-v2 request.
    """
    client_id: str


@dataclass(frozen=True)
class SoundCloudConfig:
    """
    SoundCloud configuration.

    Attributes:
        client_id: Optional client_id set directly in config.yaml.
                   When set it takes precedence over the data file.
        data_file: Path of the persisted credential JSON file.
    """
    client_id: str | None
    data_file: Path


@dataclass(frozen=True)
class NetworkConfig:
    """
    HTTP settings shared by every request.

    Attributes:
        timeout: Seconds to wait for a response before failing.
        user_agent: User-Agent header sent with every request.
    """
    timeout: float
    user_agent: str


@dataclass(frozen=True)
class YouTubeConfig:
    """
    YouTube search defaults.

    Attributes:
        language: Accept-Language value used when a search does not
                  specify its own language hint.
    """
    language: str


@dataclass(frozen=True)
class LoggingConfig:
    """
    Logging configuration.

    Attributes:
        directory: Directory for log files, or None for console only.
    """
    directory: Path | None


@dataclass(frozen=True)
class Config:
    """
    Complete application configuration.

    Created by load_config() and treated as immutable (frozen dataclass).

    Example:
        config = load_config()
        credential = resolve_credential(config)
        print(f"Timeout: {config.network.timeout}s")
    """
    soundcloud: SoundCloudConfig
    network: NetworkConfig
    youtube: YouTubeConfig
    logging: LoggingConfig


def default_config() -> Config:
    """Return the configuration used when no config.yaml exists."""
    return Config(
        soundcloud=SoundCloudConfig(client_id=None, data_file=DEFAULT_DATA_FILE),
        network=NetworkConfig(timeout=DEFAULT_TIMEOUT, user_agent=DEFAULT_USER_AGENT),
        youtube=YouTubeConfig(language=DEFAULT_LANGUAGE),
        logging=LoggingConfig(directory=None),
    )


def load_config(config_path: Path | None = None) -> Config:
    """
    Load and validate configuration from config.yaml.

    Args:
        config_path: Optional explicit path to config file.
                     If None, looks for config.yaml in current working directory.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If an explicit config file is not found, the file has
                     invalid YAML syntax, or a field has an invalid value.

    Behavior:
        1. Locate config file (explicit path or CWD/config.yaml)
        2. Return defaults if the implicit file does not exist
        3. Read and parse YAML content
        4. Validate each section, applying defaults for missing fields
        5. Create and return frozen Config object
    """
    explicit = config_path is not None
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME

    if not config_path.exists():
        if explicit:
            raise ConfigError(
                f"Configuration file not found: {config_path}",
                details={"file_path": str(config_path)}
            )
        return default_config()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except IOError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    # An empty file is the same as no file
    if raw_config is None:
        return default_config()

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    return Config(
        soundcloud=_parse_soundcloud_config(_section(raw_config, "soundcloud")),
        network=_parse_network_config(_section(raw_config, "network")),
        youtube=_parse_youtube_config(_section(raw_config, "youtube")),
        logging=_parse_logging_config(_section(raw_config, "logging")),
    )


def _section(raw_config: dict[str, Any], name: str) -> dict[str, Any]:
    """Return an optional top-level section, validating it is a mapping."""
    section = raw_config.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(
            f"Section '{name}' must be a dictionary",
            details={"section": name}
        )
    return section


def _optional_string(section: dict[str, Any], key: str, field: str) -> str | None:
    """Read an optional non-empty string field."""
    value = section.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(
            f"'{field}' must be a non-empty string or null",
            details={"field": field}
        )
    return value.strip()


def _parse_soundcloud_config(section: dict[str, Any]) -> SoundCloudConfig:
    """
    Parse the soundcloud section.

    Raises:
        ConfigError: If client_id or data_file is not a non-empty string.
    """
    client_id = _optional_string(section, "client_id", "soundcloud.client_id")
    data_file = _optional_string(section, "data_file", "soundcloud.data_file")

    return SoundCloudConfig(
        client_id=client_id,
        data_file=Path(data_file).expanduser() if data_file else DEFAULT_DATA_FILE
    )


def _parse_network_config(section: dict[str, Any]) -> NetworkConfig:
    """
    Parse the network section.

    Raises:
        ConfigError: If timeout is not a positive number.
    """
    timeout = DEFAULT_TIMEOUT
    raw_timeout = section.get("timeout")
    if raw_timeout is not None:
        # bool is an int subclass, reject it explicitly
        if isinstance(raw_timeout, bool) or not isinstance(raw_timeout, (int, float)) or raw_timeout <= 0:
            raise ConfigError(
                "'network.timeout' must be a positive number",
                details={"field": "network.timeout", "value": raw_timeout}
            )
        timeout = float(raw_timeout)

    user_agent = _optional_string(section, "user_agent", "network.user_agent")

    return NetworkConfig(timeout=timeout, user_agent=user_agent or DEFAULT_USER_AGENT)


def _parse_youtube_config(section: dict[str, Any]) -> YouTubeConfig:
    """Parse the youtube section."""
    language = _optional_string(section, "language", "youtube.language")
    return YouTubeConfig(language=language or DEFAULT_LANGUAGE)


def _parse_logging_config(section: dict[str, Any]) -> LoggingConfig:
    """Parse the logging section, expanding ~ in the directory."""
    directory = _optional_string(section, "directory", "logging.directory")
    return LoggingConfig(
        directory=Path(directory).expanduser().resolve() if directory else None
    )


def load_credential(data_file: Path = DEFAULT_DATA_FILE) -> Credential | None:
    """
    Load the persisted SoundCloud credential.

    Args:
        data_file: Path of the JSON data file.

    Returns:
        The Credential, or None if the file does not exist.

    Raises:
        ConfigError: If the file exists but is unreadable, is not a JSON
                     object, or has no non-empty 'client_id'.
    """
    if not data_file.exists():
        return None

    try:
        with open(data_file, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (IOError, json.JSONDecodeError) as e:
        raise ConfigError(
            f"Failed to read SoundCloud data file: {e}",
            details={"file_path": str(data_file), "original_error": str(e)}
        ) from e

    client_id = raw.get("client_id") if isinstance(raw, dict) else None
    if not isinstance(client_id, str) or not client_id.strip():
        raise ConfigError(
            "SoundCloud data file has no 'client_id'",
            details={"file_path": str(data_file)}
        )

    return Credential(client_id=client_id.strip())


def save_credential(data_file: Path, client_id: str) -> Credential:
    """
    Persist a SoundCloud client_id to the data file.

    Creates the parent directory if needed and overwrites any existing file.

    Returns:
        The Credential that was written.
    """
    data_file.parent.mkdir(parents=True, exist_ok=True)
    credential = Credential(client_id=client_id.strip())
    with open(data_file, "w", encoding="utf-8") as f:
        json.dump({"client_id": credential.client_id}, f, indent=4)
    return credential


def resolve_credential(config: Config) -> Credential | None:
    """
    Pick the credential for this process.

    A client_id in config.yaml wins over the data file.
    """
    if config.soundcloud.client_id:
        return Credential(client_id=config.soundcloud.client_id)
    return load_credential(config.soundcloud.data_file)
