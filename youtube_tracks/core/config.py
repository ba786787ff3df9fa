"""
Configuration management for youtube-tracks.

This module handles loading, validating, and providing access to the
configuration stored in config.yaml.

The configuration file contains:
    - YouTube Data API key and endpoint settings
    - Download settings (retry count, optional cookie file)
    - Logging settings (optional log directory, console level)

The API key may also come from the YOUTUBE_API_KEY environment variable
(a .env file in the working directory is loaded first). The environment
value wins over the file, and when it is set config.yaml becomes optional.

Example config.yaml:
    youtube:
      api_key: "your_api_key_here"
      base_url: "https://www.youtube.com"
      timeout: 30

    download:
      retries: 5
      cookie_file: null

    logging:
      directory: "~/.cache/youtube-tracks/logs"
      level: "INFO"
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from youtube_tracks.core.exceptions import ConfigError


CONFIG_FILENAME = "config.yaml"
API_KEY_ENV_VAR = "YOUTUBE_API_KEY"

DEFAULT_BASE_URL = "https://www.youtube.com"
DEFAULT_API_URL = "https://www.googleapis.com/youtube/v3"
DEFAULT_TIMEOUT = 30.0
# The videos endpoint accepts at most 50 ids per call
MAX_IDS_PER_REQUEST = 50
DEFAULT_RETRIES = 5

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class YouTubeConfig:
    """
    YouTube Data API settings.

    Attributes:
        api_key: Data API v3 key from the Google Cloud console.
        base_url: Root used to build watch links ({base_url}/watch?v=ID).
        api_url: Root of the Data API v3 REST endpoints.
        timeout: Total timeout per HTTP request, in seconds.
        ids_per_request: Maximum video ids per videos lookup (1-50).
    """
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    ids_per_request: int = MAX_IDS_PER_REQUEST


@dataclass(frozen=True)
class DownloadConfig:
    """
    Download behavior configuration.

    Attributes:
        retries: Retry count handed to yt-dlp. Default: 5.
        cookie_file: Optional cookies.txt for age-restricted videos.
    """
    retries: int = DEFAULT_RETRIES
    cookie_file: Path | None = None


@dataclass(frozen=True)
class LoggingConfig:
    """
    Logging configuration.

    Attributes:
        directory: Directory for log files, or None for console only.
        level: Console log level name.
    """
    directory: Path | None = None
    level: str = "INFO"


@dataclass(frozen=True)
class Config:
    """
    Complete application configuration.

    Created by load_config() and immutable afterwards.

    Example:
        config = load_config()
        client = YouTubeClient(config.youtube.api_key, config.youtube.base_url)
    """
    youtube: YouTubeConfig
    download: DownloadConfig
    logging: LoggingConfig


def load_config(config_path: Path | None = None) -> Config:
    """
    Load and validate configuration from config.yaml and the environment.

    Args:
        config_path: Optional explicit path to config file.
                     If None, looks for config.yaml in the working directory.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If an explicit config file is missing, the YAML is
                     invalid, a field has an invalid value, or no API key
                     is available from either the file or the environment.

    Behavior:
        1. Load .env into the process environment (existing vars win)
        2. Locate and parse the YAML file if it exists
        3. Validate each section, applying defaults
        4. Let YOUTUBE_API_KEY override youtube.api_key
    """
    load_dotenv()

    explicit = config_path is not None
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME

    raw_config: dict[str, Any] = {}
    if config_path.exists():
        raw_config = _read_yaml(config_path)
    elif explicit:
        raise ConfigError(
            f"Configuration file not found: {config_path}",
            details={"file_path": str(config_path)}
        )

    youtube_section = _section(raw_config, "youtube")
    env_key = os.environ.get(API_KEY_ENV_VAR, "").strip()
    if env_key:
        youtube_section = {**youtube_section, "api_key": env_key}

    return Config(
        youtube=_parse_youtube_config(youtube_section),
        download=_parse_download_config(_section(raw_config, "download")),
        logging=_parse_logging_config(_section(raw_config, "logging")),
    )


def _read_yaml(config_path: Path) -> dict[str, Any]:
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

    # An empty file parses to None
    if raw_config is None:
        return {}

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    return raw_config


def _section(raw_config: dict[str, Any], name: str) -> dict[str, Any]:
    """Return a config section, treating a missing section as empty."""
    section = raw_config.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(
            f"Section '{name}' must be a dictionary",
            details={"section": name}
        )
    return section


def _parse_youtube_config(section: dict[str, Any]) -> YouTubeConfig:
    """
    Parse and validate the youtube configuration section.

    Raises:
        ConfigError: If api_key is missing or another field is invalid.
    """
    api_key = section.get("api_key", "")
    if not isinstance(api_key, str) or not api_key.strip():
        raise ConfigError(
            f"'youtube.api_key' must be a non-empty string "
            f"(or set the {API_KEY_ENV_VAR} environment variable)",
            details={"field": "youtube.api_key"}
        )

    base_url = _url_field(section, "base_url", DEFAULT_BASE_URL)
    api_url = _url_field(section, "api_url", DEFAULT_API_URL)

    timeout = section.get("timeout", DEFAULT_TIMEOUT)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigError(
            "'youtube.timeout' must be a positive number",
            details={"field": "youtube.timeout", "value": timeout}
        )

    ids_per_request = section.get("ids_per_request", MAX_IDS_PER_REQUEST)
    if (
        isinstance(ids_per_request, bool)
        or not isinstance(ids_per_request, int)
        or not 1 <= ids_per_request <= MAX_IDS_PER_REQUEST
    ):
        raise ConfigError(
            f"'youtube.ids_per_request' must be an integer between 1 and {MAX_IDS_PER_REQUEST}",
            details={"field": "youtube.ids_per_request", "value": ids_per_request}
        )

    return YouTubeConfig(
        api_key=api_key.strip(),
        base_url=base_url,
        api_url=api_url,
        timeout=float(timeout),
        ids_per_request=ids_per_request,
    )


def _url_field(section: dict[str, Any], name: str, default: str) -> str:
    value = section.get(name, default)
    if not isinstance(value, str) or not value.strip().startswith(("http://", "https://")):
        raise ConfigError(
            f"'youtube.{name}' must be an http(s) URL",
            details={"field": f"youtube.{name}", "value": value}
        )
    # Watch links and endpoints are joined with '/'
    return value.strip().rstrip("/")


def _parse_download_config(section: dict[str, Any]) -> DownloadConfig:
    """
    Parse and validate the download configuration section.

    Raises:
        ConfigError: If retries is not a non-negative integer, or if
                     cookie_file is given but doesn't exist.
    """
    retries = section.get("retries", DEFAULT_RETRIES)
    if isinstance(retries, bool) or not isinstance(retries, int) or retries < 0:
        raise ConfigError(
            "'download.retries' must be a non-negative integer",
            details={"field": "download.retries", "value": retries}
        )

    cookie_file = None
    raw_cookie = section.get("cookie_file")
    if raw_cookie is not None:
        if not isinstance(raw_cookie, str):
            raise ConfigError(
                "'download.cookie_file' must be a string path or null",
                details={"field": "download.cookie_file"}
            )

        cookie_path = Path(raw_cookie).expanduser().resolve()
        if not cookie_path.exists():
            raise ConfigError(
                f"Cookie file not found: {cookie_path}",
                details={"field": "download.cookie_file", "path": str(cookie_path)}
            )
        cookie_file = cookie_path

    return DownloadConfig(retries=retries, cookie_file=cookie_file)


def _parse_logging_config(section: dict[str, Any]) -> LoggingConfig:
    directory = None
    raw_directory = section.get("directory")
    if raw_directory is not None:
        if not isinstance(raw_directory, str) or not raw_directory.strip():
            raise ConfigError(
                "'logging.directory' must be a non-empty string or null",
                details={"field": "logging.directory"}
            )
        directory = Path(raw_directory.strip()).expanduser().resolve()

    level = section.get("level", "INFO")
    if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
        raise ConfigError(
            f"'logging.level' must be one of {', '.join(LOG_LEVELS)}",
            details={"field": "logging.level", "value": level}
        )

    return LoggingConfig(directory=directory, level=level.upper())
