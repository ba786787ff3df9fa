"""
Core module for youtube-tracks.

Foundational components used throughout the package:
    - exceptions: Custom exception classes for error handling
    - config: Configuration loading and validation
    - logger: Logging system with console and file outputs

Usage:
    from youtube_tracks.core import (
        Config, load_config,
        setup_logging, get_logger,
        YouTubeTracksError, YouTubeAPIError
    )
"""

from youtube_tracks.core.config import (
    Config,
    DownloadConfig,
    LoggingConfig,
    YouTubeConfig,
    load_config,
)
from youtube_tracks.core.exceptions import (
    ConfigError,
    DownloadError,
    PlaylistURLError,
    YouTubeAPIError,
    YouTubeTracksError,
)
from youtube_tracks.core.logger import (
    get_logger,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    # Config
    "Config",
    "YouTubeConfig",
    "DownloadConfig",
    "LoggingConfig",
    "load_config",
    # Exceptions
    "YouTubeTracksError",
    "ConfigError",
    "YouTubeAPIError",
    "PlaylistURLError",
    "DownloadError",
    # Logger
    "setup_logging",
    "get_logger",
    "shutdown_logging",
]
