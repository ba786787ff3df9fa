"""
youtube-tracks: Search YouTube and fetch playlists as normalized tracks.

This package is a thin client over the YouTube Data API v3. It resolves a
query (keywords, a video link or a playlist link) to a list of uniform
track records, and can download a video's audio stream with yt-dlp.

Modules:
    core/       - Configuration, logging, exceptions
    youtube/    - Data API client and track models
    download/   - Audio-only download via yt-dlp
    utils/      - URL parsing and chunking helpers
    cli.py      - Command-line interface

Usage:
    Command Line:
        ytt search "daft punk" --results 10
        ytt playlist "https://www.youtube.com/playlist?list=PL..." --limit 100
        ytt download "https://www.youtube.com/watch?v=..." song.webm

    Python API:
        from youtube_tracks import YouTubeClient, load_config

        config = load_config()
        async with YouTubeClient.from_config(config) as client:
            tracks = await client.search("daft punk", results=10)
            await client.download(tracks[0].url, "song.webm")

Configuration:
    Reads config.yaml from the current directory (optional when the
    YOUTUBE_API_KEY environment variable is set):

        youtube:
          api_key: "your_api_key"
        download:
          retries: 5

Dependencies:
    - aiohttp: Async HTTP for the Data API
    - isodate: ISO-8601 duration parsing
    - yt-dlp: Audio stream download
    - pyyaml / python-dotenv: Configuration
    - click / rich-click: CLI
    - tqdm: Console logging and download progress
"""

__version__ = "0.1.0"
__author__ = "youtube-tracks"
__license__ = "MIT"

from youtube_tracks.core import (
    Config,
    ConfigError,
    DownloadError,
    PlaylistURLError,
    YouTubeAPIError,
    YouTubeTracksError,
    get_logger,
    load_config,
    setup_logging,
)
from youtube_tracks.download import AudioDownloader
from youtube_tracks.youtube import PlaylistPage, Track, YouTubeClient

__all__ = [
    # Version
    "__version__",
    # Core
    "Config",
    "load_config",
    "setup_logging",
    "get_logger",
    # Exceptions
    "YouTubeTracksError",
    "ConfigError",
    "YouTubeAPIError",
    "PlaylistURLError",
    "DownloadError",
    # Client and models
    "YouTubeClient",
    "AudioDownloader",
    "Track",
    "PlaylistPage",
]
