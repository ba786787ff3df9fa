"""
Download module for youtube-tracks.

Components:
    - AudioDownloader: yt-dlp based audio-only downloader
    - YtDlpLogger: bridges yt-dlp output into the logging hierarchy

Usage:
    from youtube_tracks.download import AudioDownloader

    path = await AudioDownloader().download(url, Path("song.webm"))
"""

from youtube_tracks.download.downloader import (
    AUDIO_FORMAT,
    AudioDownloader,
    DownloadProgress,
    YtDlpLogger,
)

__all__ = [
    "AUDIO_FORMAT",
    "AudioDownloader",
    "DownloadProgress",
    "YtDlpLogger",
]
