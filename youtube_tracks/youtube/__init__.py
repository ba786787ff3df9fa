"""
YouTube Data API integration module for youtube-tracks.

Components:
    - Track: Normalized track record
    - PlaylistPage: One page of playlist results (pagination only)
    - YouTubeClient: Async client for search, playlists and downloads

Usage:
    from youtube_tracks.youtube import YouTubeClient, Track

    async with YouTubeClient(api_key) as client:
        tracks = await client.search("boards of canada", results=5)
        for track in tracks:
            print(f"{track.duration} {track.title} {track.url}")
"""

from youtube_tracks.youtube.client import (
    MAX_SEARCH_RESULTS,
    PLAYLIST_PAGE_SIZE,
    YouTubeClient,
)
from youtube_tracks.youtube.models import (
    SOURCE_NAME,
    PlaylistPage,
    Track,
    format_duration,
    select_thumbnail,
)

__all__ = [
    # Models
    "Track",
    "PlaylistPage",
    "SOURCE_NAME",
    "format_duration",
    "select_thumbnail",
    # Client
    "YouTubeClient",
    "PLAYLIST_PAGE_SIZE",
    "MAX_SEARCH_RESULTS",
]
