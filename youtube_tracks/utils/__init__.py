"""
Utility functions for youtube-tracks.

This module provides the small helpers the API client is built on:
    - URL detection and YouTube id extraction
    - Splitting id lists into request-sized chunks

Usage:
    from youtube_tracks.utils import (
        is_url,
        extract_playlist_id,
        extract_video_id,
        chunked
    )
"""

import re
from typing import Iterable, TypeVar
from urllib.parse import parse_qs, urlparse

from youtube_tracks.core.exceptions import PlaylistURLError


T = TypeVar("T")

_TLD_PATTERN = re.compile(r"^[a-z]{2,63}$", re.IGNORECASE)

# Path prefixes that carry the video id as the next segment
_VIDEO_PATH_PREFIXES = ("shorts", "embed", "live", "v")


def _parse(value: str):
    """Parse a URL, assuming http:// when no scheme is given."""
    value = value.strip()
    if "://" not in value:
        value = f"http://{value}"
    return urlparse(value)


def is_url(value: str) -> bool:
    """
    Check whether a string looks like a web URL.

    The scheme is optional, so "youtube.com/watch?v=ID" counts as a URL
    while a keyword phrase such as "daft punk" does not.

    Args:
        value: Candidate string (a search query or a link).

    Returns:
        True if the value is an http(s) URL with a dotted host name.

    Examples:
        is_url("https://www.youtube.com/watch?v=dQw4w9WgXcQ")  # True
        is_url("youtu.be/dQw4w9WgXcQ")                         # True
        is_url("never gonna give you up")                      # False
        is_url("AC/DC")                                        # False
    """
    if not isinstance(value, str):
        return False

    value = value.strip()
    if not value or any(ch.isspace() for ch in value):
        return False

    try:
        parsed = _parse(value)
        hostname = parsed.hostname
    except ValueError:
        return False

    if parsed.scheme not in ("http", "https") or not hostname:
        return False

    labels = hostname.split(".")
    if len(labels) < 2 or not all(labels):
        return False

    return bool(_TLD_PATTERN.match(labels[-1]))


def extract_playlist_id(url: str) -> str:
    """
    Extract the playlist id from a YouTube playlist URL.

    Args:
        url: URL containing a 'list' query parameter.

    Returns:
        The playlist id.

    Raises:
        PlaylistURLError: If url is not a URL or carries no playlist id.

    Examples:
        extract_playlist_id("https://www.youtube.com/playlist?list=PL123")
        # Returns: "PL123"

        extract_playlist_id("https://www.youtube.com/watch?v=abc&list=PL123&index=2")
        # Returns: "PL123"
    """
    if not is_url(url):
        raise PlaylistURLError(
            f"Incorrect playlist URL: {url}",
            details={"url": url}
        )

    values = parse_qs(_parse(url).query).get("list", [])
    playlist_id = next((v.strip() for v in values if v.strip()), None)
    if playlist_id is None:
        raise PlaylistURLError(
            f"Playlist URL has no 'list' parameter: {url}",
            details={"url": url}
        )

    return playlist_id


def extract_video_id(url: str) -> str | None:
    """
    Extract the video id from a YouTube video URL.

    Handles these forms:
        - https://www.youtube.com/watch?v=ID
        - https://youtu.be/ID
        - https://www.youtube.com/shorts/ID (also /embed/, /live/, /v/)

    Anything else falls back to the text after the first '=' (up to the
    next '&'), which covers unusual hosts that still put the id first.

    Returns:
        The video id, or None when nothing id-like is present.
    """
    parsed = _parse(url)

    values = parse_qs(parsed.query).get("v", [])
    video_id = next((v.strip() for v in values if v.strip()), None)
    if video_id:
        return video_id

    segments = [s for s in parsed.path.split("/") if s]
    if parsed.hostname and parsed.hostname.endswith("youtu.be") and segments:
        return segments[0]

    if len(segments) >= 2 and segments[0] in _VIDEO_PATH_PREFIXES:
        return segments[1]

    if "=" in url:
        return url.split("=", 1)[1].split("&", 1)[0] or None

    return None


def chunked(items: Iterable[T], size: int) -> list[list[T]]:
    """
    Split items into consecutive lists of at most `size` elements.

    Args:
        items: Items to split. The input is not modified.
        size: Maximum chunk length (must be >= 1).

    Raises:
        ValueError: If size is smaller than 1.

    Example:
        chunked(["a", "b", "c", "d", "e"], 2)
        # Returns: [["a", "b"], ["c", "d"], ["e"]]
    """
    if size < 1:
        raise ValueError(f"Chunk size must be at least 1, got {size}")

    items_list = list(items)
    return [items_list[i:i + size] for i in range(0, len(items_list), size)]
