"""
Data models for YouTube Data API results.

This module defines the track record every search and playlist lookup is
normalized into, the transient page result used while paginating a
playlist, and the two normalization helpers (thumbnail choice and
duration formatting).
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta
from typing import Any

import isodate

from youtube_tracks.core.logger import get_logger

logger = get_logger(__name__)


# Value of Track.source for every record built by this package
SOURCE_NAME = "Youtube"

# Thumbnail keys from lowest to highest priority; the last one present wins
THUMBNAIL_PRIORITY = ("default", "medium", "standard", "high", "maxres")


def select_thumbnail(thumbnails: dict[str, Any] | None) -> str | None:
    """
    Pick the preferred thumbnail URL from a snippet's thumbnails map.

    Args:
        thumbnails: The snippet.thumbnails dictionary, keyed by size name.

    Returns:
        URL of the highest priority thumbnail present, or None.

    Examples:
        select_thumbnail({"default": {"url": "a"}, "high": {"url": "c"}})  # "c"
        select_thumbnail({})                                               # None
    """
    image = None
    for key in THUMBNAIL_PRIORITY:
        entry = (thumbnails or {}).get(key)
        if entry and entry.get("url"):
            image = entry["url"]
    return image


def format_duration(iso_duration: str | None) -> str:
    """
    Format an ISO-8601 duration as zero-padded HH:MM:SS.

    Args:
        iso_duration: contentDetails.duration, e.g. "PT1H2M3S".
                      None or "" (no duration reported) formats as zero,
                      and so does a value that is not ISO-8601
                      (logged as a warning).

    Returns:
        Duration string. Hours are total hours and are not wrapped at
        24: a video longer than a day keeps its days, so "P1DT1S" is
        "24:00:01" rather than "00:00:01".

    Examples:
        format_duration("PT1H2M3S")  # "01:02:03"
        format_duration("PT4M13S")   # "00:04:13"
        format_duration("P1DT1S")    # "24:00:01"
    """
    if not iso_duration:
        return "00:00:00"

    try:
        duration = isodate.parse_duration(iso_duration)
    except (isodate.ISO8601Error, TypeError, ValueError) as e:
        logger.warning(f"Could not parse video duration '{iso_duration}': {e}")
        return "00:00:00"

    # Year/month durations come back as isodate.Duration, not timedelta
    if not isinstance(duration, timedelta):
        duration = duration.totimedelta(start=datetime(2000, 1, 1))

    total_seconds = max(int(duration.total_seconds()), 0)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def video_id_of(item: dict[str, Any]) -> str:
    """
    Get the video id of a videos, search or playlistItems resource.

    The three endpoints put it in different places:
        - videos:        item["id"] (string)
        - search:        item["id"]["videoId"]
        - playlistItems: item["snippet"]["resourceId"]["videoId"]
                         (item["id"] is the playlist item id there)
    """
    resource_id = (item.get("snippet") or {}).get("resourceId") or {}
    if resource_id.get("videoId"):
        return resource_id["videoId"]

    item_id = item.get("id")
    if isinstance(item_id, dict):
        return item_id.get("videoId", "")
    return item_id or ""


@dataclass(frozen=True)
class Track:
    """
    Immutable, normalized representation of one video or playlist item.

    Attributes:
        title: Video title.
        source: Always SOURCE_NAME ("Youtube").
        image: URL of the best thumbnail, or None.
        description: Video description (may be empty).
        url: Canonical watch link, "{base_url}/watch?v={video_id}".
        duration: Zero-padded "HH:MM:SS".
        added_by: Placeholder for the user who queued the track; always
                  None when built from the API.

    Class Methods:
        from_api_item: Create from a Data API resource.

    Example:
        track = Track.from_api_item(item, "https://www.youtube.com")
        print(f"{track.title} [{track.duration}] {track.url}")
    """

    title: str
    source: str
    image: str | None
    description: str
    url: str
    duration: str
    added_by: str | None = None

    @classmethod
    def from_api_item(cls, item: dict[str, Any], base_url: str) -> "Track":
        """
        Create a Track from a videos (or playlistItems) API resource.

        Args:
            item: One entry of the response's "items" list. Must carry a
                  snippet; contentDetails.duration is optional.
            base_url: Root for the watch link, without trailing slash.

        Returns:
            Track populated from the resource.
        """
        snippet = item.get("snippet") or {}
        content_details = item.get("contentDetails") or {}

        return cls(
            title=snippet.get("title", ""),
            source=SOURCE_NAME,
            image=select_thumbnail(snippet.get("thumbnails")),
            description=snippet.get("description", ""),
            url=f"{base_url}/watch?v={video_id_of(item)}",
            duration=format_duration(content_details.get("duration")),
            added_by=None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the track as a plain dictionary (JSON friendly)."""
        return asdict(self)


@dataclass
class PlaylistPage:
    """
    One page of playlist items.

    Transient: only used to drive the pagination loop.

    Attributes:
        total: pageInfo.totalResults reported by the API, or None when
               the playlist was not found.
        items: Normalized tracks of this page, in playlist order.
        next_page_token: Continuation token, or None on the last page.
    """

    total: int | None = None
    items: list[Track] = field(default_factory=list)
    next_page_token: str | None = None

    @property
    def has_next(self) -> bool:
        """Check if the API reported a further page."""
        return bool(self.next_page_token)
