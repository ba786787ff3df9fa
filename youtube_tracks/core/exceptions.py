"""
Exception classes for youtube-tracks.

This module defines all custom exceptions used throughout the package.
Each exception carries a human-readable message plus an optional details
dictionary, so callers can log context without parsing message strings.

Exception Hierarchy:
    YouTubeTracksError (base)
        ConfigError - Configuration file issues
        YouTubeAPIError - YouTube Data API request failures
        PlaylistURLError - Malformed playlist URL (raised before any request)
        DownloadError - Audio download issues
"""

from typing import Any


class YouTubeTracksError(Exception):
    """
    Base exception for all youtube-tracks errors.

    Attributes:
        message: Human-readable error description.
        details: Dictionary with additional context (URLs, status codes...).

    Example:
        try:
            tracks = await client.search("daft punk")
        except YouTubeTracksError as e:
            logger.error(f"Search failed: {e.message}")
            logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Error description shown to the user.
            details: Optional context. Common keys include:
                     - 'url': URL that caused the error
                     - 'status': HTTP status code
                     - 'original_error': The underlying exception text
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(YouTubeTracksError):
    """
    Raised when there's an issue with the configuration file.

    Common causes:
        - config.yaml not found and YOUTUBE_API_KEY not set
        - config.yaml has invalid YAML syntax
        - Invalid field values (e.g., negative retry count)
    """
    pass


class YouTubeAPIError(YouTubeTracksError):
    """
    Raised when a YouTube Data API request does not succeed.

    A 404 response is NOT an error: the client treats it as an empty
    result. Every other non-200 response raises this exception with the
    raw response data attached, so callers can inspect the quota/key
    error payload Google returns.

    Transport failures (DNS, connection reset, timeout) also raise this
    exception, with status set to None.

    Attributes:
        status: HTTP status code, or None for transport failures.
        url: Requested URL with the API key redacted.
        body: Decoded JSON body (or raw text) of the response, if any.

    Example:
        raise YouTubeAPIError(
            "YouTube API request failed with status 403",
            status=403,
            url="https://www.googleapis.com/youtube/v3/search?key=REDACTED",
            body={"error": {"code": 403, "message": "quotaExceeded"}}
        )
    """

    def __init__(
        self,
        message: str,
        status: int | None = None,
        url: str | None = None,
        body: Any = None,
        details: dict | None = None
    ) -> None:
        merged = {"status": status, "url": url}
        merged.update(details or {})
        super().__init__(message, merged)
        self.status = status
        self.url = url
        self.body = body


class PlaylistURLError(YouTubeTracksError, ValueError):
    """
    Raised when a playlist URL cannot be used.

    This is always raised before any network request is made.

    Common causes:
        - Value is not an http(s) URL
        - URL has no 'list' query parameter
    """
    pass


class DownloadError(YouTubeTracksError):
    """
    Raised when downloading audio from YouTube fails.

    The underlying yt-dlp or filesystem exception is chained as
    __cause__ and its text stored in details['original_error'].

    Example:
        raise DownloadError(
            "Failed to download audio: Video unavailable",
            details={
                'source': 'https://www.youtube.com/watch?v=xxx',
                'path': '/tmp/song.webm',
            }
        ) from e
    """
    pass
