"""
YouTube Data API v3 client for youtube-tracks.

This module queries the Data API for keyword searches, single videos and
playlist contents, and normalizes every result into a Track.

Endpoints used (all key-authenticated GET requests):
    - search:        keyword search, ids only (part=snippet)
    - videos:        full metadata incl. duration (part=contentDetails,snippet)
    - playlistItems: playlist pages of 50 (part=snippet,contentDetails)

Response Handling:
    - 200: decoded JSON body is used
    - 404: treated as an empty result (missing playlist/video is not an error)
    - anything else: YouTubeAPIError with the raw status and body attached

Concurrency:
    Every request is awaited in order. Playlist pages and the follow-up
    videos lookups are sequential; there is no parallel fan-out.

Usage:
    from youtube_tracks.youtube import YouTubeClient

    async with YouTubeClient(api_key, "https://www.youtube.com") as client:
        tracks = await client.search("daft punk", results=10)
        playlist = await client.get_playlist_videos(
            "https://www.youtube.com/playlist?list=PL...", limit=200
        )
        await client.download(tracks[0].url, Path("song.webm"))
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Iterable
from urllib.parse import urlencode

import aiohttp

from youtube_tracks.core.config import (
    DEFAULT_API_URL,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    MAX_IDS_PER_REQUEST,
    Config,
)
from youtube_tracks.core.exceptions import YouTubeAPIError
from youtube_tracks.core.logger import get_logger
from youtube_tracks.download import AudioDownloader
from youtube_tracks.utils import chunked, extract_playlist_id, extract_video_id, is_url
from youtube_tracks.youtube.models import PlaylistPage, Track, video_id_of

logger = get_logger(__name__)


# playlistItems and search both cap maxResults at 50
PLAYLIST_PAGE_SIZE = 50
MAX_SEARCH_RESULTS = 50


class YouTubeClient:
    """
    Thin asynchronous client for the YouTube Data API v3.

    Attributes:
        token: Data API key, sent as the 'key' query parameter.
        base_url: Root used for watch links ({base_url}/watch?v=ID).
        api_url: Root of the REST endpoints.
        ids_per_request: Maximum ids per videos lookup.

    Session Ownership:
        If no aiohttp session is passed, one is created lazily and closed
        by close() / on leaving the async context. A session passed in by
        the caller is never closed by the client.

    Example:
        client = YouTubeClient("AIza...", "https://www.youtube.com")
        try:
            tracks = await client.search("lofi hip hop", results=5)
        finally:
            await client.close()
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        session: aiohttp.ClientSession | None = None,
        api_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        ids_per_request: int = MAX_IDS_PER_REQUEST,
        downloader: AudioDownloader | None = None
    ) -> None:
        """
        Initialize the client.

        Args:
            token: Data API key.
            base_url: Root for watch links, e.g. "https://www.youtube.com".
            session: Optional shared aiohttp session.
            api_url: Root of the Data API endpoints.
            timeout: Total timeout per request in seconds (own session only).
            ids_per_request: Ids per videos lookup, 1-50.
            downloader: Audio downloader used by download(). Defaults to
                        an AudioDownloader with the default retry count.
        """
        if not 1 <= ids_per_request <= MAX_IDS_PER_REQUEST:
            raise ValueError(
                f"ids_per_request must be between 1 and {MAX_IDS_PER_REQUEST}, got {ids_per_request}"
            )

        self.token = token
        self.base_url = base_url.rstrip("/")
        self.api_url = api_url.rstrip("/")
        self.ids_per_request = ids_per_request
        self._timeout = timeout
        self._session = session
        self._owns_session = session is None
        self._downloader = downloader or AudioDownloader()

    @classmethod
    def from_config(cls, config: Config, show_progress: bool = False) -> "YouTubeClient":
        """
        Create a client from a loaded Config.

        Args:
            config: Result of load_config().
            show_progress: Draw a tqdm bar while downloading.
        """
        downloader = AudioDownloader(
            retries=config.download.retries,
            cookie_file=config.download.cookie_file,
            show_progress=show_progress,
        )
        return cls(
            token=config.youtube.api_key,
            base_url=config.youtube.base_url,
            api_url=config.youtube.api_url,
            timeout=config.youtube.timeout,
            ids_per_request=config.youtube.ids_per_request,
            downloader=downloader,
        )

    async def __aenter__(self) -> "YouTubeClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP session if the client created it."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    # =========================================================================
    # Public Operations
    # =========================================================================

    async def search(self, query: str, results: int = 50) -> list[Track]:
        """
        Resolve a query to tracks.

        Dispatch:
            1. Playlist URL (a URL containing 'list=') -> get_playlist_videos()
            2. Any other URL -> lookup of the single video it points to
            3. Keyword phrase -> search endpoint, sliced to `results`,
               then one videos lookup for full metadata

        Args:
            query: Keyword phrase, watch URL or playlist URL.
            results: Maximum number of tracks for a keyword search.

        Returns:
            Tracks in search ranking order. At most `results` for keyword
            queries; playlist URLs use get_playlist_videos()'s own limit.

        Raises:
            YouTubeAPIError: On a non-200, non-404 response.
        """
        if is_url(query) and "list=" in query:
            logger.debug(f"Query is a playlist URL: {query}")
            return await self.get_playlist_videos(query)

        if is_url(query):
            video_id = extract_video_id(query)
            logger.debug(f"Query is a video URL: {query} (id={video_id})")
            if not video_id:
                logger.warning(f"No video id found in URL: {query}")
                return []
            return await self._get_videos([video_id])

        if results < 1:
            return []

        data = await self._request(
            "search",
            {
                "part": "snippet",
                "type": "video",
                "q": query,
                "maxResults": min(results, MAX_SEARCH_RESULTS),
            }
        )
        if data is None:
            return []

        items = data.get("items", [])[:results]
        ids = [video_id for video_id in (video_id_of(item) for item in items) if video_id]

        tracks = await self._get_videos(ids)
        logger.info(f"Search '{query}' returned {len(tracks)} tracks")
        return tracks

    async def get_playlist_videos(self, url: str, limit: int = 500) -> list[Track]:
        """
        Get the tracks of a playlist, following pagination.

        Args:
            url: Playlist URL carrying a 'list' parameter.
            limit: Maximum number of tracks to return.

        Returns:
            Tracks in playlist order, at most `limit`.

        Raises:
            PlaylistURLError: If url is malformed. Raised before any request.
            YouTubeAPIError: On a non-200, non-404 response.

        Behavior:
            1. Extract the playlist id (fails fast on a bad URL)
            2. Fetch the first page of 50
            3. Keep fetching while the API returns a continuation token
               and one more page would not push the total past `limit`
            4. Truncate to `limit`
        """
        playlist_id = extract_playlist_id(url)

        if limit < 1:
            return []

        page = await self.fetch_playlist_page(playlist_id)
        results = list(page.items)

        while page.has_next and len(results) + PLAYLIST_PAGE_SIZE <= limit:
            page = await self.fetch_playlist_page(playlist_id, page.next_page_token)
            results.extend(page.items)

        logger.info(
            f"Playlist {playlist_id}: fetched {len(results)} tracks "
            f"(reported total: {page.total})"
        )
        return results[:limit]

    async def fetch_playlist_page(
        self,
        playlist_id: str,
        page_token: str | None = None
    ) -> PlaylistPage:
        """
        Fetch and normalize one page of a playlist.

        playlistItems does not carry video durations, so items without
        contentDetails.duration are looked up through the videos endpoint
        in chunks of ids_per_request, one chunk at a time. The looked-up
        tracks are put back at their original positions; videos the
        lookup no longer returns (deleted or private) are dropped.

        Args:
            playlist_id: Id from the playlist URL's 'list' parameter.
            page_token: Continuation token of the previous page.

        Returns:
            PlaylistPage. Empty (total None) if the playlist was not found.
        """
        params: dict[str, Any] = {
            "part": "snippet,contentDetails",
            "maxResults": PLAYLIST_PAGE_SIZE,
            "playlistId": playlist_id,
        }
        if page_token:
            params["pageToken"] = page_token

        data = await self._request("playlistItems", params)
        page = PlaylistPage()
        if data is None:
            return page

        page.total = (data.get("pageInfo") or {}).get("totalResults")
        page.next_page_token = data.get("nextPageToken") or None

        # Each slot is either a finished Track or the id of a deferred video
        slots: list[Track | str] = []
        deferred: list[str] = []
        for item in data.get("items", []):
            if (item.get("contentDetails") or {}).get("duration"):
                slots.append(Track.from_api_item(item, self.base_url))
                continue

            video_id = video_id_of(item)
            if video_id:
                slots.append(video_id)
                deferred.append(video_id)

        looked_up = await self._lookup_videos(deferred)

        for slot in slots:
            if isinstance(slot, Track):
                page.items.append(slot)
            elif slot in looked_up:
                page.items.append(looked_up[slot])
            else:
                logger.debug(f"Playlist {playlist_id}: video {slot} unavailable, skipped")

        return page

    async def download(self, source: str, path: Path | str) -> Path:
        """
        Download the audio of a video to `path`.

        Delegates entirely to the configured AudioDownloader.

        Raises:
            DownloadError: If the download or file write fails.
        """
        return await self._downloader.download(source, path)

    # =========================================================================
    # Internals
    # =========================================================================

    async def _get_videos(self, ids: Iterable[str]) -> list[Track]:
        """Look up videos and return them in the order of `ids`."""
        ids = list(ids)
        found = await self._lookup_videos(ids)
        return [found[video_id] for video_id in ids if video_id in found]

    async def _lookup_videos(self, ids: Iterable[str]) -> dict[str, Track]:
        """
        Fetch full metadata for video ids via the videos endpoint.

        Returns:
            Mapping of video id to Track for every id the API returned.
        """
        unique_ids = list(dict.fromkeys(ids))
        tracks: dict[str, Track] = {}

        for chunk in chunked(unique_ids, self.ids_per_request):
            data = await self._request(
                "videos",
                {"part": "contentDetails,snippet", "id": ",".join(chunk)}
            )
            if data is None:
                continue
            for item in data.get("items", []):
                tracks[video_id_of(item)] = Track.from_api_item(item, self.base_url)

        return tracks

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout)
            )
        return self._session

    def _redacted_url(self, url: str, params: dict[str, Any]) -> str:
        return f"{url}?{urlencode({**params, 'key': 'REDACTED'})}"

    async def _request(self, endpoint: str, params: dict[str, Any]) -> dict[str, Any] | None:
        """
        GET an API endpoint.

        Args:
            endpoint: Endpoint name ("search", "videos", "playlistItems").
            params: Query parameters without the key.

        Returns:
            Decoded JSON body, or None for a 404 response.

        Raises:
            YouTubeAPIError: On any other non-200 status, an undecodable
                             200 body, or a transport failure.
        """
        url = f"{self.api_url}/{endpoint}"
        safe_url = self._redacted_url(url, params)
        logger.debug(f"GET {safe_url}")

        try:
            async with self._get_session().get(url, params={**params, "key": self.token}) as response:
                body = await self._read_body(response)

                if response.status == 404:
                    logger.warning(f"YouTube API returned 404 for {endpoint}, treating as empty")
                    return None

                if response.status != 200:
                    logger.error(f"YouTube API {endpoint} request failed with status {response.status}")
                    raise YouTubeAPIError(
                        f"YouTube API request failed with status {response.status}",
                        status=response.status,
                        url=safe_url,
                        body=body
                    )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"YouTube API {endpoint} request failed: {e!r}")
            raise YouTubeAPIError(
                f"YouTube API request failed: {e!r}",
                url=safe_url,
                details={"original_error": repr(e)}
            ) from e

        if not isinstance(body, dict):
            raise YouTubeAPIError(
                f"YouTube API returned an unexpected {endpoint} response",
                status=200,
                url=safe_url,
                body=body
            )

        return body

    @staticmethod
    async def _read_body(response: aiohttp.ClientResponse) -> Any:
        """
        Decode a response body as JSON, falling back to raw text.

        Undecodable bytes are replaced, so error pages in a foreign
        charset still reach the status handling.
        """
        text = await response.text(errors="replace")
        try:
            return json.loads(text)
        except ValueError:
            return text
