"""Test configuration and fixtures"""

import json
from typing import Any

import pytest

from youtube_tracks.youtube import YouTubeClient


BASE_URL = "https://www.youtube.com"


def make_video(
    video_id: str,
    title: str | None = None,
    duration: str | None = "PT3M30S",
    thumbnails: dict[str, Any] | None = None
) -> dict[str, Any]:
    """Build a videos endpoint resource"""
    if thumbnails is None:
        thumbnails = {
            "default": {"url": f"https://i.ytimg.com/vi/{video_id}/default.jpg"},
            "high": {"url": f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg"},
        }
    content_details = {"duration": duration} if duration is not None else {}
    return {
        "kind": "youtube#video",
        "id": video_id,
        "snippet": {
            "title": title or f"Video {video_id}",
            "description": f"Description of {video_id}",
            "thumbnails": thumbnails,
        },
        "contentDetails": content_details,
    }


class FakeResponse:
    """Minimal stand-in for aiohttp.ClientResponse"""

    def __init__(self, status: int, payload: Any) -> None:
        self.status = status
        self._payload = payload

    async def text(self, encoding: str | None = None, errors: str = "strict") -> str:
        # Decodes like aiohttp: raw bytes are strict UTF-8 unless told otherwise
        if isinstance(self._payload, bytes):
            return self._payload.decode(encoding or "utf-8", errors)
        if isinstance(self._payload, str):
            return self._payload
        return json.dumps(self._payload)

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, *exc_info: Any) -> bool:
        return False


class FakeYouTubeAPI:
    """
    In-memory Data API: serves search, videos and playlistItems.

    Playlist pages use the item offset as the continuation token.
    """

    def __init__(self) -> None:
        self.videos: dict[str, dict[str, Any]] = {}
        self.search_ids: list[str] = []
        self.playlists: dict[str, list[str]] = {}
        # Playlist video ids whose playlistItems entry already carries a duration
        self.inline_durations: set[str] = set()
        # endpoint -> (status, payload) forced responses
        self.overrides: dict[str, tuple[int, Any]] = {}

    def add_videos(self, *video_ids: str, **kwargs: Any) -> None:
        for video_id in video_ids:
            self.videos[video_id] = make_video(video_id, **kwargs)

    def __call__(self, endpoint: str, params: dict[str, Any]) -> tuple[int, Any]:
        if endpoint in self.overrides:
            return self.overrides[endpoint]

        if endpoint == "search":
            count = int(params.get("maxResults", 5))
            items = [
                {
                    "kind": "youtube#searchResult",
                    "id": {"kind": "youtube#video", "videoId": video_id},
                    "snippet": {"title": f"Video {video_id}"},
                }
                for video_id in self.search_ids[:count]
            ]
            return 200, {"items": items, "pageInfo": {"totalResults": len(self.search_ids)}}

        if endpoint == "videos":
            ids = params["id"].split(",")
            return 200, {"items": [self.videos[i] for i in ids if i in self.videos]}

        if endpoint == "playlistItems":
            playlist = self.playlists.get(params["playlistId"])
            if playlist is None:
                return 404, {"error": {"code": 404, "message": "playlistNotFound"}}

            offset = int(params.get("pageToken", 0))
            size = int(params["maxResults"])
            items = []
            for video_id in playlist[offset:offset + size]:
                content_details: dict[str, Any] = {"videoId": video_id}
                if video_id in self.inline_durations:
                    content_details["duration"] = "PT1M"
                items.append({
                    "kind": "youtube#playlistItem",
                    "id": f"item-{video_id}",
                    "snippet": {
                        "title": f"Video {video_id}",
                        "description": "",
                        "thumbnails": {},
                        "resourceId": {"kind": "youtube#video", "videoId": video_id},
                    },
                    "contentDetails": content_details,
                })

            body: dict[str, Any] = {
                "items": items,
                "pageInfo": {"totalResults": len(playlist), "resultsPerPage": size},
            }
            if offset + size < len(playlist):
                body["nextPageToken"] = str(offset + size)
            return 200, body

        return 400, {"error": {"code": 400, "message": f"unknown endpoint {endpoint}"}}


class FakeSession:
    """Records every GET and answers it from a FakeYouTubeAPI"""

    def __init__(self, api: FakeYouTubeAPI) -> None:
        self.api = api
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.closed = False

    def get(self, url: str, params: dict[str, Any] | None = None) -> FakeResponse:
        endpoint = url.rsplit("/", 1)[-1]
        params = dict(params or {})
        self.calls.append((endpoint, params))
        status, payload = self.api(endpoint, params)
        return FakeResponse(status, payload)

    async def close(self) -> None:
        self.closed = True

    def calls_to(self, endpoint: str) -> list[dict[str, Any]]:
        return [params for name, params in self.calls if name == endpoint]


@pytest.fixture
def fake_api():
    """Empty in-memory Data API"""
    return FakeYouTubeAPI()


@pytest.fixture
def session(fake_api):
    """Fake HTTP session bound to fake_api"""
    return FakeSession(fake_api)


@pytest.fixture
def client(session):
    """YouTubeClient talking to the fake session"""
    return YouTubeClient("test-key", BASE_URL, session=session)


@pytest.fixture
def no_dotenv(monkeypatch):
    """Keep a developer's .env and YOUTUBE_API_KEY out of config tests"""
    monkeypatch.setattr("youtube_tracks.core.config.load_dotenv", lambda *args, **kwargs: False)
    monkeypatch.delenv("YOUTUBE_API_KEY", raising=False)


@pytest.fixture
def video_factory():
    """Builder for videos endpoint resources"""
    return make_video
