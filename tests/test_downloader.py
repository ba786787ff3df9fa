# tests/test_downloader.py
"""Test the yt-dlp audio downloader"""

import pytest
from yt_dlp.utils import DownloadError as YtDlpDownloadError

from youtube_tracks.core.exceptions import DownloadError
from youtube_tracks.download import AudioDownloader
from youtube_tracks.download.downloader import AUDIO_FORMAT, DownloadProgress, YtDlpLogger


class FakeYoutubeDL:
    """Stand-in for yt_dlp.YoutubeDL that records its options"""

    instances: list["FakeYoutubeDL"] = []
    fail_with: str | None = None
    write_file = True

    def __init__(self, options):
        self.options = options
        self.downloaded: list[str] = []
        FakeYoutubeDL.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    def download(self, urls):
        self.downloaded.extend(urls)
        if FakeYoutubeDL.fail_with:
            self.options["logger"].error(f"ERROR: {FakeYoutubeDL.fail_with}")
            raise YtDlpDownloadError(f"ERROR: {FakeYoutubeDL.fail_with}")
        if FakeYoutubeDL.write_file:
            path = self.options["outtmpl"].replace("%%", "%")
            with open(path, "wb") as f:
                f.write(b"audio")
        return 0


@pytest.fixture
def fake_ydl(monkeypatch):
    FakeYoutubeDL.instances = []
    FakeYoutubeDL.fail_with = None
    FakeYoutubeDL.write_file = True
    monkeypatch.setattr("youtube_tracks.download.downloader.YoutubeDL", FakeYoutubeDL)
    return FakeYoutubeDL


class TestAudioDownloader:
    """Test AudioDownloader"""

    @pytest.mark.asyncio
    async def test_download(self, fake_ydl, tmp_path):
        target = tmp_path / "music" / "song.webm"

        result = await AudioDownloader(retries=3).download("https://youtu.be/abc", target)

        assert result == target
        assert target.read_bytes() == b"audio"

        ydl = fake_ydl.instances[0]
        assert ydl.downloaded == ["https://youtu.be/abc"]
        assert ydl.options["format"] == AUDIO_FORMAT == "worstaudio/worst"
        assert ydl.options["retries"] == 3
        assert ydl.options["fragment_retries"] == 3
        assert ydl.options["noplaylist"] is True

    @pytest.mark.asyncio
    async def test_default_retries(self, fake_ydl, tmp_path):
        await AudioDownloader().download("abc", tmp_path / "a.webm")
        assert fake_ydl.instances[0].options["retries"] == 5

    @pytest.mark.asyncio
    async def test_percent_in_path(self, fake_ydl, tmp_path):
        """Output template placeholders in the path are written literally"""
        target = tmp_path / "100% hits.webm"

        result = await AudioDownloader().download("abc", target)

        assert result.exists()
        assert fake_ydl.instances[0].options["outtmpl"].endswith("100%% hits.webm")

    @pytest.mark.asyncio
    async def test_ytdlp_failure(self, fake_ydl, tmp_path):
        fake_ydl.fail_with = "Video unavailable"

        with pytest.raises(DownloadError) as exc_info:
            await AudioDownloader().download("abc", tmp_path / "a.webm")

        assert "Video unavailable" in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, YtDlpDownloadError)
        assert exc_info.value.details["source"] == "abc"

    @pytest.mark.asyncio
    async def test_file_not_written(self, fake_ydl, tmp_path):
        fake_ydl.write_file = False

        with pytest.raises(DownloadError):
            await AudioDownloader().download("abc", tmp_path / "a.webm")

    def test_cookie_file(self, tmp_path):
        cookies = tmp_path / "cookies.txt"
        cookies.write_text("# Netscape HTTP Cookie File\n")

        options = AudioDownloader(cookie_file=cookies).build_options(tmp_path / "a", YtDlpLogger())

        assert options["cookiefile"] == str(cookies)

    def test_cookie_file_as_string(self, tmp_path):
        cookies = tmp_path / "cookies.txt"
        cookies.write_text("# Netscape HTTP Cookie File\n")

        options = AudioDownloader(cookie_file=str(cookies)).build_options(tmp_path / "a", YtDlpLogger())

        assert options["cookiefile"] == str(cookies)

    @pytest.mark.parametrize("as_string", [False, True])
    def test_missing_cookie_file_ignored(self, tmp_path, as_string):
        missing = tmp_path / "missing.txt"
        downloader = AudioDownloader(cookie_file=str(missing) if as_string else missing)

        options = downloader.build_options(tmp_path / "a", YtDlpLogger())

        assert "cookiefile" not in options

    def test_progress_hook(self, tmp_path):
        progress = DownloadProgress("a.webm")

        options = AudioDownloader().build_options(tmp_path / "a", YtDlpLogger(), progress)

        assert options["progress_hooks"] == [progress]


class TestYtDlpLogger:
    """Test the yt-dlp logging bridge"""

    def test_last_error(self):
        yt_logger = YtDlpLogger()
        assert yt_logger.last_error is None

        yt_logger.warning("slow connection")
        yt_logger.error("ERROR: first")
        yt_logger.error("ERROR: second")

        assert yt_logger.last_error == "ERROR: second"


class TestDownloadProgress:
    """Test the tqdm progress hook"""

    def test_lifecycle(self):
        progress = DownloadProgress("a.webm")

        progress({"status": "downloading", "total_bytes": 100, "downloaded_bytes": 40})
        assert progress._bar is not None
        assert progress._bar.n == 40

        progress({"status": "downloading", "total_bytes": 100, "downloaded_bytes": 100})
        assert progress._bar.n == 100

        progress({"status": "finished"})
        assert progress._bar is None
