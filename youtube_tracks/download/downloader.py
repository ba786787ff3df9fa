"""
Audio downloader for youtube-tracks.

This module downloads the audio stream of a single YouTube video to an
exact path on disk. All the real work is delegated to yt-dlp:

    - format "worstaudio/worst": the lowest quality audio-only stream
      (falls back to the lowest quality combined stream if a video has
      no separate audio)
    - a fixed retry count handed to yt-dlp (default 5)
    - no post-processing: the stream is written as delivered

yt-dlp is synchronous, so AudioDownloader.download() runs it in the event
loop's default executor and resolves once the file is written and closed.

Usage:
    from youtube_tracks.download import AudioDownloader

    downloader = AudioDownloader(retries=5)
    path = await downloader.download(
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        Path("~/Music/song.webm").expanduser()
    )
"""

import asyncio
from pathlib import Path
from typing import Any

from tqdm import tqdm
from yt_dlp import YoutubeDL
from yt_dlp.utils import DownloadError as YtDlpDownloadError

from youtube_tracks.core.config import DEFAULT_RETRIES
from youtube_tracks.core.exceptions import DownloadError
from youtube_tracks.core.logger import get_logger

logger = get_logger(__name__)


AUDIO_FORMAT = "worstaudio/worst"


class YtDlpLogger:
    """
    Logger object handed to yt-dlp through the 'logger' option.

    yt-dlp prints straight to stderr unless given an object with
    debug/info/warning/error methods. This forwards everything to our
    logging hierarchy and remembers the last error, which yt-dlp does
    not always include in the exception it raises.
    """

    def __init__(self) -> None:
        self.last_error: str | None = None

    def debug(self, msg: str) -> None:
        # yt-dlp routes info messages through debug with a "[debug] " prefix
        logger.debug(msg.removeprefix("[debug] "))

    def info(self, msg: str) -> None:
        logger.debug(msg)

    def warning(self, msg: str) -> None:
        logger.warning(msg)

    def error(self, msg: str) -> None:
        self.last_error = msg
        logger.debug(msg)


class DownloadProgress:
    """
    yt-dlp progress hook that drives a tqdm bar.

    The bar is created on the first 'downloading' event, once the total
    size is known, and closed on 'finished' or 'error'.
    """

    def __init__(self, description: str) -> None:
        self.description = description
        self._bar: tqdm | None = None

    def __call__(self, status: dict[str, Any]) -> None:
        state = status.get("status")

        if state == "downloading":
            total = status.get("total_bytes") or status.get("total_bytes_estimate")
            if self._bar is None:
                self._bar = tqdm(
                    total=total,
                    desc=self.description,
                    unit="B",
                    unit_scale=True,
                    leave=False,
                )
            elif total and self._bar.total != total:
                self._bar.total = total
            downloaded = status.get("downloaded_bytes") or 0
            self._bar.update(downloaded - self._bar.n)

        elif state in ("finished", "error"):
            self.close()

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None


class AudioDownloader:
    """
    Downloads the audio-only stream of a YouTube video with yt-dlp.

    Attributes:
        _retries: Retry count passed to yt-dlp ('retries' and
                  'fragment_retries').
        _cookie_file: Optional cookies.txt for age-restricted videos.
        _show_progress: Whether to draw a tqdm progress bar.

    Note:
        No retry logic lives here beyond the fixed count yt-dlp applies
        internally. A failure after those retries is final.
    """

    def __init__(
        self,
        retries: int = DEFAULT_RETRIES,
        cookie_file: Path | str | None = None,
        show_progress: bool = False
    ) -> None:
        self._retries = retries
        self._cookie_file = Path(cookie_file).expanduser() if cookie_file is not None else None
        self._show_progress = show_progress

        if self._cookie_file is not None and not self._cookie_file.exists():
            logger.warning(f"Cookie file not found: {self._cookie_file}. Downloading without cookies.")
            self._cookie_file = None

    def build_options(
        self,
        path: Path,
        yt_logger: YtDlpLogger,
        progress: DownloadProgress | None = None
    ) -> dict[str, Any]:
        """
        Build the yt-dlp options for one download.

        Args:
            path: Exact destination file.
            yt_logger: Logger object for yt-dlp output.
            progress: Optional progress hook.

        Returns:
            Options dictionary for YoutubeDL.
        """
        options: dict[str, Any] = {
            "format": AUDIO_FORMAT,
            # outtmpl is a template; escape '%' so the path is used literally
            "outtmpl": str(path).replace("%", "%%"),
            "retries": self._retries,
            "fragment_retries": self._retries,
            "noplaylist": True,
            "overwrites": True,
            "quiet": True,
            "no_warnings": True,
            "noprogress": True,
            "logger": yt_logger,
        }

        if progress is not None:
            options["progress_hooks"] = [progress]

        if self._cookie_file is not None:
            options["cookiefile"] = str(self._cookie_file)

        return options

    async def download(self, source: str, path: Path | str) -> Path:
        """
        Download the audio of `source` to `path`.

        Args:
            source: Watch URL (or bare video id) of the video.
            path: Destination file. Parent directories are created.

        Returns:
            The destination path, once the file is written and closed.

        Raises:
            DownloadError: If yt-dlp fails (after its own retries) or the
                           file cannot be written. The underlying error
                           is chained as __cause__.
        """
        path = Path(path).expanduser()
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._download_sync, source, path)

    def _download_sync(self, source: str, path: Path) -> Path:
        yt_logger = YtDlpLogger()
        progress = DownloadProgress(path.name) if self._show_progress else None
        details = {"source": source, "path": str(path)}

        logger.info(f"Downloading audio: {source} -> {path}")

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with YoutubeDL(self.build_options(path, yt_logger, progress)) as ydl:
                ydl.download([source])
        except YtDlpDownloadError as e:
            message = yt_logger.last_error or str(e)
            logger.error(f"Download failed: {source} - {message}")
            raise DownloadError(
                f"Failed to download audio: {message}",
                details={**details, "original_error": str(e)}
            ) from e
        except OSError as e:
            logger.error(f"Download failed: {source} - {e}")
            raise DownloadError(
                f"Failed to write audio file: {e}",
                details={**details, "original_error": str(e)}
            ) from e
        finally:
            if progress is not None:
                progress.close()

        if not path.exists():
            raise DownloadError(
                f"yt-dlp reported success but {path} was not written",
                details=details
            )

        logger.debug(f"Downloaded: {path.name} ({path.stat().st_size} bytes)")
        return path
