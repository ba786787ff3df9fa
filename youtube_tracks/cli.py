"""
Command-line interface for youtube-tracks.

This module implements the CLI using Click, with rich-click for the
help output colors.

Commands:
    ytt search <query>                  Keyword, video URL or playlist URL
    ytt playlist <playlist-url>         All tracks of a playlist
    ytt download <source> <path>        Download a video's audio stream

Options:
    --config <path>                     Explicit config.yaml
    --verbose                           DEBUG output on the console
    --json                              Print tracks as a JSON array

Usage:
    ytt search "daft punk" --results 5
    ytt search "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
    ytt playlist "https://www.youtube.com/playlist?list=PL..." --limit 100 --json
    ytt download "https://www.youtube.com/watch?v=dQw4w9WgXcQ" ~/Music/song.webm

Exit Codes:
    0   success
    1   configuration error
    2   malformed playlist URL
    3   YouTube API error
    4   download or other youtube-tracks error
    130 interrupted
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

import rich_click as click

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.MAX_WIDTH = 100

from youtube_tracks import __version__
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
    shutdown_logging,
)
from youtube_tracks.youtube import Track, YouTubeClient

logger = get_logger(__name__)


@click.group()
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    metavar="<config.yaml>",
    help="Path to config file (default: ./config.yaml)"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable debug output"
)
@click.version_option(__version__, prog_name="youtube-tracks")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], verbose: bool) -> None:
    """
    youtube-tracks: search YouTube and fetch playlists as normalized tracks.

    \b
    The YouTube Data API key is read from config.yaml (youtube.api_key)
    or from the YOUTUBE_API_KEY environment variable.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument("query")
@click.option(
    "--results", "-n",
    type=click.IntRange(min=1),
    default=50,
    show_default=True,
    help="Maximum number of results for a keyword search"
)
@click.option("--json", "as_json", is_flag=True, help="Print tracks as JSON")
@click.pass_context
def search(ctx: click.Context, query: str, results: int, as_json: bool) -> None:
    """Search by keywords, or resolve a video / playlist URL."""

    async def run(client: YouTubeClient) -> None:
        tracks = await client.search(query, results=results)
        _print_tracks(tracks, as_json)

    _run(ctx, run)


@cli.command()
@click.argument("url")
@click.option(
    "--limit", "-l",
    type=click.IntRange(min=1),
    default=500,
    show_default=True,
    help="Maximum number of tracks to fetch"
)
@click.option("--json", "as_json", is_flag=True, help="Print tracks as JSON")
@click.pass_context
def playlist(ctx: click.Context, url: str, limit: int, as_json: bool) -> None:
    """List the tracks of a playlist URL."""

    async def run(client: YouTubeClient) -> None:
        tracks = await client.get_playlist_videos(url, limit=limit)
        _print_tracks(tracks, as_json)

    _run(ctx, run)


@cli.command()
@click.argument("source")
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
def download(ctx: click.Context, source: str, path: Path) -> None:
    """Download the audio stream of SOURCE to PATH."""

    async def run(client: YouTubeClient) -> None:
        written = await client.download(source, path)
        click.echo(f"Saved: {written}")

    _run(ctx, run, show_progress=True)


def _print_tracks(tracks: list[Track], as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps([track.to_dict() for track in tracks], indent=2, ensure_ascii=False))
        return

    if not tracks:
        click.echo("No tracks found")
        return

    for track in tracks:
        click.echo(f"{track.duration}  {track.title}  {track.url}")


def _run(
    ctx: click.Context,
    action: Callable[[YouTubeClient], Awaitable[Any]],
    show_progress: bool = False
) -> None:
    """
    Load configuration, set up logging and run an async action.

    Maps youtube-tracks exceptions to exit codes (see module docstring).
    """
    try:
        config = _load_configuration(ctx.obj["config_path"])
        level = "DEBUG" if ctx.obj["verbose"] else config.logging.level
        setup_logging(config.logging.directory, level)

        asyncio.run(_with_client(config, action, show_progress))

    except ConfigError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        sys.exit(1)

    except PlaylistURLError as e:
        click.echo(f"Invalid playlist URL: {e.message}", err=True)
        sys.exit(2)

    except YouTubeAPIError as e:
        click.echo(f"YouTube API error: {e.message}", err=True)
        logger.error(f"YouTube API error: {e.message} ({e.body})")
        sys.exit(3)

    except DownloadError as e:
        click.echo(f"Download error: {e.message}", err=True)
        sys.exit(4)

    except YouTubeTracksError as e:
        click.echo(f"Error: {e.message}", err=True)
        logger.error(f"Error: {e.message}", exc_info=True)
        sys.exit(4)

    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        sys.exit(130)

    finally:
        shutdown_logging()


async def _with_client(
    config: Config,
    action: Callable[[YouTubeClient], Awaitable[Any]],
    show_progress: bool
) -> None:
    async with YouTubeClient.from_config(config, show_progress=show_progress) as client:
        await action(client)


def _load_configuration(config_path: Optional[Path]) -> Config:
    """Load config.yaml (or the explicit path) plus the environment."""
    config = load_config(config_path)
    logger.debug(f"Loaded configuration (api_url={config.youtube.api_url})")
    return config


def main() -> None:
    """
    Entry point for the CLI.

    This function is called when running `ytt` from the command line.
    """
    cli()


if __name__ == "__main__":
    main()
