"""
Command-line interface for media-resolver.

This module implements the CLI using Click, with rich-click for colored
help output.

Commands:
    media-resolver search <query>        Search YouTube (videos, playlists, channels)
    media-resolver resolve <url>         Resolve a SoundCloud track or playlist
    media-resolver stream <url>          Print the signed stream URL of a track
    media-resolver validate <url>        Print the kind of a SoundCloud URL
    media-resolver check-id <client_id>  Check whether a client_id is live
    media-resolver authorize <client_id> Check and save a client_id

Global Options:
    --config <path>                      Explicit config.yaml
    --verbose                            Show DEBUG messages on the console

Usage:
    media-resolver search "lofi hip hop" --type playlist --limit 5
    media-resolver search "rick astley" --json
    media-resolver authorize a1b2c3d4e5
    media-resolver stream https://soundcloud.com/artist/song

Exit Codes:
    0   Success
    1   Configuration error (missing credential, bad option, bad config.yaml)
    2   Network error
    3   Any other media-resolver error (parse, validation, state)
    130 Interrupted by user
"""

import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Callable

import rich_click as click

# Configure rich-click for better help formatting
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.MAX_WIDTH = 100
click.rich_click.COMMAND_GROUPS = {
    "cli": [
        {
            "name": "YouTube",
            "commands": ["search"],
        },
        {
            "name": "SoundCloud",
            "commands": ["resolve", "stream", "validate"],
        },
        {
            "name": "Credential",
            "commands": ["check-id", "authorize"],
        },
    ],
}

from media_resolver import __version__
from media_resolver.core import (
    Config,
    ConfigError,
    HttpClient,
    MediaResolverError,
    NetworkError,
    get_logger,
    load_config,
    resolve_credential,
    save_credential,
    setup_logging,
    shutdown_logging,
)
from media_resolver.core.logger import format_resolved_message
from media_resolver.soundcloud import (
    SoundCloudClient,
    SoundCloudPlaylist,
    SoundCloudTrack,
    probe_credential,
)
from media_resolver.utils import format_duration
from media_resolver.youtube import (
    SearchOptions,
    YouTubeChannel,
    YouTubePlaylist,
    YouTubeSearch,
    YouTubeVideo,
)

logger = get_logger(__name__)


@click.group()
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    metavar="<config.yaml>",
    help="Configuration file (default: ./config.yaml if present)"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Show debug messages"
)
@click.version_option(__version__, prog_name="media-resolver")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """
    media-resolver: Metadata and stream URLs for YouTube and SoundCloud.

    \b
    YOUTUBE:
        media-resolver search "query"                      # Videos
        media-resolver search "query" --type playlist      # Playlists
        media-resolver search "query" --type channel -n 3  # First 3 channels

    \b
    SOUNDCLOUD:
        media-resolver authorize <client_id>               # Save credential
        media-resolver resolve https://soundcloud.com/...  # Track or playlist
        media-resolver stream https://soundcloud.com/...   # Signed stream URL
    """
    try:
        config = load_config(config_path)
    except ConfigError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        sys.exit(1)

    setup_logging(config.logging.directory, verbose=verbose)
    ctx.call_on_close(shutdown_logging)

    http = HttpClient.from_config(config.network)
    ctx.call_on_close(http.close)

    ctx.obj = {
        "config": config,
        "http": http,
    }


@cli.command()
@click.argument("query")
@click.option(
    "--type", "search_type",
    type=click.Choice(["video", "playlist", "channel"]),
    default="video",
    show_default=True,
    help="Kind of result"
)
@click.option(
    "--limit", "-n",
    type=click.IntRange(min=0),
    default=10,
    show_default=True,
    help="Maximum number of results (0 for all on the page)"
)
@click.option(
    "--language",
    type=str,
    default=None,
    metavar="<lang>",
    help="Accept-Language hint, e.g. 'de-DE'"
)
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
@click.pass_context
def search(
    ctx: click.Context,
    query: str,
    search_type: str,
    limit: int,
    language: str | None,
    as_json: bool
) -> None:
    """Search YouTube and print the results."""
    config: Config = ctx.obj["config"]

    def action() -> None:
        searcher = YouTubeSearch(ctx.obj["http"], default_language=config.youtube.language)
        results = searcher.search(
            query,
            SearchOptions(type=search_type, limit=limit, language=language)
        )

        if as_json:
            _echo_json([_entity_dict(r) for r in results])
            return

        if not results:
            logger.info("No results")
        for result in results:
            click.echo(_describe_youtube(result))

    _run(action)


@cli.command()
@click.argument("url")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.pass_context
def resolve(ctx: click.Context, url: str, as_json: bool) -> None:
    """Resolve a SoundCloud track or playlist URL."""

    def action() -> None:
        item = _soundcloud(ctx).resolve(url)

        if as_json:
            _echo_json(_entity_dict(item))
            return

        click.echo(format_resolved_message(item.kind, item.title, item.url))
        if isinstance(item, SoundCloudTrack):
            click.echo(f"  duration: {format_duration(item.duration_seconds)}")
            click.echo(f"  formats:  {', '.join(f.preset for f in item.formats) or 'none'}")
        elif isinstance(item, SoundCloudPlaylist):
            click.echo(f"  tracks:   {item.fetched_count}/{item.track_count}")
            for number, track in enumerate(item.tracks, start=1):
                click.echo(f"  {number:>3}. {track.title} ({format_duration(track.duration_seconds)})")

    _run(action)


@cli.command()
@click.argument("url")
@click.option("--json", "as_json", is_flag=True, help="Print the stream as JSON")
@click.pass_context
def stream(ctx: click.Context, url: str, as_json: bool) -> None:
    """Print the signed stream URL of a SoundCloud track."""

    def action() -> None:
        descriptor = _soundcloud(ctx).stream_from_url(url)

        if as_json:
            _echo_json(asdict(descriptor))
            return

        click.echo(f"{descriptor.stream_type.value}\t{descriptor.url}")

    _run(action)


@cli.command()
@click.argument("url")
@click.pass_context
def validate(ctx: click.Context, url: str) -> None:
    """Print 'track', 'playlist' or 'unsupported' for a SoundCloud URL."""

    def action() -> None:
        kind = _soundcloud(ctx).probe_url_kind(url)
        click.echo(kind or "unsupported")

    _run(action)


@cli.command("check-id")
@click.argument("client_id")
@click.pass_context
def check_id(ctx: click.Context, client_id: str) -> None:
    """Check whether a SoundCloud client_id is accepted."""
    if probe_credential(client_id, ctx.obj["http"]):
        click.echo("valid")
    else:
        click.echo("invalid")
        sys.exit(1)


@cli.command()
@click.argument("client_id")
@click.pass_context
def authorize(ctx: click.Context, client_id: str) -> None:
    """Check a SoundCloud client_id and save it to the data file."""
    config: Config = ctx.obj["config"]

    if not probe_credential(client_id, ctx.obj["http"]):
        click.echo("Error: client_id was rejected by SoundCloud; nothing saved", err=True)
        sys.exit(1)

    save_credential(config.soundcloud.data_file, client_id)
    logger.info(f"Saved SoundCloud client_id to {config.soundcloud.data_file}")


def _soundcloud(ctx: click.Context) -> SoundCloudClient:
    """
    Get the SoundCloudClient singleton, initializing it on first use.

    Raises:
        ConfigError: If the credential data file is corrupted.
    """
    if not SoundCloudClient.is_initialized():
        config: Config = ctx.obj["config"]
        SoundCloudClient.init(resolve_credential(config), ctx.obj["http"])
    return SoundCloudClient()


def _run(action: Callable[[], None]) -> None:
    """
    Run a command body, mapping media-resolver errors to exit codes.

    Raises:
        SystemExit: On any error (see module docstring for codes).
    """
    try:
        action()

    except ConfigError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        sys.exit(1)

    except NetworkError as e:
        click.echo(f"Network error: {e.message}", err=True)
        logger.debug(f"Network error details: {e.details}")
        sys.exit(2)

    except MediaResolverError as e:
        click.echo(f"Error: {e.message}", err=True)
        logger.debug(f"Error details: {e.details}")
        sys.exit(3)

    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        sys.exit(130)


def _entity_dict(entity: Any) -> dict[str, Any]:
    """Convert a record to a JSON-ready dict, tagged with its kind."""
    data = asdict(entity)
    data["kind"] = entity.kind
    return data


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def _describe_youtube(result: YouTubeVideo | YouTubeChannel | YouTubePlaylist) -> str:
    """One-line human description of a search result."""
    if isinstance(result, YouTubeVideo):
        length = "LIVE" if result.live else format_duration(result.duration)
        owner = result.channel.name if result.channel and result.channel.name else "?"
        return f"{format_resolved_message('video', result.title, result.url)} [{length}] by {owner}, {result.views:,} views"
    if isinstance(result, YouTubeChannel):
        badge = " (verified)" if result.verified else ""
        return f"{format_resolved_message('channel', result.name, result.url)}{badge}, {result.subscribers}"
    return f"{format_resolved_message('playlist', result.title, result.url)}, {result.videos} videos"


def main() -> None:
    """
    Entry point for the CLI.

    This function is called when running `media-resolver` from the command line.
    """
    cli()


if __name__ == "__main__":
    main()
