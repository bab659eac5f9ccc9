"""
media-resolver: Structured metadata and stream URLs for YouTube and SoundCloud.

This package extracts typed records from two media platforms:

    YouTube (youtube/):
        - Fetch a search results page
        - Cut the embedded ytInitialData JSON out of the HTML
        - Walk to the result cards and build YouTubeVideo, YouTubeChannel
          or YouTubePlaylist records

    SoundCloud (soundcloud/):
        - Resolve a SoundCloud URL through the api-v2 resolve endpoint
        - Build SoundCloudTrack or SoundCloudPlaylist records
        - Turn a track into a signed stream URL and classify its codec

Modules:
    core/       - Configuration, credential store, logging, exceptions, HTTP
    utils/      - Safe nested JSON lookup and text parsing helpers
    youtube/    - Search results parser and search front-end
    soundcloud/ - Resolver, stream resolution and probes
    cli.py      - Command-line interface

Usage:
    Command Line:
        media-resolver search "lofi hip hop" --type playlist --limit 5
        media-resolver resolve https://soundcloud.com/artist/song
        media-resolver stream https://soundcloud.com/artist/song
        media-resolver authorize <client_id>

    Python API:
        from media_resolver import (
            HttpClient, SoundCloudClient, YouTubeSearch, SearchOptions,
            load_config, resolve_credential
        )

        config = load_config()
        http = HttpClient.from_config(config.network)

        videos = YouTubeSearch(http).search("query", SearchOptions(limit=3))

        SoundCloudClient.init(resolve_credential(config), http)
        stream = SoundCloudClient().stream_from_url(url)

Dependencies:
    - requests: HTTP client
    - pyyaml: Configuration file parsing
    - tqdm: Progress bars and tqdm-safe console logging
    - click / rich-click: CLI framework and colors
"""

__version__ = "0.1.0"
__author__ = "media-resolver"
__license__ = "MIT"

# Convenience imports for common usage
from media_resolver.core import (
    Config,
    ConfigError,
    Credential,
    HttpClient,
    MediaResolverError,
    NetworkError,
    ParseError,
    StateError,
    ValidationError,
    get_logger,
    load_config,
    resolve_credential,
    setup_logging,
)
from media_resolver.soundcloud import (
    SoundCloudClient,
    SoundCloudPlaylist,
    SoundCloudTrack,
    StreamDescriptor,
    StreamType,
    probe_credential,
)
from media_resolver.youtube import (
    SearchOptions,
    YouTubeChannel,
    YouTubePlaylist,
    YouTubeSearch,
    YouTubeVideo,
    parse_search_results,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "Config",
    "Credential",
    "load_config",
    "resolve_credential",
    "HttpClient",
    "setup_logging",
    "get_logger",
    # Exceptions
    "MediaResolverError",
    "ParseError",
    "ConfigError",
    "ValidationError",
    "NetworkError",
    "StateError",
    # YouTube
    "SearchOptions",
    "YouTubeVideo",
    "YouTubeChannel",
    "YouTubePlaylist",
    "YouTubeSearch",
    "parse_search_results",
    # SoundCloud
    "SoundCloudClient",
    "SoundCloudTrack",
    "SoundCloudPlaylist",
    "StreamDescriptor",
    "StreamType",
    "probe_credential",
]
