"""
YouTube integration module for media-resolver.

This module turns YouTube search result pages into typed records.

Components:
    - models: YouTubeVideo, YouTubeChannel, YouTubePlaylist, SearchOptions
    - parser: parse_search_results() and the per-renderer extractors
    - search: YouTubeSearch, which fetches a results page and parses it

Usage:
    from media_resolver.youtube import parse_search_results, SearchOptions

    channels = parse_search_results(html, SearchOptions(type="channel"))
    for channel in channels:
        print(f"{channel.name}: {channel.subscribers}")
"""

from media_resolver.youtube.models import (
    Badge,
    ChannelRef,
    SearchOptions,
    Thumbnail,
    YouTubeChannel,
    YouTubePlaylist,
    YouTubeVideo,
)
from media_resolver.youtube.parser import (
    YouTubeEntity,
    extract_initial_data,
    parse_channel,
    parse_playlist,
    parse_search_results,
    parse_video,
)
from media_resolver.youtube.search import YouTubeSearch

__all__ = [
    # Models
    "SearchOptions",
    "Thumbnail",
    "Badge",
    "ChannelRef",
    "YouTubeVideo",
    "YouTubeChannel",
    "YouTubePlaylist",
    "YouTubeEntity",
    # Parser
    "parse_search_results",
    "extract_initial_data",
    "parse_video",
    "parse_channel",
    "parse_playlist",
    # Search
    "YouTubeSearch",
]
