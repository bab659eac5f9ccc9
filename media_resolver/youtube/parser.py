"""
YouTube search results parser.

A YouTube search results page embeds its data as a JavaScript assignment:

    <script nonce="...">var ytInitialData = {...};</script>

This module cuts that payload out of the HTML, walks the fixed path to
the list of result cards and turns each card into a typed entity.

Parsing Rules:
    - The envelope (marker, JSON, path to the item list) must be intact.
      Any problem there is a ParseError for the whole call.
    - Entries without the renderer for the requested type are skipped
      silently (ads, shelves, other result kinds).
    - Entries with the right renderer but a malformed body are skipped and
      reported through log_skipped_entry().
    - Results keep source order. With a limit, the walk stops as soon as
      the limit is reached; later entries are never parsed.

Usage:
    from media_resolver.youtube.parser import parse_search_results
    from media_resolver.youtube.models import SearchOptions

    videos = parse_search_results(html)
    playlists = parse_search_results(html, SearchOptions(type="playlist", limit=5))
"""

import json
import re
from typing import Any, Callable

from media_resolver.core.exceptions import ConfigError, ParseError
from media_resolver.core.logger import get_logger, log_skipped_entry
from media_resolver.utils import dig, require
from media_resolver.youtube.models import (
    CHANNEL_RENDERER,
    PLAYLIST_RENDERER,
    SEARCH_TYPES,
    VIDEO_RENDERER,
    SearchOptions,
    YouTubeChannel,
    YouTubePlaylist,
    YouTubeVideo,
)

logger = get_logger(__name__)


INITIAL_DATA_MARKER = "var ytInitialData = "
SCRIPT_TERMINATOR = ";</script>"
# The payload sometimes shares its <script> with further declarations
_STATEMENT_BOUNDARY = re.compile(r";\s*(?:var|const|let)\s")

# Path from the ytInitialData root to the list of result cards
RESULTS_PATH: tuple[str | int, ...] = (
    "contents",
    "twoColumnSearchResultsRenderer",
    "primaryContents",
    "sectionListRenderer",
    "contents",
    0,
    "itemSectionRenderer",
    "contents",
)

YouTubeEntity = YouTubeVideo | YouTubeChannel | YouTubePlaylist


def parse_video(entry: dict[str, Any]) -> YouTubeVideo:
    """Parse one results entry holding a videoRenderer."""
    return YouTubeVideo.from_renderer(entry)


def parse_channel(entry: dict[str, Any]) -> YouTubeChannel:
    """Parse one results entry holding a channelRenderer."""
    return YouTubeChannel.from_renderer(entry)


def parse_playlist(entry: dict[str, Any]) -> YouTubePlaylist:
    """Parse one results entry holding a playlistRenderer."""
    return YouTubePlaylist.from_renderer(entry)


# Search type -> (renderer key, extractor)
_EXTRACTORS: dict[str, tuple[str, Callable[[dict[str, Any]], YouTubeEntity]]] = {
    "video": (VIDEO_RENDERER, parse_video),
    "channel": (CHANNEL_RENDERER, parse_channel),
    "playlist": (PLAYLIST_RENDERER, parse_playlist),
}

# Id key inside each renderer, used only to label skipped entries
_ID_KEYS = {
    VIDEO_RENDERER: "videoId",
    CHANNEL_RENDERER: "channelId",
    PLAYLIST_RENDERER: "playlistId",
}


def extract_initial_data(html: str) -> dict[str, Any]:
    """
    Cut the ytInitialData JSON object out of a results page.

    Args:
        html: Full HTML body of a search results page.

    Returns:
        The decoded ytInitialData object.

    Raises:
        ParseError: If html is empty, the marker is missing, or the framed
                    text is not a JSON object.
    """
    if not html:
        raise ParseError("Can't parse search results without data")

    _, found, rest = html.partition(INITIAL_DATA_MARKER)
    if not found:
        raise ParseError(
            "Search page has no ytInitialData payload",
            details={"marker": INITIAL_DATA_MARKER.strip()}
        )

    payload = rest.split(SCRIPT_TERMINATOR, 1)[0]
    payload = _STATEMENT_BOUNDARY.split(payload, 1)[0]

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise ParseError(
            f"ytInitialData payload is not valid JSON: {e}",
            details={"original_error": str(e)}
        ) from e

    if not isinstance(data, dict):
        raise ParseError("ytInitialData payload is not a JSON object")

    return data


def parse_search_results(html: str, options: SearchOptions | None = None) -> list[YouTubeEntity]:
    """
    Convert a search results page into typed entities.

    Args:
        html: Full HTML body of a search results page.
        options: Result type and limit. Defaults to videos, no limit.

    Returns:
        Entities of the requested type, in source order.

    Raises:
        ConfigError: If options.type is not video/playlist/channel or
                     options.limit is negative.
        ParseError: If the page or the envelope path is malformed.
    """
    if options is None:
        options = SearchOptions()

    search_type = options.type or "video"
    if search_type not in SEARCH_TYPES:
        raise ConfigError(
            f"Unknown search type: {search_type}",
            details={"type": search_type, "allowed": list(SEARCH_TYPES)}
        )
    if options.limit < 0:
        raise ConfigError(
            f"Search limit must not be negative: {options.limit}",
            details={"limit": options.limit}
        )

    renderer_key, extract = _EXTRACTORS[search_type]

    data = extract_initial_data(html)
    entries = require(data, *RESULTS_PATH, root="ytInitialData")
    if not isinstance(entries, list):
        raise ParseError(
            "Search results container is not a list",
            details={"path": "ytInitialData." + ".".join(str(s) for s in RESULTS_PATH)}
        )

    results: list[YouTubeEntity] = []
    for entry in entries:
        if options.limit and len(results) >= options.limit:
            break
        if dig(entry, renderer_key) is None:
            continue
        try:
            results.append(extract(entry))
        except ParseError as e:
            log_skipped_entry(
                logger,
                renderer=renderer_key,
                reason=e.message,
                entry_id=dig(entry, renderer_key, _ID_KEYS[renderer_key])
            )

    logger.debug(f"Parsed {len(results)} {search_type} result(s) from {len(entries)} entries")
    return results
