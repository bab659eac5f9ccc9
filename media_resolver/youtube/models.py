"""
Data models for YouTube search results.

This module defines immutable dataclasses for the three kinds of card a
YouTube search results page renders (video, channel, playlist), and the
options that control a search.

Design Decisions:
    - All dataclasses are frozen (immutable)
    - Each entity is built by a from_renderer() class method, which is the
      only place that knows the renderer JSON shape. A shape mismatch is
      reported as a ParseError naming the missing path.
    - Every entity has a non-empty platform id

Renderer Shapes:
    A search results entry is a dict with exactly one renderer key:

        {"videoRenderer": {"videoId": "...", "title": {"runs": [...]}, ...}}
        {"channelRenderer": {"channelId": "...", "title": {"simpleText": ...}}}
        {"playlistRenderer": {"playlistId": "...", "videoCount": "12", ...}}
"""

from dataclasses import dataclass, field
from typing import Any

from media_resolver.core.exceptions import ParseError
from media_resolver.utils import as_int, dig, parse_digits, parse_duration, pick_largest, require


YOUTUBE_ORIGIN = "https://www.youtube.com"

VIDEO_RENDERER = "videoRenderer"
CHANNEL_RENDERER = "channelRenderer"
PLAYLIST_RENDERER = "playlistRenderer"

SEARCH_TYPES = ("video", "playlist", "channel")


@dataclass(frozen=True)
class SearchOptions:
    """
    Options for one search call.

    Attributes:
        type: Kind of result to return: "video", "playlist" or "channel".
        limit: Maximum number of results; 0 means no limit.
        language: Optional Accept-Language hint for the search request.
                  Ignored by the parser itself.
    """
    type: str = "video"
    limit: int = 0
    language: str | None = None


@dataclass(frozen=True)
class Thumbnail:
    """
    One image variant.

    Attributes:
        url: Absolute image URL (protocol-relative URLs are made https).
        width: Width in pixels, 0 if unknown.
        height: Height in pixels, 0 if unknown.
    """
    url: str
    width: int = 0
    height: int = 0

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Thumbnail":
        """
        Create a Thumbnail from a {url, width, height} dict.

        Raises:
            ParseError: If the url is missing or not a string.
        """
        url = require(data, "url", root="thumbnail")
        if not isinstance(url, str):
            raise ParseError(
                f"Thumbnail url is not a string: {url!r}",
                details={"path": "thumbnail.url"}
            )
        if url.startswith("//"):
            url = "https:" + url
        return cls(
            url=url,
            width=as_int(data.get("width")),
            height=as_int(data.get("height"))
        )

    @classmethod
    def largest(cls, images: list[dict[str, Any]] | None) -> "Thumbnail | None":
        """Return the largest variant in a thumbnails list, or None if empty."""
        best = pick_largest(images)
        return cls.from_json(best) if best is not None else None


@dataclass(frozen=True)
class Badge:
    """
    Owner badge flags.

    Derived from the lower-cased ownerBadges[0] style string, e.g.
    "BADGE_STYLE_TYPE_VERIFIED" or "BADGE_STYLE_TYPE_VERIFIED_ARTIST".
    """
    verified: bool = False
    artist: bool = False

    @classmethod
    def from_renderer(cls, renderer: dict[str, Any]) -> "Badge":
        style = dig(renderer, "ownerBadges", 0, "metadataBadgeRenderer", "style")
        if not isinstance(style, str):
            return cls()
        style = style.lower()
        return cls(verified="verified" in style, artist="artist" in style)


@dataclass(frozen=True)
class ChannelRef:
    """
    The owner of a video or playlist, as shown on its card.

    Attributes:
        id: Channel id (UC...), None if the card does not link it.
        name: Channel display name.
        url: Canonical channel URL.
        icons: Channel avatar variants (video cards only).
        verified: Whether the owner carries a verified badge.
        artist: Whether the owner carries an official artist badge.
    """
    id: str | None
    name: str | None
    url: str | None
    icons: tuple[Thumbnail, ...] = ()
    verified: bool = False
    artist: bool = False

    @classmethod
    def from_run(
        cls,
        run: dict[str, Any] | None,
        icons: tuple[Thumbnail, ...] = (),
        badge: Badge | None = None
    ) -> "ChannelRef | None":
        """
        Create a ChannelRef from a text run carrying a navigationEndpoint.

        Returns None when there is no run, or the run is not an object.
        """
        if not isinstance(run, dict) or not run:
            return None
        badge = badge or Badge()
        return cls(
            id=dig(run, "navigationEndpoint", "browseEndpoint", "browseId"),
            name=run.get("text") or None,
            url=canonical_url(run.get("navigationEndpoint")),
            icons=icons,
            verified=badge.verified,
            artist=badge.artist
        )


@dataclass(frozen=True)
class YouTubeVideo:
    """
    Immutable representation of a video search result.

    Attributes:
        id: 11-character video id. Example: "dQw4w9WgXcQ"
        url: Watch URL. Example: "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
        title: Video title.
        description: Snippet text shown under the title (may be empty).
        duration: Length in seconds, 0 for live broadcasts.
        duration_raw: Length text as displayed ("3:33"), None when live.
        thumbnails: All thumbnail variants in source order.
        thumbnail: The largest of those variants.
        channel: Uploader reference, None if the card has no owner text.
        uploaded_at: Relative upload time text ("2 years ago"), if shown.
        views: View count, 0 when not shown.
        live: True when the card has no (or empty) duration text.
    """
    id: str
    url: str
    title: str
    description: str = ""
    duration: int = 0
    duration_raw: str | None = None
    thumbnails: tuple[Thumbnail, ...] = field(default_factory=tuple)
    thumbnail: Thumbnail | None = None
    channel: ChannelRef | None = None
    uploaded_at: str | None = None
    views: int = 0
    live: bool = False

    kind = "video"

    @classmethod
    def from_renderer(cls, entry: dict[str, Any]) -> "YouTubeVideo":
        """
        Create a YouTubeVideo from a search results entry.

        Args:
            entry: A results list entry holding a 'videoRenderer' key.

        Raises:
            ParseError: If the renderer is absent, or the id or title is missing.

        Behavior:
            1. Read videoId and title (required)
            2. Join detailedMetadataSnippets runs into the description
            3. Parse lengthText; absent or empty text marks the video as live
            4. Build the channel reference with badge flags and icons
            5. Strip non-digits from the view count text
        """
        renderer = _renderer(entry, VIDEO_RENDERER)

        video_id = require(renderer, "videoId", root=VIDEO_RENDERER)
        title = require(renderer, "title", "runs", 0, "text", root=VIDEO_RENDERER)

        snippet_runs = dig(renderer, "detailedMetadataSnippets", 0, "snippetText", "runs", default=[])
        description = _join_runs(snippet_runs)

        duration_raw = dig(renderer, "lengthText", "simpleText")
        raw_thumbnails = dig(renderer, "thumbnail", "thumbnails", default=[])

        icons = tuple(
            Thumbnail.from_json(icon)
            for icon in dig(
                renderer,
                "channelThumbnailSupportedRenderers",
                "channelThumbnailWithLinkRenderer",
                "thumbnail",
                "thumbnails",
                default=[]
            )
        )
        channel = ChannelRef.from_run(
            dig(renderer, "ownerText", "runs", 0),
            icons=icons,
            badge=Badge.from_renderer(renderer)
        )

        view_text = dig(renderer, "viewCountText", "simpleText")
        if view_text is None:
            # Live cards render "1,234 watching" as runs instead of simpleText
            view_text = _join_runs(dig(renderer, "viewCountText", "runs"))

        return cls(
            id=video_id,
            url=f"{YOUTUBE_ORIGIN}/watch?v={video_id}",
            title=title,
            description=description,
            duration=parse_duration(duration_raw),
            duration_raw=duration_raw or None,
            thumbnails=tuple(Thumbnail.from_json(t) for t in raw_thumbnails),
            thumbnail=Thumbnail.largest(raw_thumbnails),
            channel=channel,
            uploaded_at=dig(renderer, "publishedTimeText", "simpleText"),
            views=parse_digits(view_text, default=0),
            live=not duration_raw
        )


@dataclass(frozen=True)
class YouTubeChannel:
    """
    Immutable representation of a channel search result.

    Attributes:
        id: Channel id. Example: "UCuAXFkgsw1L7xaCfnd5JJOw"
        name: Channel display name.
        url: Canonical channel URL ("https://www.youtube.com/@handle").
        icon: Largest avatar variant, None if the card has none.
        verified: Whether the channel carries a verified badge.
        artist: Whether the channel carries an official artist badge.
        subscribers: Subscriber count text as displayed.
    """
    id: str
    name: str
    url: str
    icon: Thumbnail | None = None
    verified: bool = False
    artist: bool = False
    subscribers: str = "0 subscribers"

    kind = "channel"

    @classmethod
    def from_renderer(cls, entry: dict[str, Any]) -> "YouTubeChannel":
        """
        Create a YouTubeChannel from a search results entry.

        Raises:
            ParseError: If the renderer is absent, or the id or name is missing.
        """
        renderer = _renderer(entry, CHANNEL_RENDERER)

        channel_id = require(renderer, "channelId", root=CHANNEL_RENDERER)
        badge = Badge.from_renderer(renderer)

        return cls(
            id=channel_id,
            name=require(renderer, "title", "simpleText", root=CHANNEL_RENDERER),
            url=canonical_url(renderer.get("navigationEndpoint"))
                or f"{YOUTUBE_ORIGIN}/channel/{channel_id}",
            icon=Thumbnail.largest(dig(renderer, "thumbnail", "thumbnails")),
            verified=badge.verified,
            artist=badge.artist,
            subscribers=dig(renderer, "subscriberCountText", "simpleText", default="0 subscribers")
        )


@dataclass(frozen=True)
class YouTubePlaylist:
    """
    Immutable representation of a playlist search result.

    Attributes:
        id: Playlist id. Example: "PLFgquLnL59alCl_2TQvOiD5Vgm1hCaGSI"
        url: Playlist URL.
        title: Playlist title.
        thumbnail: Largest thumbnail of the first thumbnail set.
        channel: Owner reference from the short byline, if present.
        videos: Number of videos in the playlist.
    """
    id: str
    url: str
    title: str
    videos: int
    thumbnail: Thumbnail | None = None
    channel: ChannelRef | None = None

    kind = "playlist"

    @classmethod
    def from_renderer(cls, entry: dict[str, Any]) -> "YouTubePlaylist":
        """
        Create a YouTubePlaylist from a search results entry.

        Raises:
            ParseError: If the renderer is absent, the id or title is
                        missing, or videoCount holds no digits.
        """
        renderer = _renderer(entry, PLAYLIST_RENDERER)

        playlist_id = require(renderer, "playlistId", root=PLAYLIST_RENDERER)
        video_count = require(renderer, "videoCount", root=PLAYLIST_RENDERER)

        return cls(
            id=playlist_id,
            url=f"{YOUTUBE_ORIGIN}/playlist?list={playlist_id}",
            title=require(renderer, "title", "simpleText", root=PLAYLIST_RENDERER),
            videos=parse_digits(str(video_count)),
            thumbnail=Thumbnail.largest(dig(renderer, "thumbnails", 0, "thumbnails")),
            channel=ChannelRef.from_run(dig(renderer, "shortBylineText", "runs", 0))
        )


def canonical_url(endpoint: dict[str, Any] | None) -> str | None:
    """
    Build an absolute URL from a navigationEndpoint.

    Prefers browseEndpoint.canonicalBaseUrl ("/@handle"), falls back to
    commandMetadata.webCommandMetadata.url ("/channel/UC..."), and
    prefixes the result with the YouTube origin.

    Returns:
        The absolute URL, or None if neither path is present.
    """
    path = (
        dig(endpoint, "browseEndpoint", "canonicalBaseUrl")
        or dig(endpoint, "commandMetadata", "webCommandMetadata", "url")
    )
    return f"{YOUTUBE_ORIGIN}{path}" if path else None


def _renderer(entry: Any, key: str) -> dict[str, Any]:
    """Return entry[key], raising ParseError if the entry has no such renderer."""
    renderer = dig(entry, key)
    if not isinstance(renderer, dict):
        raise ParseError(
            f"Failed to parse YouTube {key.replace('Renderer', '')}: no '{key}' in entry",
            details={"path": key}
        )
    return renderer


def _join_runs(runs: Any) -> str:
    """Concatenate the text of a list of text runs, ignoring malformed runs."""
    if not isinstance(runs, list):
        return ""
    return "".join(
        run["text"] for run in runs
        if isinstance(run, dict) and isinstance(run.get("text"), str)
    )
