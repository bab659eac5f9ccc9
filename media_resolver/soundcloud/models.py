"""
Data models for SoundCloud entities.

This module defines immutable dataclasses for the objects returned by
the SoundCloud api-v2 JSON API: users, tracks, playlists and the encoded
formats ("transcodings") of a track, plus the descriptor of a resolved
stream.

Design Decisions:
    - All dataclasses are frozen (immutable)
    - from_api() class methods are the only code that knows the API shape;
      a missing id or title is a ParseError
    - Numeric ids are kept as strings, like every other id in the project
    - Playlist.from_api() takes already-built tracks; fetching the tracks a
      playlist payload lists only by id is the client's job

Example Track Payload (abridged):
    {
        "kind": "track",
        "id": 1234,
        "title": "Song",
        "permalink_url": "https://soundcloud.com/artist/song",
        "duration": 213000,
        "user": {"id": 42, "username": "artist", ...},
        "media": {"transcodings": [
            {"url": ".../stream/hls", "preset": "mp3_0_0",
             "format": {"protocol": "hls", "mime_type": "audio/mpeg"}},
            {"url": ".../stream/hls", "preset": "opus_0_0",
             "format": {"protocol": "hls", "mime_type": "audio/ogg; codecs=\\"opus\\""}}
        ]}
    }
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from media_resolver.utils import dig, require


class StreamType(str, Enum):
    """
    Container/codec classification of a resolved stream.

    OGG_OPUS streams can be passed to an Opus demuxer as-is; anything else
    is ARBITRARY and needs a general-purpose decoder.
    """
    ARBITRARY = "arbitrary"
    OGG_OPUS = "ogg/opus"


@dataclass(frozen=True)
class SoundCloudUser:
    """
    The uploader of a track or owner of a playlist.

    Attributes:
        id: Numeric user id as a string.
        name: Display username.
        url: Profile URL.
        avatar_url: Avatar image URL, if any.
        verified: Whether SoundCloud marks the account as verified.
    """
    id: str
    name: str
    url: str | None = None
    avatar_url: str | None = None
    verified: bool = False

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "SoundCloudUser":
        return cls(
            id=str(require(data, "id", root="user")),
            name=dig(data, "username", default=""),
            url=dig(data, "permalink_url"),
            avatar_url=dig(data, "avatar_url"),
            verified=bool(dig(data, "verified", default=False))
        )


@dataclass(frozen=True)
class SoundCloudFormat:
    """
    One encoded variant of a track.

    Attributes:
        url: Transcoding endpoint. Requesting it with a client_id returns
             JSON holding the final signed media URL.
        preset: Encoder preset, e.g. "mp3_0_0", "opus_0_0", "aac_160k".
        protocol: Delivery protocol, "hls" or "progressive".
        mime_type: Declared MIME type, e.g. 'audio/ogg; codecs="opus"'.
        quality: "sq" or "hq".
        duration_ms: Duration of this variant (shorter for snipped previews).
        snipped: True for 30-second previews.
    """
    url: str
    preset: str = ""
    protocol: str = ""
    mime_type: str = ""
    quality: str = ""
    duration_ms: int = 0
    snipped: bool = False

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "SoundCloudFormat":
        return cls(
            url=require(data, "url", root="transcoding"),
            preset=dig(data, "preset", default=""),
            protocol=dig(data, "format", "protocol", default=""),
            mime_type=dig(data, "format", "mime_type", default=""),
            quality=dig(data, "quality", default=""),
            duration_ms=int(dig(data, "duration", default=0)),
            snipped=bool(dig(data, "snipped", default=False))
        )

    @property
    def stream_type(self) -> StreamType:
        """OGG_OPUS if the MIME type starts with audio/ogg, else ARBITRARY."""
        if self.mime_type.startswith("audio/ogg"):
            return StreamType.OGG_OPUS
        return StreamType.ARBITRARY


@dataclass(frozen=True)
class SoundCloudTrack:
    """
    Immutable representation of a SoundCloud track.

    Attributes:
        id: Numeric track id as a string.
        title: Track title.
        url: Canonical permalink URL.
        permalink: URL slug of the track.
        duration_ms: Full duration in milliseconds.
        user: Uploader.
        thumbnail: Artwork URL, falling back to the uploader's avatar.
        formats: Transcodings in the order the API lists them.
        genre: Genre tag, if set.
        playback_count: Play count, 0 if hidden.
    """
    id: str
    title: str
    url: str
    permalink: str = ""
    duration_ms: int = 0
    user: SoundCloudUser | None = None
    thumbnail: str | None = None
    formats: tuple[SoundCloudFormat, ...] = field(default_factory=tuple)
    genre: str | None = None
    playback_count: int = 0

    kind = "track"

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "SoundCloudTrack":
        """
        Create a SoundCloudTrack from an api-v2 track object.

        Raises:
            ParseError: If id or title is missing.
        """
        track_id = str(require(data, "id", root="track"))
        user_data = dig(data, "user")

        return cls(
            id=track_id,
            title=require(data, "title", root="track"),
            url=dig(data, "permalink_url", default=f"https://soundcloud.com/tracks/{track_id}"),
            permalink=dig(data, "permalink", default=""),
            duration_ms=int(dig(data, "full_duration", default=dig(data, "duration", default=0))),
            user=SoundCloudUser.from_api(user_data) if isinstance(user_data, dict) else None,
            thumbnail=dig(data, "artwork_url", default=dig(user_data, "avatar_url")),
            formats=tuple(
                SoundCloudFormat.from_api(t)
                for t in dig(data, "media", "transcodings", default=[])
            ),
            genre=dig(data, "genre") or None,
            playback_count=int(dig(data, "playback_count", default=0))
        )

    @property
    def duration_seconds(self) -> int:
        return self.duration_ms // 1000

    @property
    def best_format(self) -> SoundCloudFormat | None:
        """
        The format used for streaming: the last one listed.

        The API has been observed to list transcodings from lowest to
        highest quality, and transcodings carry no bitrate to compare on.
        """
        return self.formats[-1] if self.formats else None


@dataclass(frozen=True)
class SoundCloudPlaylist:
    """
    Immutable representation of a SoundCloud playlist or album.

    Attributes:
        id: Numeric playlist id as a string.
        title: Playlist title.
        url: Canonical permalink URL.
        user: Owner.
        sub_type: "playlist" or "album".
        track_count: Number of tracks the API reports.
        duration_ms: Total duration in milliseconds.
        thumbnail: Artwork URL, if any.
        tracks: Fully resolved tracks in playlist order. May be shorter
                than track_count when some tracks are unavailable.
    """
    id: str
    title: str
    url: str
    track_count: int
    user: SoundCloudUser | None = None
    sub_type: str = "playlist"
    duration_ms: int = 0
    thumbnail: str | None = None
    tracks: tuple[SoundCloudTrack, ...] = field(default_factory=tuple)

    kind = "playlist"

    @classmethod
    def from_api(cls, data: dict[str, Any], tracks: list[SoundCloudTrack]) -> "SoundCloudPlaylist":
        """
        Create a SoundCloudPlaylist from an api-v2 playlist object.

        Args:
            data: The playlist object from the resolve endpoint.
            tracks: Tracks already built and completed by the client.

        Raises:
            ParseError: If id or title is missing.
        """
        playlist_id = str(require(data, "id", root="playlist"))
        user_data = dig(data, "user")

        return cls(
            id=playlist_id,
            title=require(data, "title", root="playlist"),
            url=dig(data, "permalink_url", default=f"https://soundcloud.com/playlists/{playlist_id}"),
            track_count=int(dig(data, "track_count", default=len(tracks))),
            user=SoundCloudUser.from_api(user_data) if isinstance(user_data, dict) else None,
            sub_type="album" if dig(data, "is_album", default=False) else "playlist",
            duration_ms=int(dig(data, "duration", default=0)),
            thumbnail=dig(data, "artwork_url"),
            tracks=tuple(tracks)
        )

    @property
    def fetched_count(self) -> int:
        """Number of tracks actually resolved."""
        return len(self.tracks)


@dataclass(frozen=True)
class StreamDescriptor:
    """
    A playable stream for one track.

    Attributes:
        url: Final signed media URL (an HLS playlist or a progressive file,
             depending on the format's protocol).
        stream_type: Codec classification of the stream.
        format: The format the URL was resolved from.
    """
    url: str
    stream_type: StreamType
    format: SoundCloudFormat | None = None
