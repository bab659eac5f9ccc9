"""
SoundCloud API client singleton for media-resolver.

This module resolves SoundCloud URLs to tracks and playlists through the
undocumented api-v2 endpoints used by the SoundCloud web player, and
turns a track into a playable stream URL.

Singleton Pattern:
    SoundCloudClient is initialized once with init(), which fixes the
    credential for the rest of the process. Subsequent calls to
    SoundCloudClient() return the same instance. If init() was given no
    credential, every credentialed operation fails with ConfigError; there
    is no later re-check of the data file.

Endpoints:
    GET https://api-v2.soundcloud.com/resolve?url=...&client_id=...
        Turns any canonical URL into its API object ("kind" says which).
    GET https://api-v2.soundcloud.com/tracks?ids=1,2,3&client_id=...
        Full objects for tracks a playlist payload lists only by id.
    GET <transcoding url>?client_id=...
        {"url": "<signed media url>"} for one format of a track.
    GET https://api-v2.soundcloud.com/search?q=...&limit=0&client_id=...
        Used as a cheap liveness check for a client_id.

Usage:
    from media_resolver.soundcloud.client import SoundCloudClient

    SoundCloudClient.init(credential, http)

    client = SoundCloudClient()
    item = client.resolve("https://soundcloud.com/artist/song")
    stream = client.stream_from_track(item)
"""

import json
import re
from typing import Any, Literal

from tqdm import tqdm

from media_resolver.core.config import Credential
from media_resolver.core.exceptions import (
    ConfigError,
    NetworkError,
    ParseError,
    StateError,
    ValidationError,
)
from media_resolver.core.http import HttpClient
from media_resolver.core.logger import get_logger
from media_resolver.soundcloud.models import (
    SoundCloudPlaylist,
    SoundCloudTrack,
    StreamDescriptor,
)
from media_resolver.utils import dig

logger = get_logger(__name__)


API_BASE = "https://api-v2.soundcloud.com"
RESOLVE_URL = f"{API_BASE}/resolve"
TRACKS_URL = f"{API_BASE}/tracks"
SEARCH_URL = f"{API_BASE}/search"

# api-v2 accepts at most 50 ids per /tracks request
TRACKS_BATCH_SIZE = 50

SOUNDCLOUD_URL_PATTERN = re.compile(
    r"^(?:(https?)://)?(?:(?:www|m)\.)?(soundcloud\.com|snd\.sc)/(.*)$"
)


def is_soundcloud_url(url: str) -> bool:
    """
    Check whether a URL has the shape of a SoundCloud URL.

    Scheme is optional, www. and m. subdomains are allowed, the host must
    be soundcloud.com or snd.sc, and any path is accepted.

    Examples:
        is_soundcloud_url("https://soundcloud.com/x/y")   # True
        is_soundcloud_url("snd.sc/abc")                   # True
        is_soundcloud_url("https://example.com")          # False
    """
    return SOUNDCLOUD_URL_PATTERN.match(url) is not None


def probe_credential(client_id: str, http: HttpClient | None = None) -> bool:
    """
    Check whether a client_id is accepted by the API.

    Issues a zero-result search with the candidate id. This never raises
    for network failures and never touches the persisted credential.

    Args:
        client_id: Candidate client_id.
        http: HTTP client to use; a fresh one if None.

    Returns:
        True if the search succeeded, False on any network error.
    """
    http = http or HttpClient()
    try:
        http.get_text(SEARCH_URL, params={"client_id": client_id, "q": "Rick Roll", "limit": 0})
    except NetworkError as e:
        logger.debug(f"client_id probe failed: {e}")
        return False
    return True


class SoundCloudClientMeta(type):
    """
    Metaclass implementing the singleton pattern for SoundCloudClient.

    This metaclass ensures:
    1. SoundCloudClient cannot be instantiated before init() is called
    2. init() can only be called once
    3. After init(), SoundCloudClient() always returns the same instance

    Attributes:
        _instance: The singleton SoundCloudClient instance, or None.
        _initialized: Flag indicating whether init() has been called.
    """

    _instance: "SoundCloudClient | None" = None
    _initialized: bool = False

    def __call__(cls) -> "SoundCloudClient":
        """
        Get the SoundCloudClient singleton instance.

        Raises:
            ConfigError: If init() has not been called yet.
        """
        if cls._instance is None:
            raise ConfigError(
                "SoundCloudClient not initialized. Call SoundCloudClient.init("
                "credential) first."
            )
        return cls._instance

    def init(
        cls,
        credential: Credential | None,
        http: HttpClient | None = None
    ) -> "SoundCloudClient":
        """
        Initialize the SoundCloudClient singleton.

        Args:
            credential: The loaded credential, or None if there is none.
                        None is accepted; operations then fail closed.
            http: HTTP client to use; a fresh one if None.

        Returns:
            The initialized SoundCloudClient singleton instance.

        Raises:
            ConfigError: If init() has already been called.
        """
        if cls._initialized:
            raise ConfigError(
                "SoundCloudClient.init() has already been called. "
                "Use SoundCloudClient() to get the existing instance."
            )

        if credential is None:
            logger.debug("No SoundCloud credential loaded; SoundCloud operations are disabled")

        instance = super().__call__(credential, http or HttpClient())
        cls._instance = instance
        cls._initialized = True
        return instance

    def is_initialized(cls) -> bool:
        """Check if the SoundCloudClient has been initialized."""
        return cls._initialized

    def reset(cls) -> None:
        """
        Reset the singleton state (for testing only).

        Clears the singleton instance, allowing init() to be called again.
        """
        cls._instance = None
        cls._initialized = False


class SoundCloudClient(metaclass=SoundCloudClientMeta):
    """
    Singleton SoundCloud API client.

    Attributes:
        _credential: The credential fixed at init(), or None.
        _http: HTTP client used for every request.

    Example:
        client = SoundCloudClient()

        kind = client.probe_url_kind(url)   # "track", "playlist" or False
        track = client.resolve(url)
        stream = client.stream_from_track(track)
        print(stream.url, stream.stream_type)
    """

    def __init__(self, credential: Credential | None, http: HttpClient) -> None:
        """
        Initialize the SoundCloudClient instance.

        Note:
            This constructor is called by the metaclass init() method.
            Do not call directly - use SoundCloudClient.init() instead.
        """
        self._credential = credential
        self._http = http

    @property
    def has_credential(self) -> bool:
        return self._credential is not None

    @property
    def client_id(self) -> str:
        """
        The loaded client_id.

        Raises:
            ConfigError: If no credential was loaded.
        """
        if self._credential is None:
            raise ConfigError(
                "SoundCloud client_id is missing. Did you forget to run "
                "'media-resolver authorize'?"
            )
        return self._credential.client_id

    # =========================================================================
    # Resolve Operations
    # =========================================================================

    def resolve(self, url: str) -> SoundCloudTrack | SoundCloudPlaylist:
        """
        Resolve a SoundCloud URL to a track or playlist.

        Args:
            url: Canonical SoundCloud URL.

        Returns:
            SoundCloudTrack for kind "track", SoundCloudPlaylist for kind
            "playlist" (with every track fetched).

        Raises:
            ConfigError: If no credential is loaded.
            ValidationError: If the URL is not a SoundCloud URL, or it
                             resolves to another kind (user, system playlist).
            NetworkError: If a request fails; not retried.
            ParseError: If a response is not the expected JSON.
        """
        client_id = self.client_id
        if not is_soundcloud_url(url):
            raise ValidationError(
                f"This is not a SoundCloud URL: {url}",
                details={"url": url}
            )

        data = self._resolve_json(url, client_id)
        kind = data.get("kind")

        if kind == "track":
            track = SoundCloudTrack.from_api(data)
            logger.debug(f"Resolved track {track.id}: {track.title}")
            return track
        if kind == "playlist":
            playlist = SoundCloudPlaylist.from_api(data, self._playlist_tracks(data))
            logger.debug(
                f"Resolved playlist {playlist.id}: {playlist.title} "
                f"({playlist.fetched_count}/{playlist.track_count} tracks)"
            )
            return playlist

        raise ValidationError(
            f"This URL is out of scope: resolved kind is {kind!r}",
            details={"url": url, "kind": kind}
        )

    def probe_url_kind(self, url: str) -> Literal["track", "playlist", False]:
        """
        Resolve a URL and report only its kind.

        Unlike probe_credential(), network failures propagate.

        Returns:
            "track", "playlist", or False for any other kind.

        Raises:
            ConfigError: If no credential is loaded.
            NetworkError: If the resolve request fails.
            ParseError: If the response is not a JSON object.
        """
        kind = self._resolve_json(url, self.client_id).get("kind")
        if kind == "track":
            return "track"
        if kind == "playlist":
            return "playlist"
        return False

    def fetch_tracks(self, track_ids: list[str]) -> list[SoundCloudTrack]:
        """
        Fetch full track objects by id.

        Args:
            track_ids: Track ids, in the order the result should follow.
                       Requested in batches of 50.

        Returns:
            Tracks in input order. Ids the API does not return (deleted or
            private tracks) are left out with a warning.

        Raises:
            ConfigError: If no credential is loaded.
            NetworkError: If a request fails.
            ParseError: If a response is not a JSON list of tracks.
        """
        if not track_ids:
            return []

        client_id = self.client_id
        batches = [
            track_ids[i:i + TRACKS_BATCH_SIZE]
            for i in range(0, len(track_ids), TRACKS_BATCH_SIZE)
        ]

        by_id: dict[str, SoundCloudTrack] = {}
        for batch in tqdm(batches, desc="Fetching tracks", unit="batch",
                          leave=False, disable=len(batches) < 2):
            body = self._http.get_text(
                TRACKS_URL,
                params={"ids": ",".join(batch), "client_id": client_id}
            )
            for item in _parse_json_list(body, TRACKS_URL):
                track = SoundCloudTrack.from_api(item)
                by_id[track.id] = track

        missing = [track_id for track_id in track_ids if track_id not in by_id]
        if missing:
            logger.warning(f"{len(missing)} track(s) unavailable: {', '.join(missing)}")

        return [by_id[track_id] for track_id in track_ids if track_id in by_id]

    # =========================================================================
    # Stream Operations
    # =========================================================================

    def stream_from_url(self, url: str) -> StreamDescriptor:
        """
        Resolve a track URL and return its stream.

        Raises:
            StateError: If the URL resolves to a playlist.
            (plus everything resolve() and stream_from_track() raise)
        """
        item = self.resolve(url)
        if isinstance(item, SoundCloudPlaylist):
            raise StateError(
                "Streams can't be created from a playlist URL",
                details={"url": url}
            )
        return self.stream_from_track(item)

    def stream_from_track(self, track: SoundCloudTrack) -> StreamDescriptor:
        """
        Return the stream of an already resolved track.

        Picks the last listed format, requests its transcoding URL with the
        client_id, and classifies the stream from the format's MIME type.

        Raises:
            StateError: If given a playlist, or the track has no formats.
            ConfigError: If no credential is loaded.
            NetworkError: If the transcoding request fails.
            ParseError: If the answer has no 'url'.
        """
        if isinstance(track, SoundCloudPlaylist):
            raise StateError(
                "Streams can't be created from a playlist",
                details={"playlist_id": track.id}
            )

        chosen = track.best_format
        if chosen is None:
            raise StateError(
                f"Track {track.id} has no stream formats",
                details={"track_id": track.id}
            )

        data = self._http.get_json(chosen.url, params={"client_id": self.client_id})
        stream_url = data.get("url")
        if not isinstance(stream_url, str) or not stream_url:
            raise ParseError(
                "Transcoding response has no 'url'",
                details={"track_id": track.id, "format_url": chosen.url}
            )

        logger.debug(f"Stream for track {track.id}: {chosen.preset} ({chosen.mime_type})")
        return StreamDescriptor(url=stream_url, stream_type=chosen.stream_type, format=chosen)

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _resolve_json(self, url: str, client_id: str) -> dict[str, Any]:
        """Call the resolve endpoint and decode its JSON object."""
        return self._http.get_json(RESOLVE_URL, params={"url": url, "client_id": client_id})

    def _playlist_tracks(self, data: dict[str, Any]) -> list[SoundCloudTrack]:
        """
        Build every track of a playlist payload, fetching the incomplete ones.

        The resolve payload embeds full objects only for the first few
        tracks; the rest carry just an id. A track counts as complete when
        it has a title.
        """
        entries = [e for e in dig(data, "tracks", default=[]) if isinstance(e, dict)]

        complete: dict[str, SoundCloudTrack] = {}
        order: list[str] = []
        stubs: list[str] = []
        for entry in entries:
            if entry.get("id") is None:
                continue
            track_id = str(entry["id"])
            order.append(track_id)
            if entry.get("title"):
                complete[track_id] = SoundCloudTrack.from_api(entry)
            else:
                stubs.append(track_id)

        for track in self.fetch_tracks(stubs):
            complete[track.id] = track

        return [complete[track_id] for track_id in order if track_id in complete]


def _parse_json_list(text: str, source: str) -> list[dict[str, Any]]:
    """Decode text that must contain a JSON list of objects."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(
            f"Invalid JSON in {source}: {e}",
            details={"source": source, "original_error": str(e)}
        ) from e

    if not isinstance(data, list):
        raise ParseError(
            f"Expected a JSON list in {source}, got {type(data).__name__}",
            details={"source": source}
        )

    return [item for item in data if isinstance(item, dict)]
