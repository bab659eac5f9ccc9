"""Test configuration and fixtures"""

import json
from typing import Any
from unittest.mock import Mock

import pytest

from media_resolver.core.http import HttpClient
from media_resolver.soundcloud.client import SoundCloudClient


def _wrap_results(entries: list[dict[str, Any]]) -> dict[str, Any]:
    """Place result entries at the path a real results page uses"""
    return {
        "contents": {
            "twoColumnSearchResultsRenderer": {
                "primaryContents": {
                    "sectionListRenderer": {
                        "contents": [
                            {"itemSectionRenderer": {"contents": entries}}
                        ]
                    }
                }
            }
        }
    }


@pytest.fixture(autouse=True)
def reset_soundcloud_client():
    """Every test starts with an uninitialized SoundCloudClient"""
    SoundCloudClient.reset()
    yield
    SoundCloudClient.reset()


@pytest.fixture
def search_html():
    """Build a results page embedding the given entries in ytInitialData"""
    def build(entries: list[dict[str, Any]], trailer: str = "") -> str:
        payload = json.dumps(_wrap_results(entries))
        return (
            "<html><head><script nonce=\"abc\">"
            f"var ytInitialData = {payload};{trailer}</script>"
            "</head><body></body></html>"
        )
    return build


@pytest.fixture
def video_entry():
    """Factory for videoRenderer entries; keyword overrides replace renderer keys"""
    def build(video_id: str = "dQw4w9WgXcQ", title: str = "Never Gonna Give You Up", **overrides) -> dict:
        renderer = {
            "videoId": video_id,
            "title": {"runs": [{"text": title}]},
            "lengthText": {"simpleText": "3:33"},
            "thumbnail": {"thumbnails": [
                {"url": f"https://i.ytimg.com/vi/{video_id}/default.jpg", "width": 120, "height": 90},
                {"url": f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg", "width": 480, "height": 360},
            ]},
            "ownerText": {"runs": [{
                "text": "Rick Astley",
                "navigationEndpoint": {
                    "browseEndpoint": {
                        "browseId": "UCuAXFkgsw1L7xaCfnd5JJOw",
                        "canonicalBaseUrl": "/@RickAstleyYT",
                    }
                },
            }]},
            "ownerBadges": [
                {"metadataBadgeRenderer": {"style": "BADGE_STYLE_TYPE_VERIFIED_ARTIST"}}
            ],
            "channelThumbnailSupportedRenderers": {
                "channelThumbnailWithLinkRenderer": {
                    "thumbnail": {"thumbnails": [
                        {"url": "//yt3.ggpht.com/avatar=s68", "width": 68, "height": 68}
                    ]}
                }
            },
            "viewCountText": {"simpleText": "1,234,567 views"},
            "publishedTimeText": {"simpleText": "14 years ago"},
            "detailedMetadataSnippets": [
                {"snippetText": {"runs": [{"text": "The official "}, {"text": "video"}]}}
            ],
        }
        renderer.update(overrides)
        return {"videoRenderer": renderer}
    return build


@pytest.fixture
def channel_entry():
    """Factory for channelRenderer entries"""
    def build(channel_id: str = "UCuAXFkgsw1L7xaCfnd5JJOw", name: str = "Rick Astley", **overrides) -> dict:
        renderer = {
            "channelId": channel_id,
            "title": {"simpleText": name},
            "navigationEndpoint": {
                "browseEndpoint": {"browseId": channel_id, "canonicalBaseUrl": "/@RickAstleyYT"}
            },
            "thumbnail": {"thumbnails": [
                {"url": "//yt3.ggpht.com/avatar=s88", "width": 88, "height": 88},
                {"url": "//yt3.ggpht.com/avatar=s176", "width": 176, "height": 176},
            ]},
            "ownerBadges": [
                {"metadataBadgeRenderer": {"style": "BADGE_STYLE_TYPE_VERIFIED"}}
            ],
            "subscriberCountText": {"simpleText": "4.2M subscribers"},
        }
        renderer.update(overrides)
        return {"channelRenderer": renderer}
    return build


@pytest.fixture
def playlist_entry():
    """Factory for playlistRenderer entries"""
    def build(playlist_id: str = "PLFgquLnL59alCl_2TQvOiD5Vgm1hCaGSI", title: str = "80s Hits", **overrides) -> dict:
        renderer = {
            "playlistId": playlist_id,
            "title": {"simpleText": title},
            "videoCount": "42",
            "thumbnails": [{"thumbnails": [
                {"url": "https://i.ytimg.com/vi/a/hqdefault.jpg", "width": 480, "height": 270},
                {"url": "https://i.ytimg.com/vi/a/maxres.jpg", "width": 1280, "height": 720},
            ]}],
            "shortBylineText": {"runs": [{
                "text": "Music Lover",
                "navigationEndpoint": {
                    "browseEndpoint": {"browseId": "UCmusic"},
                    "commandMetadata": {"webCommandMetadata": {"url": "/channel/UCmusic"}},
                },
            }]},
        }
        renderer.update(overrides)
        return {"playlistRenderer": renderer}
    return build


@pytest.fixture
def track_payload():
    """Factory for api-v2 track objects"""
    def build(track_id: int = 1001, title: str = "Song", mime_types: tuple = ("audio/mpeg", 'audio/ogg; codecs="opus"'), **overrides) -> dict:
        data = {
            "kind": "track",
            "id": track_id,
            "title": title,
            "permalink": f"song-{track_id}",
            "permalink_url": f"https://soundcloud.com/artist/song-{track_id}",
            "duration": 213000,
            "full_duration": 213000,
            "artwork_url": None,
            "genre": "Pop",
            "playback_count": 99,
            "user": {
                "id": 42,
                "username": "artist",
                "permalink_url": "https://soundcloud.com/artist",
                "avatar_url": "https://i1.sndcdn.com/avatars-42-large.jpg",
                "verified": True,
            },
            "media": {"transcodings": [
                {
                    "url": f"https://api-v2.soundcloud.com/media/soundcloud:tracks:{track_id}/{index}/stream/hls",
                    "preset": "opus_0_0" if mime.startswith("audio/ogg") else "mp3_0_0",
                    "duration": 213000,
                    "snipped": False,
                    "quality": "sq",
                    "format": {"protocol": "hls", "mime_type": mime},
                }
                for index, mime in enumerate(mime_types)
            ]},
        }
        data.update(overrides)
        return data
    return build


@pytest.fixture
def playlist_payload():
    """Factory for api-v2 playlist objects; tracks are given as-is"""
    def build(tracks: list[dict], playlist_id: int = 5005, title: str = "Mixtape", **overrides) -> dict:
        data = {
            "kind": "playlist",
            "id": playlist_id,
            "title": title,
            "permalink_url": f"https://soundcloud.com/artist/sets/mixtape-{playlist_id}",
            "track_count": len(tracks),
            "duration": 213000 * len(tracks),
            "is_album": False,
            "artwork_url": "https://i1.sndcdn.com/artworks-5005-large.jpg",
            "user": {"id": 42, "username": "artist"},
            "tracks": tracks,
        }
        data.update(overrides)
        return data
    return build


@pytest.fixture
def fake_http():
    """HttpClient double; tests set get_text / get_json behavior"""
    return Mock(spec=HttpClient)
