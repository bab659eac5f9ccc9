"""
SoundCloud integration module for media-resolver.

This module resolves SoundCloud URLs to tracks and playlists and turns
tracks into playable stream URLs.

Components:
    - models: SoundCloudTrack, SoundCloudPlaylist, SoundCloudFormat,
              StreamDescriptor, StreamType
    - client: SoundCloudClient singleton, probe_credential(), is_soundcloud_url()

Usage:
    from media_resolver.soundcloud import SoundCloudClient, probe_credential

    if probe_credential(client_id):
        SoundCloudClient.init(Credential(client_id))
        stream = SoundCloudClient().stream_from_url(url)
"""

from media_resolver.soundcloud.client import (
    SoundCloudClient,
    is_soundcloud_url,
    probe_credential,
)
from media_resolver.soundcloud.models import (
    SoundCloudFormat,
    SoundCloudPlaylist,
    SoundCloudTrack,
    SoundCloudUser,
    StreamDescriptor,
    StreamType,
)

__all__ = [
    # Client
    "SoundCloudClient",
    "probe_credential",
    "is_soundcloud_url",
    # Models
    "SoundCloudUser",
    "SoundCloudFormat",
    "SoundCloudTrack",
    "SoundCloudPlaylist",
    "StreamDescriptor",
    "StreamType",
]
