"""Test YouTube search results parsing"""

import logging

import pytest

from media_resolver.core.exceptions import ConfigError, ParseError
from media_resolver.youtube.models import (
    SearchOptions,
    YouTubeChannel,
    YouTubePlaylist,
    YouTubeVideo,
)
from media_resolver.youtube.parser import extract_initial_data, parse_search_results


def _skipped(caplog):
    return [r for r in caplog.records if hasattr(r, "skipped_renderer")]


class TestEnvelope:
    """Test extraction of the ytInitialData payload"""

    def test_empty_html(self):
        with pytest.raises(ParseError, match="without data"):
            parse_search_results("")

    def test_missing_marker(self):
        with pytest.raises(ParseError):
            parse_search_results("<html><body>consent page</body></html>")

    def test_invalid_json(self):
        with pytest.raises(ParseError):
            parse_search_results("<script>var ytInitialData = {not json};</script>")

    def test_payload_not_an_object(self):
        with pytest.raises(ParseError):
            parse_search_results("<script>var ytInitialData = [1, 2];</script>")

    def test_missing_results_path(self):
        with pytest.raises(ParseError) as exc_info:
            parse_search_results('<script>var ytInitialData = {"contents": {}};</script>')
        assert "twoColumnSearchResultsRenderer" in exc_info.value.message

    def test_results_container_not_a_list(self, search_html):
        html = search_html([]).replace('"contents": []', '"contents": {}')
        with pytest.raises(ParseError):
            parse_search_results(html)

    def test_trailing_declaration_in_same_script(self, search_html, video_entry):
        html = search_html([video_entry()], trailer=" var ytcfg = {\"a\": 1};")
        data = extract_initial_data(html)
        assert "contents" in data
        assert len(parse_search_results(html)) == 1

    def test_empty_results_list(self, search_html):
        assert parse_search_results(search_html([])) == []


class TestOptions:
    """Test option validation"""

    def test_unknown_type(self, search_html):
        with pytest.raises(ConfigError):
            parse_search_results(search_html([]), SearchOptions(type="movie"))

    def test_unknown_type_checked_before_parsing(self):
        with pytest.raises(ConfigError):
            parse_search_results("", SearchOptions(type="movie"))

    def test_negative_limit(self, search_html):
        with pytest.raises(ConfigError):
            parse_search_results(search_html([]), SearchOptions(limit=-1))


class TestVideos:
    """Test video result parsing"""

    def test_video_fields(self, search_html, video_entry):
        [video] = parse_search_results(search_html([video_entry()]))

        assert isinstance(video, YouTubeVideo)
        assert video.kind == "video"
        assert video.id == "dQw4w9WgXcQ"
        assert video.url == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
        assert video.title == "Never Gonna Give You Up"
        assert video.description == "The official video"
        assert video.duration == 213
        assert video.duration_raw == "3:33"
        assert video.live is False
        assert video.views == 1234567
        assert video.uploaded_at == "14 years ago"
        assert len(video.thumbnails) == 2
        assert video.thumbnail.url == "https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg"

    def test_video_channel(self, search_html, video_entry):
        [video] = parse_search_results(search_html([video_entry()]))

        assert video.channel.id == "UCuAXFkgsw1L7xaCfnd5JJOw"
        assert video.channel.name == "Rick Astley"
        assert video.channel.url == "https://www.youtube.com/@RickAstleyYT"
        assert video.channel.verified is True
        assert video.channel.artist is True
        assert video.channel.icons[0].url == "https://yt3.ggpht.com/avatar=s68"

    def test_live_video(self, search_html, video_entry):
        entry = video_entry(
            lengthText=None,
            viewCountText={"runs": [{"text": "1,234"}, {"text": " watching"}]},
        )
        [video] = parse_search_results(search_html([entry]))

        assert video.live is True
        assert video.duration == 0
        assert video.duration_raw is None
        assert video.views == 1234

    def test_no_badges_no_owner(self, search_html, video_entry):
        entry = video_entry(ownerBadges=None, ownerText=None, viewCountText=None)
        [video] = parse_search_results(search_html([entry]))

        assert video.channel is None
        assert video.views == 0

    def test_empty_duration_text_is_live(self, search_html, video_entry):
        [video] = parse_search_results(search_html([video_entry(lengthText={"simpleText": ""})]))

        assert video.live is True
        assert video.duration == 0
        assert video.duration_raw is None

    @pytest.mark.parametrize("overrides", [
        {"lengthText": {"simpleText": 213}},
        {"viewCountText": {"simpleText": 1234}},
        {"thumbnail": {"thumbnails": [{"url": 42, "width": 120, "height": 90}]}},
    ])
    def test_wrong_json_type_skips_entry(self, search_html, video_entry, caplog, overrides):
        entries = [video_entry("aaaaaaaaaaa", **overrides), video_entry("bbbbbbbbbbb")]
        with caplog.at_level(logging.WARNING):
            results = parse_search_results(search_html(entries))

        assert [v.id for v in results] == ["bbbbbbbbbbb"]
        [record] = _skipped(caplog)
        assert record.skipped_entry_id == "aaaaaaaaaaa"

    def test_owner_run_not_an_object(self, search_html, video_entry):
        [video] = parse_search_results(search_html([video_entry(ownerText={"runs": ["Rick Astley"]})]))
        assert video.channel is None

    def test_malformed_text_runs_are_ignored(self, search_html, video_entry):
        entry = video_entry(
            detailedMetadataSnippets=[{"snippetText": {"runs": [{"text": 5}, {"text": "kept"}, "loose"]}}],
            viewCountText={"runs": [{"text": None}, {"text": "77 watching"}]},
        )
        [video] = parse_search_results(search_html([entry]))

        assert video.description == "kept"
        assert video.views == 77

    def test_other_renderers_are_ignored(self, search_html, video_entry, channel_entry, playlist_entry, caplog):
        entries = [
            {"adSlotRenderer": {}},
            channel_entry(),
            video_entry("aaaaaaaaaaa"),
            {"shelfRenderer": {"title": "People also watched"}},
            playlist_entry(),
            video_entry("bbbbbbbbbbb"),
        ]
        with caplog.at_level(logging.WARNING):
            results = parse_search_results(search_html(entries))

        assert [v.id for v in results] == ["aaaaaaaaaaa", "bbbbbbbbbbb"]
        assert _skipped(caplog) == []

    def test_malformed_entry_is_skipped_and_reported(self, search_html, video_entry, caplog):
        entries = [video_entry("aaaaaaaaaaa"), video_entry("bbbbbbbbbbb", title=""), video_entry("ccccccccccc")]
        with caplog.at_level(logging.WARNING):
            results = parse_search_results(search_html(entries))

        assert [v.id for v in results] == ["aaaaaaaaaaa", "ccccccccccc"]
        [record] = _skipped(caplog)
        assert record.skipped_renderer == "videoRenderer"
        assert record.skipped_entry_id == "bbbbbbbbbbb"
        assert "videoRenderer.title.runs.0.text" in record.skipped_reason

    def test_limit_keeps_source_order(self, search_html, video_entry):
        entries = [video_entry(f"video{i:06d}") for i in range(5)]
        results = parse_search_results(search_html(entries), SearchOptions(limit=3))
        assert [v.id for v in results] == ["video000000", "video000001", "video000002"]

    def test_limit_stops_before_later_entries(self, search_html, video_entry, caplog):
        entries = [video_entry("aaaaaaaaaaa"), video_entry("bbbbbbbbbbb"), video_entry("broken", title="")]
        with caplog.at_level(logging.WARNING):
            results = parse_search_results(search_html(entries), SearchOptions(limit=2))

        assert len(results) == 2
        assert _skipped(caplog) == []

    def test_zero_limit_means_all(self, search_html, video_entry):
        entries = [video_entry(f"video{i:06d}") for i in range(4)]
        assert len(parse_search_results(search_html(entries), SearchOptions(limit=0))) == 4


class TestChannels:
    """Test channel result parsing"""

    def test_channel_fields(self, search_html, channel_entry, video_entry):
        html = search_html([video_entry(), channel_entry()])
        [channel] = parse_search_results(html, SearchOptions(type="channel"))

        assert isinstance(channel, YouTubeChannel)
        assert channel.kind == "channel"
        assert channel.id == "UCuAXFkgsw1L7xaCfnd5JJOw"
        assert channel.name == "Rick Astley"
        assert channel.url == "https://www.youtube.com/@RickAstleyYT"
        assert channel.icon.url == "https://yt3.ggpht.com/avatar=s176"
        assert channel.verified is True
        assert channel.artist is False
        assert channel.subscribers == "4.2M subscribers"

    def test_channel_defaults(self, search_html, channel_entry):
        entry = channel_entry(
            channel_id="UCplain",
            navigationEndpoint=None,
            ownerBadges=None,
            subscriberCountText=None,
            thumbnail=None,
        )
        [channel] = parse_search_results(search_html([entry]), SearchOptions(type="channel"))

        assert channel.url == "https://www.youtube.com/channel/UCplain"
        assert channel.verified is False
        assert channel.icon is None
        assert channel.subscribers == "0 subscribers"


class TestPlaylists:
    """Test playlist result parsing"""

    def test_playlist_fields(self, search_html, playlist_entry):
        [playlist] = parse_search_results(search_html([playlist_entry()]), SearchOptions(type="playlist"))

        assert isinstance(playlist, YouTubePlaylist)
        assert playlist.kind == "playlist"
        assert playlist.id == "PLFgquLnL59alCl_2TQvOiD5Vgm1hCaGSI"
        assert playlist.url == "https://www.youtube.com/playlist?list=PLFgquLnL59alCl_2TQvOiD5Vgm1hCaGSI"
        assert playlist.title == "80s Hits"
        assert playlist.videos == 42
        assert playlist.thumbnail.url == "https://i.ytimg.com/vi/a/maxres.jpg"
        assert playlist.channel.name == "Music Lover"
        assert playlist.channel.url == "https://www.youtube.com/channel/UCmusic"

    def test_video_count_text_with_separators(self, search_html, playlist_entry):
        html = search_html([playlist_entry(videoCount="1,024 videos")])
        [playlist] = parse_search_results(html, SearchOptions(type="playlist"))
        assert playlist.videos == 1024

    def test_video_count_without_digits_is_skipped(self, search_html, playlist_entry, caplog):
        html = search_html([playlist_entry(videoCount="No videos"), playlist_entry("PLok")])
        with caplog.at_level(logging.WARNING):
            results = parse_search_results(html, SearchOptions(type="playlist"))

        assert [p.id for p in results] == ["PLok"]
        [record] = _skipped(caplog)
        assert record.skipped_renderer == "playlistRenderer"
