"""Test the command-line interface"""

import json

import pytest
from click.testing import CliRunner

from media_resolver import __version__
from media_resolver.cli import cli
from media_resolver.core.exceptions import NetworkError
from media_resolver.core.http import HttpClient
from media_resolver.soundcloud.client import RESOLVE_URL

TRACK_URL = "https://soundcloud.com/artist/song-1001"
SIGNED_URL = "https://cf-hls-opus-media.sndcdn.com/playlist/abc.m3u8"


@pytest.fixture
def runner(tmp_path, monkeypatch):
    """CliRunner inside an empty working directory"""
    monkeypatch.chdir(tmp_path)
    return CliRunner()


@pytest.fixture
def with_client_id(tmp_path):
    (tmp_path / "config.yaml").write_text("soundcloud:\n  client_id: test-client-id\n", encoding="utf-8")


@pytest.fixture
def soundcloud_api(monkeypatch, track_payload):
    """Answer resolve and transcoding requests with a single track"""
    payload = track_payload()

    def get_json(self, url, params=None, headers=None):
        if url == RESOLVE_URL:
            return payload
        return {"url": SIGNED_URL}

    monkeypatch.setattr(HttpClient, "get_json", get_json)
    return payload


class TestGlobalOptions:
    """Test group-level behavior"""

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("search", "resolve", "stream", "validate", "check-id", "authorize"):
            assert command in result.output

    def test_missing_explicit_config(self, runner):
        result = runner.invoke(cli, ["--config", "missing.yaml", "validate", TRACK_URL])
        assert result.exit_code == 1
        assert "Configuration error" in result.output


class TestSearchCommand:
    """Test the search command"""

    def test_json_output(self, runner, monkeypatch, search_html, video_entry):
        calls = []

        def get_text(self, url, params=None, headers=None):
            calls.append(params)
            return search_html([video_entry("aaaaaaaaaaa"), video_entry("bbbbbbbbbbb")])

        monkeypatch.setattr(HttpClient, "get_text", get_text)
        result = runner.invoke(cli, ["search", "rick astley", "--limit", "1", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [item["id"] for item in data] == ["aaaaaaaaaaa"]
        assert data[0]["kind"] == "video"
        assert calls[0]["search_query"] == "rick astley"

    def test_text_output(self, runner, monkeypatch, search_html, playlist_entry):
        monkeypatch.setattr(HttpClient, "get_text", lambda self, url, params=None, headers=None: search_html([playlist_entry()]))
        result = runner.invoke(cli, ["search", "80s", "--type", "playlist"])

        assert result.exit_code == 0
        assert "80s Hits" in result.output
        assert "42 videos" in result.output

    def test_network_error(self, runner, monkeypatch):
        def get_text(self, url, params=None, headers=None):
            raise NetworkError("GET failed with HTTP 429", status_code=429)

        monkeypatch.setattr(HttpClient, "get_text", get_text)
        result = runner.invoke(cli, ["search", "query"])

        assert result.exit_code == 2
        assert "HTTP 429" in result.output

    def test_parse_error(self, runner, monkeypatch):
        monkeypatch.setattr(HttpClient, "get_text", lambda self, url, params=None, headers=None: "<html></html>")
        result = runner.invoke(cli, ["search", "query"])

        assert result.exit_code == 3
        assert "ytInitialData" in result.output


class TestSoundCloudCommands:
    """Test resolve, stream and validate"""

    def test_resolve_without_credential(self, runner):
        result = runner.invoke(cli, ["resolve", TRACK_URL])
        assert result.exit_code == 1
        assert "authorize" in result.output

    def test_resolve_track(self, runner, with_client_id, soundcloud_api):
        result = runner.invoke(cli, ["resolve", TRACK_URL])
        assert result.exit_code == 0
        assert "Song" in result.output
        assert "3:33" in result.output

    def test_resolve_json(self, runner, with_client_id, soundcloud_api):
        result = runner.invoke(cli, ["resolve", TRACK_URL, "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["kind"] == "track"
        assert data["id"] == "1001"

    def test_resolve_invalid_url(self, runner, with_client_id):
        result = runner.invoke(cli, ["resolve", "https://example.com/song"])
        assert result.exit_code == 3
        assert "not a SoundCloud URL" in result.output

    def test_stream(self, runner, with_client_id, soundcloud_api):
        result = runner.invoke(cli, ["stream", TRACK_URL])
        assert result.exit_code == 0
        assert f"ogg/opus\t{SIGNED_URL}" in result.output

    def test_stream_json(self, runner, with_client_id, soundcloud_api):
        result = runner.invoke(cli, ["stream", TRACK_URL, "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["url"] == SIGNED_URL
        assert data["stream_type"] == "ogg/opus"

    def test_validate(self, runner, with_client_id, soundcloud_api):
        result = runner.invoke(cli, ["validate", TRACK_URL])
        assert result.exit_code == 0
        assert result.output.strip() == "track"

    def test_validate_unsupported(self, runner, with_client_id, monkeypatch):
        monkeypatch.setattr(HttpClient, "get_json", lambda self, url, params=None, headers=None: {"kind": "user"})
        result = runner.invoke(cli, ["validate", "https://soundcloud.com/artist"])
        assert result.exit_code == 0
        assert result.output.strip() == "unsupported"


class TestCredentialCommands:
    """Test check-id and authorize"""

    def test_check_id_valid(self, runner, monkeypatch):
        monkeypatch.setattr(HttpClient, "get_text", lambda self, url, params=None, headers=None: "{}")
        result = runner.invoke(cli, ["check-id", "abc"])
        assert result.exit_code == 0
        assert "valid" in result.output

    def test_check_id_invalid(self, runner, monkeypatch):
        def get_text(self, url, params=None, headers=None):
            raise NetworkError("HTTP 401", status_code=401)

        monkeypatch.setattr(HttpClient, "get_text", get_text)
        result = runner.invoke(cli, ["check-id", "abc"])
        assert result.exit_code == 1
        assert "invalid" in result.output

    def test_authorize_saves_credential(self, runner, tmp_path, monkeypatch):
        monkeypatch.setattr(HttpClient, "get_text", lambda self, url, params=None, headers=None: "{}")
        result = runner.invoke(cli, ["authorize", "abc123"])

        assert result.exit_code == 0
        data_file = tmp_path / ".data" / "soundcloud.data"
        assert json.loads(data_file.read_text(encoding="utf-8")) == {"client_id": "abc123"}

    def test_authorize_rejected(self, runner, tmp_path, monkeypatch):
        def get_text(self, url, params=None, headers=None):
            raise NetworkError("HTTP 401", status_code=401)

        monkeypatch.setattr(HttpClient, "get_text", get_text)
        result = runner.invoke(cli, ["authorize", "abc123"])

        assert result.exit_code == 1
        assert not (tmp_path / ".data").exists()

    @pytest.mark.parametrize("status, exit_code", [(None, 0), (401, 1)])
    def test_http_session_closed_after_command(self, runner, monkeypatch, status, exit_code):
        closed = []

        def get_text(self, url, params=None, headers=None):
            if status:
                raise NetworkError(f"HTTP {status}", status_code=status)
            return "{}"

        monkeypatch.setattr(HttpClient, "get_text", get_text)
        monkeypatch.setattr(HttpClient, "close", lambda self: closed.append(self))
        result = runner.invoke(cli, ["check-id", "abc"])

        assert result.exit_code == exit_code
        assert len(closed) == 1
