"""Tests for lineup.config: secure persistence and validation."""

import json
import os
import stat
from unittest.mock import MagicMock

import pytest

from lineup.config import Config, load_tidal_session, save_tidal_session
from lineup.errors import ConfigError


class TestConfig:

    def test_defaults(self):
        config = Config()
        assert config.catalog == "spotify"
        assert config.retry_attempts == 1
        assert config.require_authorization is False

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "lineup" / "config.json"
        Config(catalog="tidal", track_workers=2, extra_noise_phrases=["tickets"]).save(path)

        loaded = Config.load(path)
        assert loaded.catalog == "tidal"
        assert loaded.track_workers == 2
        assert loaded.extra_noise_phrases == ["tickets"]

    def test_saved_file_owner_only(self, tmp_path):
        path = tmp_path / "config.json"
        Config().save(path)
        assert stat.S_IMODE(os.stat(path).st_mode) == 0o600

    def test_missing_file_gives_defaults(self, tmp_path):
        assert Config.load(tmp_path / "nope.json") == Config()

    def test_malformed_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        assert Config.load(path) == Config()

    def test_unknown_keys_ignored(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"catalog": "tidal", "yandex_token": "x"}))
        assert Config.load(path).catalog == "tidal"

    @pytest.mark.parametrize("kwargs", [
        {"catalog": "deezer"},
        {"retry_attempts": 0},
        {"track_workers": 0},
        {"lookup_timeout": 0},
    ])
    def test_validate_rejects(self, kwargs):
        with pytest.raises(ConfigError):
            Config(**kwargs).validate()

    def test_validate_allows_no_timeout(self):
        assert Config(lookup_timeout=None).validate().lookup_timeout is None


class TestTidalSession:

    def test_missing_file(self, tmp_path):
        assert load_tidal_session(MagicMock(), tmp_path / "session.json") is False

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "session.json"
        saved = MagicMock(token_type="Bearer", access_token="a", refresh_token="r", expiry_time=None)
        save_tidal_session(saved, path)

        session = MagicMock()
        session.check_login.return_value = True
        assert load_tidal_session(session, path) is True
        session.load_oauth_session.assert_called_once_with(
            token_type="Bearer", access_token="a", refresh_token="r",
        )

    def test_expired_session(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text(json.dumps({"token_type": "Bearer", "access_token": "a"}))
        session = MagicMock()
        session.check_login.return_value = False
        assert load_tidal_session(session, path) is False

    def test_incomplete_file(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text(json.dumps({"token_type": "Bearer"}))
        assert load_tidal_session(MagicMock(), path) is False
