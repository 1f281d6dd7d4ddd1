"""Tests for the Spotify and Tidal catalog wrappers, with SDKs mocked out."""

from unittest.mock import MagicMock

import pytest
from spotipy.exceptions import SpotifyException
from spotipy.oauth2 import SpotifyClientCredentials, SpotifyOauthError
from tidalapi.exceptions import ObjectNotFound

from lineup.clients.base import AuthorizationStatus
from lineup.clients.spotify_client import SpotifyClient
from lineup.clients.tidal_client import TidalClient
from tests.conftest import artist


def spotify(auth_manager=None):
    client = MagicMock()
    client.auth_manager = auth_manager
    return SpotifyClient(market="KR", client=client), client


def tidal_item(name, item_id=1, artist_name=None):
    item = MagicMock()
    item.name = name
    item.id = item_id
    if artist_name is None:
        item.artist = None
    else:
        item.artist = MagicMock()
        item.artist.name = artist_name
    return item


class TestSpotifyClient:

    def test_search_artists(self):
        wrapper, client = spotify()
        client.search.return_value = {"artists": {"items": [
            {"id": "3Nrfpe0tUJi4K4DXYWgMUX", "name": "BTS",
             "external_urls": {"spotify": "https://open.spotify.com/artist/3Nrf"}},
            {"id": "x", "name": ""},
        ]}}

        artists = wrapper.search_artists("BTS", 5)

        client.search.assert_called_once_with(q="BTS", type="artist", limit=5)
        assert [a.name for a in artists] == ["BTS"]
        assert artists[0].url == "https://open.spotify.com/artist/3Nrf"

    def test_top_tracks_uses_market(self):
        wrapper, client = spotify()
        client.artist_top_tracks.return_value = {"tracks": [
            {"name": "Dynamite", "artists": [{"name": "BTS"}]},
            {"name": "My Universe", "artists": [{"name": "Coldplay"}, {"name": "BTS"}]},
        ]}

        songs = wrapper.artist_top_tracks(artist("BTS", "bts-id"))

        client.artist_top_tracks.assert_called_once_with("bts-id", country="KR")
        assert [(s.title, s.artist_name) for s in songs] == [
            ("Dynamite", "BTS"), ("My Universe", "Coldplay, BTS"),
        ]

    def test_top_tracks_missing_record(self):
        wrapper, client = spotify()
        client.artist_top_tracks.side_effect = SpotifyException(404, -1, "not found")
        assert wrapper.artist_top_tracks(artist("BTS")) is None

    def test_top_tracks_server_error_propagates(self):
        wrapper, client = spotify()
        client.artist_top_tracks.side_effect = SpotifyException(500, -1, "boom")
        with pytest.raises(SpotifyException):
            wrapper.artist_top_tracks(artist("BTS"))

    def test_search_tracks(self):
        wrapper, client = spotify()
        client.search.return_value = {"tracks": {"items": [
            {"name": "Ditto", "artists": [{"name": "NewJeans"}]},
            None,
        ]}}

        songs = wrapper.search_tracks("NewJeans", 10)

        client.search.assert_called_once_with(q="NewJeans", type="track", limit=10)
        assert [s.title for s in songs] == ["Ditto"]

    def test_authorized_without_auth_manager(self):
        wrapper, _ = spotify()
        assert wrapper.authorization_status() is AuthorizationStatus.AUTHORIZED

    def test_no_cached_token(self):
        auth = MagicMock()
        auth.validate_token.return_value = None
        wrapper, _ = spotify(auth)
        assert wrapper.authorization_status() is AuthorizationStatus.NOT_DETERMINED

    def test_request_denied(self):
        auth = MagicMock()
        auth.get_access_token.side_effect = SpotifyOauthError("access_denied")
        wrapper, _ = spotify(auth)
        assert wrapper.request_authorization() is AuthorizationStatus.DENIED

    def test_request_granted(self):
        auth = MagicMock()
        auth.get_access_token.return_value = "token"
        wrapper, _ = spotify(auth)
        assert wrapper.request_authorization() is AuthorizationStatus.AUTHORIZED

    def test_prompt_without_terminal_is_denied(self):
        """Reading the redirect URL from a closed stdin raises EOFError."""
        auth = MagicMock()
        auth.get_access_token.side_effect = EOFError
        wrapper, _ = spotify(auth)
        assert wrapper.request_authorization() is AuthorizationStatus.DENIED

    def test_unrefreshable_cached_token(self):
        auth = MagicMock()
        auth.validate_token.side_effect = SpotifyOauthError("invalid_grant")
        wrapper, _ = spotify(auth)
        assert wrapper.authorization_status() is AuthorizationStatus.NOT_DETERMINED

    def test_non_interactive_uses_app_credentials(self, monkeypatch):
        monkeypatch.setenv("SPOTIFY_CLIENT_ID", "id")
        monkeypatch.setenv("SPOTIFY_CLIENT_SECRET", "secret")

        wrapper = SpotifyClient(interactive=False, requests_timeout=3.0)

        assert isinstance(wrapper.auth_manager, SpotifyClientCredentials)
        assert wrapper.client.requests_timeout == 3.0
        assert wrapper.authorization_status() is AuthorizationStatus.NOT_DETERMINED


class TestTidalClient:

    def test_search_artists(self):
        session = MagicMock()
        session.search.return_value = {"artists": [tidal_item("IU", 42), tidal_item("", 43)]}

        artists = TidalClient(session).search_artists("IU", 5)

        assert [(a.id, a.name) for a in artists] == [("42", "IU")]
        assert artists[0].url == "https://tidal.com/browse/artist/42"

    def test_top_tracks(self):
        session = MagicMock()
        record = session.artist.return_value
        record.get_top_tracks.return_value = [tidal_item("Good Day", artist_name="IU")]

        songs = TidalClient(session).artist_top_tracks(artist("IU", "42"))

        session.artist.assert_called_once_with("42")
        assert [(s.title, s.artist_name) for s in songs] == [("Good Day", "IU")]

    def test_top_tracks_missing_record(self):
        session = MagicMock()
        session.artist.side_effect = ObjectNotFound("gone")
        assert TidalClient(session).artist_top_tracks(artist("IU")) is None

    def test_search_tracks_without_artist(self):
        session = MagicMock()
        session.search.return_value = {"tracks": [tidal_item("Intro")]}

        songs = TidalClient(session).search_tracks("IU", 10)

        assert [(s.title, s.artist_name) for s in songs] == [("Intro", "")]

    def test_authorization_status(self):
        session = MagicMock()
        session.check_login.return_value = False
        assert TidalClient(session).authorization_status() is AuthorizationStatus.NOT_DETERMINED

    def test_request_authorization_failure(self, monkeypatch):
        client = TidalClient(MagicMock())
        monkeypatch.setattr(client, "login", MagicMock(return_value=False))
        assert client.request_authorization() is AuthorizationStatus.DENIED
