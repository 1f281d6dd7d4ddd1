import os
from typing import Optional

import spotipy
from spotipy.exceptions import SpotifyException
from spotipy.oauth2 import SpotifyClientCredentials, SpotifyOAuth, SpotifyOauthError

from lineup.clients.base import AuthorizationStatus
from lineup.constants import DEFAULT_MARKET, LOOKUP_TIMEOUT_SEC, get_logger
from lineup.models import Artist, Song

logger = get_logger("spotify")


class SpotifyClient:
    """Thin wrapper around the Spotify catalog tailored for lineup lookups.

    Interactive use signs the user in with OAuth, prompting on the terminal
    for the redirect URL. Without a terminal the app credentials flow is
    used instead; catalog search and top tracks need no user scope.
    """

    def __init__(
        self,
        market: str = DEFAULT_MARKET,
        scope: str | None = None,
        client: spotipy.Spotify | None = None,
        interactive: bool = True,
        requests_timeout: float | None = LOOKUP_TIMEOUT_SEC,
    ):
        self.market = market
        if client is not None:
            self.auth_manager = getattr(client, "auth_manager", None)
            self.client = client
            return
        if interactive:
            self.auth_manager = SpotifyOAuth(
                scope=scope or "",
                client_id=os.environ.get("SPOTIFY_CLIENT_ID"),
                client_secret=os.environ.get("SPOTIFY_CLIENT_SECRET"),
                redirect_uri=os.environ.get("SPOTIFY_REDIRECT_URI", "http://localhost:8080/callback"),
                cache_path=os.environ.get("SPOTIFY_TOKEN_CACHE", ".spotify-token-cache"),
                open_browser=False,
            )
        else:
            self.auth_manager = SpotifyClientCredentials(
                client_id=os.environ.get("SPOTIFY_CLIENT_ID"),
                client_secret=os.environ.get("SPOTIFY_CLIENT_SECRET"),
            )
        self.client = spotipy.Spotify(
            auth_manager=self.auth_manager,
            requests_timeout=requests_timeout or LOOKUP_TIMEOUT_SEC,
        )

    def search_artists(self, query: str, limit: int) -> list[Artist]:
        results = self.client.search(q=query, type="artist", limit=limit)
        items = (results or {}).get("artists", {}).get("items", [])
        return [artist for artist in map(self._extract_artist, items) if artist]

    def artist_top_tracks(self, artist: Artist) -> Optional[list[Song]]:
        try:
            results = self.client.artist_top_tracks(artist.id, country=self.market)
        except SpotifyException as e:
            if e.http_status in (400, 404):
                logger.debug(f"No artist record for {artist.name} ({artist.id})")
                return None
            raise
        return self._extract_songs((results or {}).get("tracks", []))

    def search_tracks(self, query: str, limit: int) -> list[Song]:
        results = self.client.search(q=query, type="track", limit=limit)
        return self._extract_songs((results or {}).get("tracks", {}).get("items", []))

    def authorization_status(self) -> AuthorizationStatus:
        if self.auth_manager is None:
            return AuthorizationStatus.AUTHORIZED
        if isinstance(self.auth_manager, SpotifyClientCredentials):
            return AuthorizationStatus.NOT_DETERMINED
        try:
            token = self.auth_manager.validate_token(self.auth_manager.cache_handler.get_cached_token())
        except SpotifyOauthError as e:
            logger.warning(f"Cached Spotify token could not be refreshed: {e}")
            return AuthorizationStatus.NOT_DETERMINED
        return AuthorizationStatus.AUTHORIZED if token else AuthorizationStatus.NOT_DETERMINED

    def request_authorization(self) -> AuthorizationStatus:
        if self.auth_manager is None:
            return AuthorizationStatus.AUTHORIZED
        try:
            token = self.auth_manager.get_access_token(as_dict=False)
        except (SpotifyOauthError, EOFError) as e:
            logger.warning(f"Spotify authorization was not granted: {e}")
            return AuthorizationStatus.DENIED
        return AuthorizationStatus.AUTHORIZED if token else AuthorizationStatus.DENIED

    @staticmethod
    def _extract_artist(item: dict) -> Optional[Artist]:
        artist_id = item.get("id")
        name = item.get("name")
        if not artist_id or not name:
            return None
        url = (item.get("external_urls") or {}).get("spotify")
        return Artist(id=artist_id, name=name, url=url)

    @staticmethod
    def _extract_songs(items: list) -> list[Song]:
        extracted: list[Song] = []
        for track in items:
            if not track:
                continue
            title = track.get("name")
            if not title:
                continue
            artist_name = ", ".join(a.get("name", "") for a in track.get("artists", []))
            extracted.append(Song(title=title, artist_name=artist_name))
        return extracted
