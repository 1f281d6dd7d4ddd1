"""Tidal catalog client with saved-session login."""

from typing import Optional

import tidalapi
from tidalapi.exceptions import ObjectNotFound

from lineup.clients.base import AuthorizationStatus
from lineup.config import load_tidal_session, save_tidal_session
from lineup.constants import TOP_TRACKS_LIMIT, get_logger
from lineup.models import Artist, Song

logger = get_logger("tidal")

ARTIST_URL = "https://tidal.com/browse/artist/{id}"


class TidalClient:
    def __init__(self, session: Optional[tidalapi.Session] = None):
        self.session = session or tidalapi.Session()

    def login(self) -> bool:
        """Login to Tidal via saved session or device OAuth."""
        if load_tidal_session(self.session):
            logger.info("Using saved Tidal session")
            return True

        logger.info("Starting Tidal OAuth login")
        login, future = self.session.login_oauth()
        url = login.verification_uri_complete
        if not url.startswith("http"):
            url = f"https://{url}"
        print(f"\nOpen this link to authorize Tidal access:\n{url}\n")
        future.result()

        if self.session.check_login():
            save_tidal_session(self.session)
            logger.info("Tidal login succeeded, session saved")
            return True

        logger.error("Tidal login failed")
        return False

    def search_artists(self, query: str, limit: int) -> list[Artist]:
        results = self.session.search(query, models=[tidalapi.Artist], limit=limit)
        artists = []
        for result in (results or {}).get("artists") or []:
            if not result.name:
                continue
            artists.append(
                Artist(id=str(result.id), name=result.name, url=ARTIST_URL.format(id=result.id))
            )
        return artists[:limit]

    def artist_top_tracks(self, artist: Artist) -> Optional[list[Song]]:
        try:
            record = self.session.artist(artist.id)
        except ObjectNotFound:
            logger.debug(f"No artist record for {artist.name} ({artist.id})")
            return None
        return [self._to_song(track) for track in record.get_top_tracks(limit=TOP_TRACKS_LIMIT)]

    def search_tracks(self, query: str, limit: int) -> list[Song]:
        results = self.session.search(query, models=[tidalapi.Track], limit=limit)
        tracks = (results or {}).get("tracks") or []
        return [self._to_song(track) for track in tracks if track.name][:limit]

    def authorization_status(self) -> AuthorizationStatus:
        if self.session.check_login():
            return AuthorizationStatus.AUTHORIZED
        return AuthorizationStatus.NOT_DETERMINED

    def request_authorization(self) -> AuthorizationStatus:
        try:
            granted = self.login()
        except Exception as e:
            logger.error(f"Tidal authorization failed: {e}")
            return AuthorizationStatus.DENIED
        return AuthorizationStatus.AUTHORIZED if granted else AuthorizationStatus.DENIED

    @staticmethod
    def _to_song(track) -> Song:
        artist_name = track.artist.name if track.artist else ""
        return Song(title=track.name, artist_name=artist_name)
