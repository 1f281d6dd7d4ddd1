from enum import Enum
from typing import Optional, Protocol

from lineup.models import Artist, Song


class AuthorizationStatus(Enum):
    AUTHORIZED = "authorized"
    DENIED = "denied"
    NOT_DETERMINED = "not_determined"


class CatalogClient(Protocol):
    """Calls the lineup pipeline makes against a music catalog.

    Implementations return results in the catalog's own relevance order and
    let SDK errors propagate; callers decide how a failure is reported.
    """

    def search_artists(self, query: str, limit: int) -> list[Artist]:
        ...

    def artist_top_tracks(self, artist: Artist) -> Optional[list[Song]]:
        """Top tracks from the artist's detail record, None if there is no record."""
        ...

    def search_tracks(self, query: str, limit: int) -> list[Song]:
        ...

    def authorization_status(self) -> AuthorizationStatus:
        ...

    def request_authorization(self) -> AuthorizationStatus:
        ...
