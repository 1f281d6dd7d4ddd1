"""Representative tracks for confirmed artists."""

import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Optional, Sequence

from lineup.clients.base import CatalogClient
from lineup.constants import (
    DEFAULT_TRACK_WORKERS,
    TOP_TRACKS_LIMIT,
    TRACK_SEARCH_LIMIT,
    get_logger,
)
from lineup.models import Artist, ArtistWithSongs, Song
from lineup.retry import call_with_timeout

logger = get_logger("tracks")


def filter_by_artist(songs: Sequence[Song], artist_name: str) -> list[Song]:
    """Songs whose performer credit contains ``artist_name``, case-insensitively."""
    needle = artist_name.lower()
    return [song for song in songs if needle in song.artist_name.lower()]


class TrackFetcher:
    def __init__(
        self,
        catalog: CatalogClient,
        limit: int = TOP_TRACKS_LIMIT,
        search_limit: int = TRACK_SEARCH_LIMIT,
        timeout: Optional[float] = None,
    ):
        self.catalog = catalog
        self.limit = limit
        self.search_limit = search_limit
        self.timeout = timeout

    def fetch(self, artist: Artist) -> list[Song]:
        """Top tracks, or a filtered track search when the artist has none.

        Lookup errors are logged and give an empty list.
        """
        try:
            top = call_with_timeout(self.catalog.artist_top_tracks, self.timeout, artist)
            if top:
                songs = list(top[: self.limit])
                logger.debug(f"Top tracks for {artist.name}: {[s.title for s in songs]}")
                return songs

            logger.debug(f"No top tracks for {artist.name}, searching tracks by name")
            found = call_with_timeout(
                self.catalog.search_tracks, self.timeout, artist.name, self.search_limit
            )
        except Exception as e:
            logger.warning(f"Could not fetch tracks for {artist.name}: {e}")
            return []

        songs = filter_by_artist(found, artist.name)[: self.limit]
        logger.debug(f"Track search for {artist.name}: {[s.title for s in songs]}")
        return songs

    def fetch_all(
        self,
        artists: Sequence[Artist],
        workers: int = DEFAULT_TRACK_WORKERS,
        progress_callback: Optional[Callable[[int, int], None]] = None,
        cancel: Optional[threading.Event] = None,
    ) -> list[ArtistWithSongs]:
        """Fetch tracks for every artist in parallel, keeping the input order.

        Artists not yet submitted when ``cancel`` is set keep an empty track list.
        """
        if not artists:
            return []

        songs_by_index: dict[int, tuple[Song, ...]] = {}
        completed = 0
        total = len(artists)

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {}
            for index, artist in enumerate(artists):
                if cancel is not None and cancel.is_set():
                    break
                futures[executor.submit(self.fetch, artist)] = index
            for future in as_completed(futures):
                completed += 1
                songs_by_index[futures[future]] = tuple(future.result())
                if progress_callback:
                    progress_callback(completed, total)

        return [
            ArtistWithSongs(artist=artist, songs=songs_by_index.get(index, ()))
            for index, artist in enumerate(artists)
        ]
