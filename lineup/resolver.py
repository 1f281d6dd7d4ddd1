"""Resolve candidate strings to catalog artists."""

from typing import Callable, Optional

from lineup.clients.base import CatalogClient
from lineup.constants import ARTIST_SEARCH_LIMIT, ZERO_WIDTH_CHARS, get_logger
from lineup.models import Artist, Resolution, normalize_key
from lineup.retry import call_with_timeout, retry_with_backoff

logger = get_logger("resolver")

NamePolicy = Callable[[str, str], bool]


def clean_query(text: str) -> str:
    """Trim whitespace and strip zero-width characters left by OCR."""
    for char in ZERO_WIDTH_CHARS:
        text = text.replace(char, "")
    return text.strip()


def names_equivalent(a: str, b: str) -> bool:
    """Equal keys, or one key contained in the other."""
    key_a = normalize_key(a)
    key_b = normalize_key(b)
    if not key_a or not key_b:
        return False
    return key_a == key_b or key_a in key_b or key_b in key_a


def pick_artist(query: str, candidates: list[Artist], equivalent: NamePolicy = names_equivalent) -> Optional[Artist]:
    """First candidate, in catalog order, whose name is equivalent to the query."""
    for artist in candidates:
        if equivalent(query, artist.name):
            return artist
    return None


class CatalogResolver:
    """Look up one candidate at a time and report a structured Resolution.

    Catalog errors never escape: they come back as ``Resolution.failed``.
    With ``retry_attempts`` above 1 a failed search is retried with backoff;
    an empty or non-matching result is never retried.
    """

    def __init__(
        self,
        catalog: CatalogClient,
        limit: int = ARTIST_SEARCH_LIMIT,
        timeout: Optional[float] = None,
        retry_attempts: int = 1,
        equivalent: NamePolicy = names_equivalent,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        self.catalog = catalog
        self.limit = limit
        self.timeout = timeout
        self.equivalent = equivalent
        retry_kwargs = {"max_attempts": retry_attempts}
        if sleep is not None:
            retry_kwargs["sleep"] = sleep
        self._search = retry_with_backoff(**retry_kwargs)(self._search_once)

    def _search_once(self, query: str) -> list[Artist]:
        return call_with_timeout(self.catalog.search_artists, self.timeout, query, self.limit)

    def resolve(self, candidate: str) -> Resolution:
        query = clean_query(candidate)
        if not query:
            return Resolution.not_found()

        logger.debug(f"Searching catalog for '{query}'")
        try:
            results = self._search(query)
        except Exception as e:
            logger.warning(f"Search failed for '{query}': {e}")
            return Resolution.failed(str(e) or type(e).__name__)

        logger.debug(f"Catalog results for '{query}': {[a.name for a in results]}")
        artist = pick_artist(query, results, self.equivalent)
        if artist is None:
            return Resolution.not_found()
        return Resolution.matched(artist)
