import threading
from dataclasses import dataclass, field
from typing import Callable, Optional

from lineup.clients.base import AuthorizationStatus, CatalogClient
from lineup.clients.spotify_client import SpotifyClient
from lineup.clients.tidal_client import TidalClient
from lineup.config import Config
from lineup.constants import get_logger
from lineup.errors import AuthorizationDenied, ConfigError
from lineup.line_filter import filter_lines
from lineup.matcher import CandidateMatcher
from lineup.models import Artist, ArtistWithSongs, DedupLedger, FailedLookup, MatchReport
from lineup.resolver import CatalogResolver, NamePolicy, names_equivalent
from lineup.tracks import TrackFetcher

logger = get_logger("service")


@dataclass
class LineupResult:
    artists: list[Artist] = field(default_factory=list)
    lineup: list[ArtistWithSongs] = field(default_factory=list)
    failed: list[FailedLookup] = field(default_factory=list)
    cancelled: bool = False
    authorization: Optional[AuthorizationStatus] = None


def create_catalog(config: Config, interactive: bool = True) -> CatalogClient:
    """Build the catalog client named by ``config.catalog``.

    ``interactive`` is False when no terminal is available to answer a
    sign-in prompt.
    """
    if config.catalog == "spotify":
        return SpotifyClient(
            market=config.market,
            interactive=interactive,
            requests_timeout=config.lookup_timeout,
        )
    if config.catalog == "tidal":
        return TidalClient()
    raise ConfigError(f"Unknown catalog {config.catalog!r}")


class LineupService:
    """Run extraction passes against one catalog.

    Every pass gets its own DedupLedger, so repeated or concurrent runs on
    the same service never see each other's confirmations.
    """

    def __init__(
        self,
        catalog: CatalogClient,
        config: Optional[Config] = None,
        equivalent: NamePolicy = names_equivalent,
    ):
        self.catalog = catalog
        self.config = (config or Config()).validate()
        self.equivalent = equivalent

    def ensure_authorized(self) -> AuthorizationStatus:
        """Request catalog access unless already granted.

        A refusal only stops the run when ``require_authorization`` is set.
        """
        status = self.catalog.authorization_status()
        if status is not AuthorizationStatus.AUTHORIZED:
            status = self.catalog.request_authorization()

        if status is not AuthorizationStatus.AUTHORIZED:
            if self.config.require_authorization:
                raise AuthorizationDenied(f"Catalog access is {status.value}")
            logger.warning(f"Catalog access is {status.value}, continuing anyway")
        return status

    def extract_artists(self, text: str, cancel: Optional[threading.Event] = None) -> MatchReport:
        lines = filter_lines(text, self.config.extra_noise_phrases)
        logger.debug(f"{len(lines)} content lines after filtering")

        resolver = CatalogResolver(
            self.catalog,
            timeout=self.config.lookup_timeout,
            retry_attempts=self.config.retry_attempts,
            equivalent=self.equivalent,
        )
        matcher = CandidateMatcher(resolver, DedupLedger())
        return matcher.match_lines(lines, cancel=cancel)

    def fetch_tracks(
        self,
        artists: list[Artist],
        progress_callback: Optional[Callable[[int, int], None]] = None,
        cancel: Optional[threading.Event] = None,
    ) -> list[ArtistWithSongs]:
        fetcher = TrackFetcher(self.catalog, timeout=self.config.lookup_timeout)
        return fetcher.fetch_all(
            artists,
            workers=self.config.track_workers,
            progress_callback=progress_callback,
            cancel=cancel,
        )

    def run(
        self,
        text: str,
        with_tracks: bool = True,
        cancel: Optional[threading.Event] = None,
        progress_callback: Optional[Callable[[int, int], None]] = None,
        authorization: Optional[AuthorizationStatus] = None,
    ) -> LineupResult:
        """Extract artists and their tracks from ``text``.

        Pass ``authorization`` when ``ensure_authorized`` already ran.
        """
        if authorization is None:
            authorization = self.ensure_authorized()
        report = self.extract_artists(text, cancel=cancel)
        result = LineupResult(
            artists=report.artists,
            failed=list(report.failed),
            cancelled=report.cancelled,
            authorization=authorization,
        )

        if with_tracks and not report.cancelled:
            result.lineup = self.fetch_tracks(report.artists, progress_callback, cancel)
            result.cancelled = cancel is not None and cancel.is_set()
        else:
            result.lineup = [ArtistWithSongs(artist=a) for a in report.artists]
        return result
