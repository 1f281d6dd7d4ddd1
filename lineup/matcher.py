"""Greedy longest-first matching of word spans to catalog artists.

Each content line is walked left to right. At every unclaimed word the
matcher tries spans of three, two, then one word starting there, and
commits the first span whose lookup yields an artist not seen earlier in
the run. Committed words are never reconsidered and nothing is undone.
"""

import threading
from typing import Iterable, Optional, Protocol

from lineup.constants import MAX_WINDOW_WORDS, get_logger
from lineup.models import (
    DedupLedger,
    FailedLookup,
    Match,
    MatchReport,
    MatchStatus,
    Resolution,
    Span,
    normalize_key,
)

logger = get_logger("matcher")


class Resolver(Protocol):
    def resolve(self, candidate: str) -> Resolution:
        ...


class LineCursor:
    """Position, claimed word indices and per-position trial list for one line."""

    def __init__(self, words: list[str], max_window: int = MAX_WINDOW_WORDS):
        self.words = words
        self.max_window = max_window
        self.position = 0
        self.used: set[int] = set()

    @property
    def done(self) -> bool:
        return self.position >= len(self.words)

    @property
    def at_used(self) -> bool:
        return self.position in self.used

    def windows(self) -> list[range]:
        """Unclaimed windows starting at the cursor, longest first."""
        longest = min(self.max_window, len(self.words) - self.position)
        trials = []
        for length in range(longest, 0, -1):
            window = range(self.position, self.position + length)
            if any(i in self.used for i in window):
                continue
            trials.append(window)
        return trials

    def text(self, window: range) -> str:
        return " ".join(self.words[i] for i in window)

    def commit(self, window: range) -> None:
        self.used.update(window)

    def advance(self) -> None:
        self.position += 1


def tokenize(line: str) -> list[str]:
    return [word.strip() for word in line.split() if word.strip()]


class CandidateMatcher:
    def __init__(self, resolver: Resolver, ledger: DedupLedger, max_window: int = MAX_WINDOW_WORDS):
        self.resolver = resolver
        self.ledger = ledger
        self.max_window = max_window

    def match_lines(
        self,
        lines: Iterable[str],
        cancel: Optional[threading.Event] = None,
    ) -> MatchReport:
        report = MatchReport()
        for line_index, line in enumerate(lines):
            if not self._match_line(line_index, line, report, cancel):
                report.cancelled = True
                logger.info(f"Matching cancelled with {len(report.matches)} artists confirmed")
                break
        return report

    def _match_line(
        self,
        line_index: int,
        line: str,
        report: MatchReport,
        cancel: Optional[threading.Event],
    ) -> bool:
        """Match one line into ``report``. Returns False if cancelled."""
        cursor = LineCursor(tokenize(line), self.max_window)

        while not cursor.done:
            if cursor.at_used:
                cursor.advance()
                continue

            committed = False
            for window in cursor.windows():
                candidate = cursor.text(window)
                if self.ledger.contains(normalize_key(candidate)):
                    continue

                if cancel is not None and cancel.is_set():
                    return False

                resolution = self.resolver.resolve(candidate)
                if resolution.status is MatchStatus.FAILED:
                    report.failed.append(FailedLookup(candidate, resolution.reason or ""))
                if not resolution.is_match:
                    continue

                artist = resolution.artist
                if self.ledger.contains(artist.key):
                    logger.debug(f"'{candidate}' resolved to already confirmed {artist.name}")
                    continue

                self.ledger.insert(artist.key)
                cursor.commit(window)
                span = Span(line_index, window.start, window.stop)
                report.matches.append(Match(artist=artist, span=span, query=candidate))
                logger.info(f"Confirmed {artist.name} from '{candidate}'")
                committed = True
                break

            if not committed:
                cursor.advance()

        return True
