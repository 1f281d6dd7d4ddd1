from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional


def normalize_key(name: str) -> str:
    """Lowercase, whitespace-free projection used to compare names."""
    return "".join(name.lower().split())


@dataclass(frozen=True)
class Artist:
    """Performer as identified by a catalog."""

    id: str
    name: str
    url: Optional[str] = None

    @property
    def key(self) -> str:
        return normalize_key(self.name)


@dataclass(frozen=True)
class Song:
    title: str
    artist_name: str


@dataclass(frozen=True)
class ArtistWithSongs:
    artist: Artist
    songs: tuple[Song, ...] = ()


class MatchStatus(Enum):
    MATCHED = "matched"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one candidate string against a catalog."""

    status: MatchStatus
    artist: Optional[Artist] = None
    reason: Optional[str] = None

    @classmethod
    def matched(cls, artist: Artist) -> "Resolution":
        return cls(MatchStatus.MATCHED, artist=artist)

    @classmethod
    def not_found(cls) -> "Resolution":
        return cls(MatchStatus.NOT_FOUND)

    @classmethod
    def failed(cls, reason: str) -> "Resolution":
        return cls(MatchStatus.FAILED, reason=reason)

    @property
    def is_match(self) -> bool:
        return self.status is MatchStatus.MATCHED


@dataclass(frozen=True)
class Span:
    """Word positions [start, end) of one content line."""

    line_index: int
    start: int
    end: int

    @property
    def indices(self) -> range:
        return range(self.start, self.end)

    def overlaps(self, other: "Span") -> bool:
        return (
            self.line_index == other.line_index
            and self.start < other.end
            and other.start < self.end
        )


@dataclass(frozen=True)
class Match:
    artist: Artist
    span: Span
    query: str


@dataclass(frozen=True)
class FailedLookup:
    query: str
    reason: str


@dataclass
class MatchReport:
    """Everything the matcher confirmed, plus candidates whose lookup failed."""

    matches: list[Match] = field(default_factory=list)
    failed: list[FailedLookup] = field(default_factory=list)
    cancelled: bool = False

    @property
    def artists(self) -> list[Artist]:
        return [match.artist for match in self.matches]


class DedupLedger:
    """Normalized keys already confirmed during one extraction run."""

    def __init__(self, keys: Iterable[str] = ()):
        self._keys: set[str] = set(keys)

    def contains(self, key: str) -> bool:
        return key in self._keys

    def insert(self, key: str) -> None:
        self._keys.add(key)

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)
