"""Shared fakes for lineup tests."""

import time

import pytest

from lineup.clients.base import AuthorizationStatus
from lineup.models import Artist, Resolution, Song


class FakeCatalog:
    """In-memory catalog keyed by exact query string."""

    def __init__(self, artists=None, top_tracks=None, track_results=None,
                 failing=(), status=AuthorizationStatus.AUTHORIZED,
                 granted=AuthorizationStatus.AUTHORIZED, delay=0.0):
        self.artists = artists or {}
        self.top_tracks = top_tracks or {}
        self.track_results = track_results or {}
        self.failing = set(failing)
        self.status = status
        self.granted = granted
        self.delay = delay
        self.queries = []
        self.limits = []
        self.track_queries = []
        self.auth_requests = 0

    def search_artists(self, query, limit):
        self.queries.append(query)
        self.limits.append(limit)
        if self.delay:
            time.sleep(self.delay)
        if query in self.failing:
            raise ConnectionError(f"catalog unavailable for {query}")
        return list(self.artists.get(query, []))[:limit]

    def artist_top_tracks(self, artist):
        if artist.id in self.failing:
            raise ConnectionError("detail lookup failed")
        return self.top_tracks.get(artist.id)

    def search_tracks(self, query, limit):
        self.track_queries.append((query, limit))
        return list(self.track_results.get(query, []))[:limit]

    def authorization_status(self):
        return self.status

    def request_authorization(self):
        self.auth_requests += 1
        return self.granted


class StubResolver:
    """Resolver answering from a dict of candidate -> Resolution."""

    def __init__(self, answers=None):
        self.answers = answers or {}
        self.calls = []

    def resolve(self, candidate):
        self.calls.append(candidate)
        return self.answers.get(candidate, Resolution.not_found())


def artist(name, artist_id=None):
    return Artist(id=artist_id or name.lower().replace(" ", "-"), name=name)


def song(title, artist_name):
    return Song(title=title, artist_name=artist_name)


@pytest.fixture
def catalog():
    return FakeCatalog()
