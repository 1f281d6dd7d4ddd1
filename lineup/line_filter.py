"""Split raw poster text into content lines, dropping dates and boilerplate."""

import re
from typing import Iterable

from lineup.constants import DATE_PATTERN, NOISE_PHRASES

_DATE_RE = re.compile(DATE_PATTERN)


def normalize_whitespace(line: str) -> str:
    return " ".join(line.split())


def is_noise_line(line: str, phrases: Iterable[str] = NOISE_PHRASES) -> bool:
    """True for lines naming a venue, stage, month or date rather than performers."""
    lower = line.lower()
    if any(phrase.lower() in lower for phrase in phrases):
        return True
    return _DATE_RE.search(lower) is not None


def filter_lines(text: str, extra_phrases: Iterable[str] = ()) -> list[str]:
    """Return the content lines of ``text`` in order.

    Lines are trimmed and internal whitespace runs collapsed to a single
    space. Empty lines and noise lines are dropped.
    """
    phrases = tuple(NOISE_PHRASES) + tuple(p for p in extra_phrases if p)
    lines = []
    for raw in text.splitlines():
        line = normalize_whitespace(raw)
        if not line or is_noise_line(line, phrases):
            continue
        lines.append(line)
    return lines
