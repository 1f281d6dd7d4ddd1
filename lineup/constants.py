"""Constants and logging setup for lineup extraction."""

import logging
import sys

# --- Candidate matching ---
MAX_WINDOW_WORDS = 3
ARTIST_SEARCH_LIMIT = 5

# --- Tracks ---
TOP_TRACKS_LIMIT = 3
TRACK_SEARCH_LIMIT = 10

# Characters OCR and copy-paste sources leave inside otherwise clean names
ZERO_WIDTH_CHARS = ("\u200b", "\u200c", "\u200d", "\ufeff")

# --- Line filter ---
NOISE_PHRASES = (
    "tokyo marine stadium",
    "summer sonic",
    "main stage",
    "line up",
    "festival",
    "live nation",
    "olympic stadium",
    "tokyo station",
    "marine arena",
    "confirmed",
    "2025",
    "july",
    "august",
    "september",
)
# A year, or a day/month pair such as 27-29, 7.26 or 8/1
DATE_PATTERN = r"\d{4}|\d{1,2}[-./ ]\d{1,2}"

# --- Parallelism ---
DEFAULT_TRACK_WORKERS = 4

# --- Lookups ---
LOOKUP_TIMEOUT_SEC = 10.0
DEFAULT_MARKET = "US"

# --- Retry (failed lookups only, opt-in) ---
RETRY_MAX_ATTEMPTS = 1
RETRY_BASE_DELAY_SEC = 1.0
RETRY_MAX_DELAY_SEC = 10.0

# --- File permissions (octal) ---
CONFIG_FILE_MODE = 0o600  # Owner read/write only
CONFIG_DIR_MODE = 0o700   # Owner read/write/execute only

# --- Logging ---
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else logging.WARNING

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    logger = logging.getLogger("lineup")
    logger.setLevel(level)

    # Suppress noisy third-party loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("spotipy").setLevel(logging.WARNING)
    logging.getLogger("tidalapi").setLevel(logging.WARNING)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific module."""
    return logging.getLogger(f"lineup.{name}")
