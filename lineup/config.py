"""Configuration management with secure file storage."""

import json
import os
import stat
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Optional

from lineup.constants import (
    CONFIG_DIR_MODE,
    CONFIG_FILE_MODE,
    DEFAULT_MARKET,
    DEFAULT_TRACK_WORKERS,
    LOOKUP_TIMEOUT_SEC,
    RETRY_MAX_ATTEMPTS,
    get_logger,
)
from lineup.errors import ConfigError

logger = get_logger("config")

CONFIG_DIR = Path.home() / ".config" / "lineup"
CONFIG_FILE = CONFIG_DIR / "config.json"
TIDAL_SESSION_FILE = CONFIG_DIR / "tidal_session.json"

CATALOGS = ("spotify", "tidal")


def _secure_mkdir(path: Path) -> None:
    """Create directory with secure permissions."""
    path.mkdir(parents=True, exist_ok=True)
    try:
        os.chmod(path, CONFIG_DIR_MODE)
    except OSError as e:
        logger.warning(f"Could not restrict permissions on directory {path}: {e}")


def _secure_write(path: Path, data: dict) -> None:
    """Write JSON file with secure permissions."""
    _secure_mkdir(path.parent)

    with open(path, "w") as f:
        json.dump(data, f, indent=2)

    try:
        os.chmod(path, CONFIG_FILE_MODE)
    except OSError as e:
        logger.warning(f"Could not restrict permissions on file {path}: {e}")


def _check_permissions(path: Path) -> None:
    """Warn if file has insecure permissions."""
    if not path.exists():
        return

    try:
        mode = stat.S_IMODE(os.stat(path).st_mode)
        if mode & (stat.S_IRWXG | stat.S_IRWXO):  # Group or other has access
            logger.warning(
                f"{path} is readable by other users ({oct(mode)}). "
                f"Recommended: chmod 600 {path}"
            )
    except OSError as e:
        logger.debug(f"Could not stat {path}: {e}")


@dataclass
class Config:
    catalog: str = "spotify"
    market: str = DEFAULT_MARKET
    lookup_timeout: Optional[float] = LOOKUP_TIMEOUT_SEC
    retry_attempts: int = RETRY_MAX_ATTEMPTS
    track_workers: int = DEFAULT_TRACK_WORKERS
    require_authorization: bool = False
    extra_noise_phrases: list[str] = field(default_factory=list)

    def validate(self) -> "Config":
        if self.catalog not in CATALOGS:
            raise ConfigError(f"Unknown catalog {self.catalog!r}, expected one of {', '.join(CATALOGS)}")
        if self.retry_attempts < 1:
            raise ConfigError("retry_attempts must be at least 1")
        if self.track_workers < 1:
            raise ConfigError("track_workers must be at least 1")
        if self.lookup_timeout is not None and self.lookup_timeout <= 0:
            raise ConfigError("lookup_timeout must be positive")
        return self

    def save(self, path: Path = CONFIG_FILE) -> None:
        """Save config with secure file permissions."""
        _secure_write(path, asdict(self))
        logger.debug(f"Config saved to {path}")

    @classmethod
    def load(cls, path: Path = CONFIG_FILE) -> "Config":
        """Load config from file, falling back to defaults."""
        if not path.exists():
            return cls()

        _check_permissions(path)

        try:
            with open(path) as f:
                data = json.load(f)
            known = {f.name for f in fields(cls)}
            config = cls(**{k: v for k, v in data.items() if k in known})
            logger.debug(f"Config loaded from {path}")
            return config
        except (json.JSONDecodeError, TypeError, AttributeError) as e:
            logger.warning(f"Could not read config: {e}")
            return cls()


def save_tidal_session(session, path: Path = TIDAL_SESSION_FILE) -> None:
    """Save Tidal session credentials with secure permissions."""
    session_data = {
        "token_type": session.token_type,
        "access_token": session.access_token,
        "refresh_token": session.refresh_token,
        "expiry_time": session.expiry_time.isoformat() if session.expiry_time else None,
    }
    _secure_write(path, session_data)
    logger.debug("Tidal session saved")


def load_tidal_session(session, path: Path = TIDAL_SESSION_FILE) -> bool:
    """Load Tidal session credentials. Returns True if successful."""
    if not path.exists():
        return False

    _check_permissions(path)

    try:
        with open(path) as f:
            data = json.load(f)

        session.load_oauth_session(
            token_type=data["token_type"],
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
        )

        if session.check_login():
            logger.debug("Tidal session loaded")
            return True

        logger.debug("Tidal session expired")
        return False

    except (json.JSONDecodeError, KeyError) as e:
        logger.warning(f"Could not load Tidal session: {e}")
        return False
