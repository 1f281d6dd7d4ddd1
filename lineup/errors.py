"""Exception types raised across lineup extraction."""


class LineupError(Exception):
    """Base class for lineup errors."""


class LookupFailure(LineupError):
    """A catalog call raised instead of returning results."""


class LookupTimeout(LookupFailure):
    """A catalog call did not finish within the configured timeout."""


class AuthorizationDenied(LineupError):
    """Catalog access was not granted and the run requires it."""


class ConfigError(LineupError):
    """Configuration names an unknown backend or holds an invalid value."""
